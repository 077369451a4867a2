# services.py

import enum
import logging

from sqlalchemy.orm import Session

import models
from dao import ConsultaDAO, MedicoDAO, PacienteDAO, UsuarioDAO, contem
from datas import parse_data, parse_hora

logger = logging.getLogger(__name__)


class ValidacaoError(ValueError):
    """Dados de formulário inválidos; a mensagem vai direto para o usuário."""


def validar_campos(**campos):
    vazios = [nome for nome, valor in campos.items() if valor is None or not str(valor).strip()]
    if vazios:
        raise ValidacaoError("Preencha todos os campos!")


def _texto(valor):
    return str(valor).strip() if valor is not None else valor


def _converter_data(texto):
    data = parse_data(texto)
    if data is None:
        raise ValidacaoError(f"Data inválida: '{texto}'. Use dd/mm/aaaa.")
    return data


def _converter_hora(texto):
    hora = parse_hora(texto)
    if hora is None:
        raise ValidacaoError(f"Hora inválida: '{texto}'. Use hh:mm.")
    return hora


def _converter_id(valor, entidade):
    try:
        return int(str(valor).strip())
    except ValueError:
        raise ValidacaoError(f"ID de {entidade} inválido: '{valor}'.")


def _converter_status(texto):
    if texto is None or not str(texto).strip():
        return models.StatusConsulta.AGENDADA
    if isinstance(texto, models.StatusConsulta):
        return texto
    status = models.StatusConsulta.de_texto(texto)
    if status is None:
        raise ValidacaoError(f"Status inválido: '{texto}'.")
    return status


# --- Pacientes ---

def buscar_pacientes(db: Session, termo: str = ""):
    dao = PacienteDAO(db)
    termo = (termo or "").strip()
    return dao.buscar_por_nome_ou_cpf(termo) if termo else dao.listar_todos()


def cadastrar_paciente(db: Session, nome: str, cpf: str, telefone: str):
    validar_campos(nome=nome, cpf=cpf, telefone=telefone)
    paciente = models.Paciente(nome=_texto(nome), cpf=_texto(cpf), telefone=_texto(telefone))
    if not paciente.validar_cpf():
        logger.warning("CPF fora do formato 000.000.000-00: %s", paciente.cpf)
    return PacienteDAO(db).inserir(paciente)


def atualizar_paciente(db: Session, id: int, nome: str, cpf: str, telefone: str):
    validar_campos(nome=nome, cpf=cpf, telefone=telefone)
    dao = PacienteDAO(db)
    paciente = dao.buscar_por_id(id)
    if paciente is None:
        raise ValidacaoError(f"Paciente {id} não encontrado.")
    paciente.nome = _texto(nome)
    paciente.cpf = _texto(cpf)
    paciente.atualizar_contato(_texto(telefone))
    if not paciente.validar_cpf():
        logger.warning("CPF fora do formato 000.000.000-00: %s", paciente.cpf)
    return dao.atualizar(paciente)


def remover_paciente(db: Session, id: int):
    PacienteDAO(db).deletar(id)


# --- Médicos ---

def buscar_medicos(db: Session, termo: str = ""):
    dao = MedicoDAO(db)
    termo = (termo or "").strip()
    return dao.buscar_por_nome_ou_crm(termo) if termo else dao.listar_todos()


def cadastrar_medico(db: Session, nome: str, especialidade: str, crm: str):
    validar_campos(nome=nome, especialidade=especialidade, crm=crm)
    medico = models.Medico(nome=_texto(nome), especialidade=_texto(especialidade), crm=_texto(crm))
    if not medico.validar_crm():
        logger.warning("CRM sem o prefixo 'CRM': %s", medico.crm)
    return MedicoDAO(db).inserir(medico)


def atualizar_medico(db: Session, id: int, nome: str, especialidade: str, crm: str):
    validar_campos(nome=nome, especialidade=especialidade, crm=crm)
    dao = MedicoDAO(db)
    medico = dao.buscar_por_id(id)
    if medico is None:
        raise ValidacaoError(f"Médico {id} não encontrado.")
    medico.nome = _texto(nome)
    medico.especialidade = _texto(especialidade)
    medico.crm = _texto(crm)
    if not medico.validar_crm():
        logger.warning("CRM sem o prefixo 'CRM': %s", medico.crm)
    return dao.atualizar(medico)


def remover_medico(db: Session, id: int):
    MedicoDAO(db).deletar(id)


# --- Consultas ---

def buscar_consultas(db: Session, termo: str = ""):
    dao = ConsultaDAO(db)
    termo = (termo or "").strip()
    return dao.buscar_consulta(termo) if termo else dao.listar_todos()


def _montar_consulta(db, consulta, paciente_id, medico_id, data, hora, status):
    validar_campos(paciente=paciente_id, medico=medico_id, data=data, hora=hora)
    paciente = PacienteDAO(db).buscar_por_id(_converter_id(paciente_id, "paciente"))
    if paciente is None:
        raise ValidacaoError(f"Paciente {paciente_id} não encontrado.")
    medico = MedicoDAO(db).buscar_por_id(_converter_id(medico_id, "médico"))
    if medico is None:
        raise ValidacaoError(f"Médico {medico_id} não encontrado.")
    consulta.paciente = paciente
    consulta.medico = medico
    consulta.data_agendada = _converter_data(data)
    consulta.hora_agendada = _converter_hora(hora)
    consulta.status = _converter_status(status)
    return consulta


def agendar_consulta(db: Session, paciente_id, medico_id, data: str, hora: str, status=None):
    consulta = _montar_consulta(db, models.Consulta(), paciente_id, medico_id, data, hora, status)
    logger.info("Agendando consulta para %s com %s em %s", consulta.paciente, consulta.medico, consulta.data_agendada)
    return ConsultaDAO(db).inserir(consulta)


def atualizar_consulta(db: Session, id: int, paciente_id, medico_id, data: str, hora: str, status=None):
    dao = ConsultaDAO(db)
    consulta = dao.buscar_por_id(id)
    if consulta is None:
        raise ValidacaoError(f"Consulta {id} não encontrada.")
    _montar_consulta(db, consulta, paciente_id, medico_id, data, hora, status)
    return dao.atualizar(consulta)


def alterar_status(db: Session, id: int, status):
    validar_campos(status=status)
    dao = ConsultaDAO(db)
    consulta = dao.buscar_por_id(id)
    if consulta is None:
        raise ValidacaoError(f"Consulta {id} não encontrada.")
    novo = _converter_status(status)
    if novo == models.StatusConsulta.REALIZADA:
        consulta.concluir()
    elif novo == models.StatusConsulta.CANCELADA:
        consulta.cancelar()
    else:
        consulta.status = novo
    return dao.atualizar(consulta)


def remover_consulta(db: Session, id: int):
    ConsultaDAO(db).deletar(id)


# --- Usuários ---

def listar_usuarios(db: Session):
    return UsuarioDAO(db).listar_todos()


def cadastrar_usuario(db: Session, login: str, senha: str, perfil: str):
    validar_campos(login=login, senha=senha, perfil=perfil)
    perfil_enum = models.Perfil.normalizar(perfil)
    if perfil_enum is None:
        raise ValidacaoError(f"Perfil inválido: '{perfil}'. Use ADMIN, RECEP ou MEDICO.")
    usuario = models.Usuario(login=_texto(login), senha=senha, perfil=perfil_enum.value)
    return UsuarioDAO(db).inserir(usuario)


def remover_usuario(db: Session, id: int):
    UsuarioDAO(db).deletar(id)


def garantir_admin(db: Session, login: str, senha: str):
    """Cria o primeiro ADMIN quando a tabela de usuários está vazia."""
    dao = UsuarioDAO(db)
    if dao.listar_todos():
        return None
    logger.warning("Nenhum usuário cadastrado. Criando o administrador '%s'.", login)
    return dao.inserir(models.Usuario(login=login, senha=senha, perfil=models.Perfil.ADMIN.value))


# --- Login ---

class LoginService:
    """Autentica pelo login e senha; avisos ao usuário saem pela função `avisar`."""

    def __init__(self, db: Session, avisar=print):
        self.usuario_dao = UsuarioDAO(db)
        self.avisar = avisar

    def autenticar(self, login, senha):
        login = (login or "").strip()
        if not login or not senha:
            self.avisar("Preencha usuário e senha.")
            return None

        usuario = self.usuario_dao.buscar_por_login(login)
        if usuario is None:
            logger.info("Login recusado: usuário '%s' não existe", login)
            self.avisar("Usuário não encontrado.")
            return None
        if usuario.senha != senha:
            logger.info("Login recusado: senha incorreta para '%s'", login)
            self.avisar("Senha incorreta.")
            return None

        logger.info("Login de '%s' com perfil %s", login, usuario.perfil)
        return usuario


# --- Relatórios ---

def _eh_medico(usuario):
    return usuario is not None and models.Perfil.normalizar(usuario.perfil) == models.Perfil.MEDICO


def _por_paciente(dao, usuario, paciente):
    if _eh_medico(usuario):
        return dao.listar_por_paciente_e_medico(paciente.id, usuario.id)
    return dao.listar_por_paciente(paciente.id)


def _por_medico(dao, usuario, medico):
    if _eh_medico(usuario):
        return dao.listar_por_medico(usuario.id)
    return dao.listar_por_medico(medico.id)


def _por_status(dao, usuario, status):
    if _eh_medico(usuario):
        return dao.listar_por_status_e_medico(status, usuario.id)
    return dao.listar_por_status(status)


def _por_periodo(dao, usuario, periodo):
    inicio, fim = periodo
    if _eh_medico(usuario):
        return dao.listar_por_periodo_e_medico(inicio, fim, usuario.id)
    return dao.listar_por_periodo(inicio, fim)


def _todos(dao, usuario, valor):
    if _eh_medico(usuario):
        return dao.listar_por_medico(usuario.id)
    return dao.listar_todos()


class FiltroRelatorio(enum.Enum):
    PACIENTE = "paciente"
    MEDICO = "medico"
    STATUS = "status"
    PERIODO = "periodo"
    TODOS = "todos"

    def executar(self, dao, usuario, valor=None):
        """
        Aplica o filtro. Usuários MEDICO só enxergam as próprias consultas
        (o médico de mesmo id que o usuário).
        """
        return _EXECUTORES[self](dao, usuario, valor)


_EXECUTORES = {
    FiltroRelatorio.PACIENTE: _por_paciente,
    FiltroRelatorio.MEDICO: _por_medico,
    FiltroRelatorio.STATUS: _por_status,
    FiltroRelatorio.PERIODO: _por_periodo,
    FiltroRelatorio.TODOS: _todos,
}


class RelatorioService:

    def __init__(self, db: Session):
        self.dao = ConsultaDAO(db)

    def consulta_por_paciente(self, nome):
        return (
            self.dao.db.query(models.Consulta)
            .join(models.Consulta.paciente)
            .filter(contem(models.Paciente.nome, nome))
            .order_by(models.Consulta.id)
            .all()
        )

    def consulta_por_medico(self, nome):
        return (
            self.dao.db.query(models.Consulta)
            .join(models.Consulta.medico)
            .filter(contem(models.Medico.nome, nome))
            .order_by(models.Consulta.id)
            .all()
        )

    def consulta_por_periodo(self, inicio, fim):
        return self.dao.listar_por_periodo(inicio, fim)

    def consultas_iniciais(self, usuario):
        if _eh_medico(usuario):
            return self.dao.listar_por_medico(usuario.id)
        return self.dao.listar_todos()

    def gerar(self, filtro, usuario, valor=None):
        if filtro == FiltroRelatorio.PERIODO:
            if not valor or len(valor) != 2 or not valor[0] or not valor[1]:
                raise ValidacaoError("Informe a data inicial e final para o filtro por período.")
            inicio, fim = valor
            if isinstance(inicio, str):
                inicio = _converter_data(inicio)
            if isinstance(fim, str):
                fim = _converter_data(fim)
            valor = (inicio, fim)
        elif filtro == FiltroRelatorio.STATUS:
            valor = _converter_status(valor) if valor is not None and str(valor).strip() else None

        # Filtro sem seleção cai no relatório completo
        if filtro is None or (filtro != FiltroRelatorio.TODOS and valor is None):
            filtro = FiltroRelatorio.TODOS
        logger.info("Gerando relatório %s para %s", filtro.name, getattr(usuario, "login", None))
        return filtro.executar(self.dao, usuario, valor)
