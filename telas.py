# telas.py
# Telas de console do sistema: cada ação abre uma sessão curta, executa uma operação e fecha.

import logging
from functools import partial
from getpass import getpass

import permissoes
import services
from dao import MedicoDAO, PacienteDAO
from database import abrir_sessao
from datas import formatar_data, formatar_hora
from models import Perfil
from services import FiltroRelatorio, ValidacaoError

logger = logging.getLogger(__name__)

CABECALHO_CONSULTAS = ("ID", "Paciente", "Médico", "Data", "Hora", "Status")
CABECALHO_PACIENTES = ("ID", "Nome", "CPF", "Telefone")
CABECALHO_MEDICOS = ("ID", "Nome", "Especialidade", "CRM")
CABECALHO_USUARIOS = ("ID", "Login", "Perfil")

NOMES_PERFIL = {
    Perfil.ADMIN: "ADMIN",
    Perfil.MEDICO: "MÉDICO",
    Perfil.RECEP: "RECEPCIONISTA",
}


# --- Utilitários de entrada/saída ---

def perguntar(rotulo):
    return input(f"{rotulo}: ").strip()


def aviso(mensagem):
    print(f"Aviso: {mensagem}")


def confirmar(pergunta):
    return perguntar(f"{pergunta} (s/n)").lower().startswith("s")


def imprimir_tabela(cabecalho, linhas):
    linhas = [[str(c) if c is not None else "" for c in linha] for linha in linhas]
    larguras = [len(c) for c in cabecalho]
    for linha in linhas:
        larguras = [max(l, len(c)) for l, c in zip(larguras, linha)]
    formato = " | ".join(f"{{:<{l}}}" for l in larguras)
    print(formato.format(*cabecalho))
    print("-+-".join("-" * l for l in larguras))
    for linha in linhas:
        print(formato.format(*linha))
    if not linhas:
        print("(nenhum registro)")


def linhas_consultas(consultas):
    return [
        (
            c.id,
            c.paciente.nome if c.paciente else "",
            c.medico.nome if c.medico else "",
            formatar_data(c.data_agendada),
            formatar_hora(c.hora_agendada),
            c.status.name if c.status else "",
        )
        for c in consultas
    ]


def linhas_pacientes(pacientes):
    return [(p.id, p.nome, p.cpf, p.telefone) for p in pacientes]


def linhas_medicos(medicos):
    return [(m.id, m.nome, m.especialidade, m.crm) for m in medicos]


def linhas_usuarios(usuarios):
    return [(u.id, u.login, u.perfil) for u in usuarios]


def executar(descricao, funcao, *args, sucesso=None):
    """
    Roda uma operação de serviço numa sessão própria.
    Validação vira aviso; qualquer outra falha é mostrada como veio.
    """
    with abrir_sessao() as db:
        try:
            funcao(db, *args)
        except ValidacaoError as e:
            aviso(str(e))
            return False
        except Exception as e:
            logger.exception("Falha ao %s", descricao)
            print(f"Erro ao {descricao}: {e}")
            return False
    if sucesso:
        print(sucesso)
    return True


def listar(funcao, formatador, cabecalho, *args):
    with abrir_sessao() as db:
        try:
            registros = funcao(db, *args)
        except Exception as e:
            logger.exception("Falha ao listar")
            print(f"Erro ao carregar dados: {e}")
            return
        imprimir_tabela(cabecalho, formatador(registros))


def ler_id(rotulo="ID"):
    texto = perguntar(rotulo)
    if not texto.isdigit():
        aviso("Informe um ID numérico.")
        return None
    return int(texto)


# --- Login ---

def tela_login():
    """Pede usuário e senha; devolve o Usuario autenticado ou None."""
    print("\n=== SISTEMA DE CONSULTAS MÉDICAS ===")
    print("Acesse Sua Conta")
    login = perguntar("Usuário")
    senha = getpass("Senha: ")

    with abrir_sessao() as db:
        usuario = services.LoginService(db, avisar=aviso).autenticar(login, senha)
    if usuario is None:
        return None

    print("Login realizado com sucesso!")
    perfil = Perfil.normalizar(usuario.perfil)
    if perfil is None:
        print(f"Erro: Perfil desconhecido: {usuario.perfil}")
        return None
    print(f"Você entrou como {NOMES_PERFIL[perfil]}.")
    return usuario


# --- Menu principal ---

ROTULOS_MENU = {
    "pacientes": "Cadastro de Pacientes",
    "medicos": "Cadastro de Médicos",
    "agendar": "Agendar Consulta",
    "relatorios": "Relatórios",
    "usuarios": "Usuários",
    "sair": "Sair",
}


def tela_menu(usuario):
    telas = {
        "pacientes": tela_pacientes,
        "medicos": tela_medicos,
        "agendar": tela_agendamento,
        "relatorios": tela_relatorios,
        "usuarios": tela_usuarios,
    }
    while True:
        estados = permissoes.opcoes_menu(usuario.perfil)
        visiveis = [o for o in permissoes.OPCOES_MENU if estados[o] != permissoes.OCULTA]

        print("\n=== O QUE DESEJA FAZER? ===")
        for numero, opcao in enumerate(visiveis, start=1):
            sufixo = " (indisponível)" if estados[opcao] == permissoes.DESABILITADA else ""
            print(f"{numero}. {ROTULOS_MENU[opcao]}{sufixo}")

        escolha = perguntar("Opção")
        if not escolha.isdigit() or not 1 <= int(escolha) <= len(visiveis):
            aviso("Opção inválida.")
            continue
        opcao = visiveis[int(escolha) - 1]
        if estados[opcao] == permissoes.DESABILITADA:
            aviso("Opção indisponível para o seu perfil.")
            continue
        if opcao == "sair":
            return
        telas[opcao](usuario)


# --- Cadastros ---

def _tela_cadastro(usuario, titulo, entidade, cabecalho, formatador, buscar, ler_campos,
                   cadastrar, atualizar, remover, antes_do_formulario=None, feminino=False):
    pode = partial(permissoes.pode, usuario.perfil)
    a = "a" if feminino else "o"
    nome = entidade.capitalize()
    termo = ""
    while True:
        print(f"\n=== {titulo} ===")
        listar(buscar, formatador, cabecalho, termo)

        opcoes = ["[b] Buscar"]
        if pode("salvar"):
            opcoes.append("[n] Novo")
        if pode("editar"):
            opcoes.append("[e] Editar")
        if pode("remover"):
            opcoes.append("[r] Remover")
        opcoes.append("[v] Voltar")
        print("  ".join(opcoes))

        escolha = perguntar("Opção").lower()
        if escolha == "v":
            return
        if escolha == "b":
            termo = perguntar("Buscar")
        elif escolha == "n" and pode("salvar"):
            if antes_do_formulario:
                antes_do_formulario()
            executar(f"salvar {entidade}", cadastrar, *ler_campos(),
                     sucesso=f"{nome} cadastrad{a} com sucesso!")
        elif escolha == "e" and pode("editar"):
            id = ler_id(f"ID d{a} {entidade} para editar")
            if id is None:
                continue
            if antes_do_formulario:
                antes_do_formulario()
            executar(f"atualizar {entidade}", atualizar, id, *ler_campos(),
                     sucesso=f"{nome} atualizad{a} com sucesso!")
        elif escolha == "r" and pode("remover"):
            id = ler_id(f"ID d{a} {entidade} para remover")
            if id is None:
                continue
            if confirmar(f"Deseja realmente remover {'esta' if feminino else 'este'} {entidade}?"):
                executar(f"remover {entidade}", remover, id,
                         sucesso=f"{nome} removid{a} com sucesso!")
        else:
            aviso("Opção inválida.")


def tela_pacientes(usuario):
    _tela_cadastro(
        usuario, "CADASTRO DE PACIENTE", "paciente", CABECALHO_PACIENTES, linhas_pacientes,
        services.buscar_pacientes,
        lambda: (perguntar("Nome"), perguntar("CPF"), perguntar("Telefone")),
        services.cadastrar_paciente, services.atualizar_paciente, services.remover_paciente,
    )


def tela_medicos(usuario):
    _tela_cadastro(
        usuario, "CADASTRO DE MÉDICO", "médico", CABECALHO_MEDICOS, linhas_medicos,
        services.buscar_medicos,
        lambda: (perguntar("Nome"), perguntar("Especialidade"), perguntar("CRM")),
        services.cadastrar_medico, services.atualizar_medico, services.remover_medico,
    )


def _mostrar_pacientes_e_medicos():
    print("\nPacientes:")
    listar(services.buscar_pacientes, linhas_pacientes, CABECALHO_PACIENTES)
    print("\nMédicos:")
    listar(services.buscar_medicos, linhas_medicos, CABECALHO_MEDICOS)


def tela_agendamento(usuario):
    _tela_cadastro(
        usuario, "AGENDAMENTO DE CONSULTA", "consulta", CABECALHO_CONSULTAS, linhas_consultas,
        services.buscar_consultas,
        lambda: (
            perguntar("ID do paciente"),
            perguntar("ID do médico"),
            perguntar("Data (dd/mm/aaaa)"),
            perguntar("Hora (hh:mm)"),
            perguntar("Status [Agendada/Realizada/Cancelada] (vazio = Agendada)"),
        ),
        services.agendar_consulta, services.atualizar_consulta, services.remover_consulta,
        antes_do_formulario=_mostrar_pacientes_e_medicos, feminino=True,
    )


# --- Relatórios ---

def _ler_filtro(usuario):
    print("Filtro: [1] Por Paciente  [2] Por Médico  [3] Por Status  [4] Por Período  [5] Todos")
    escolha = perguntar("Filtro")
    filtros = {
        "1": FiltroRelatorio.PACIENTE,
        "2": FiltroRelatorio.MEDICO,
        "3": FiltroRelatorio.STATUS,
        "4": FiltroRelatorio.PERIODO,
        "5": FiltroRelatorio.TODOS,
    }
    filtro = filtros.get(escolha)
    if filtro is None:
        aviso("Filtro inválido.")
        return None, None

    perfil = Perfil.normalizar(usuario.perfil)
    # Só ADMIN e RECEP escolhem paciente/médico; para os demais o filtro fica sem seleção.
    pode_selecionar = perfil in (Perfil.ADMIN, Perfil.RECEP)
    if filtro == FiltroRelatorio.PACIENTE and pode_selecionar:
        listar(services.buscar_pacientes, linhas_pacientes, CABECALHO_PACIENTES)
        return filtro, ler_id("ID do paciente")
    if filtro == FiltroRelatorio.MEDICO and pode_selecionar:
        listar(services.buscar_medicos, linhas_medicos, CABECALHO_MEDICOS)
        return filtro, ler_id("ID do médico")
    if filtro == FiltroRelatorio.STATUS:
        return filtro, perguntar("Status [Agendada/Realizada/Cancelada]")
    if filtro == FiltroRelatorio.PERIODO:
        return filtro, (perguntar("De (dd/mm/aaaa)"), perguntar("Até (dd/mm/aaaa)"))
    return filtro, None


def _gerar_relatorio(db, usuario, filtro, valor):
    if filtro == FiltroRelatorio.PACIENTE and valor is not None:
        valor = PacienteDAO(db).buscar_por_id(valor)
        if valor is None:
            raise ValidacaoError("Paciente não encontrado.")
    elif filtro == FiltroRelatorio.MEDICO and valor is not None:
        valor = MedicoDAO(db).buscar_por_id(valor)
        if valor is None:
            raise ValidacaoError("Médico não encontrado.")
    return services.RelatorioService(db).gerar(filtro, usuario, valor)


def _consultas_relatorio(db, usuario, modo, argumento):
    if modo == "busca":
        return services.buscar_consultas(db, argumento)
    if modo == "relatorio":
        return _gerar_relatorio(db, usuario, *argumento)
    return services.RelatorioService(db).consultas_iniciais(usuario)


def tela_relatorios(usuario):
    pode = partial(permissoes.pode, usuario.perfil, tela=permissoes.TELA_RELATORIO)
    modo, argumento = "iniciais", None
    while True:
        print("\n=== RELATÓRIOS ===")
        with abrir_sessao() as db:
            try:
                consultas = _consultas_relatorio(db, usuario, modo, argumento)
            except ValidacaoError as e:
                aviso(str(e))
                modo, argumento = "iniciais", None
                consultas = services.RelatorioService(db).consultas_iniciais(usuario)
            except Exception as e:
                logger.exception("Falha ao gerar relatório")
                print(f"Erro ao gerar relatório: {e}")
                modo, argumento = "iniciais", None
                consultas = []
            imprimir_tabela(CABECALHO_CONSULTAS, linhas_consultas(consultas))

        opcoes = ["[b] Buscar"]
        if pode("gerar"):
            opcoes.append("[g] Gerar Relatório")
        if pode("editar_status"):
            opcoes.append("[s] Editar Status")
        if pode("remover"):
            opcoes.append("[r] Remover")
        opcoes.append("[v] Voltar ao Menu")
        print("  ".join(opcoes))

        escolha = perguntar("Opção").lower()
        if escolha == "v":
            return
        if escolha == "b":
            termo = perguntar("Buscar")
            modo, argumento = ("busca", termo) if termo else ("iniciais", None)
        elif escolha == "g" and pode("gerar"):
            filtro, valor = _ler_filtro(usuario)
            if filtro is not None:
                modo, argumento = "relatorio", (filtro, valor)
        elif escolha == "s" and pode("editar_status"):
            id = ler_id("ID da consulta")
            if id is None:
                continue
            status = perguntar("Novo status [Agendada/Realizada/Cancelada]")
            if executar("atualizar status", services.alterar_status, id, status,
                        sucesso="Status atualizado com sucesso!"):
                modo, argumento = "iniciais", None
        elif escolha == "r" and pode("remover"):
            id = ler_id("ID da consulta")
            if id is None:
                continue
            if confirmar("Deseja realmente remover esta consulta?"):
                if executar("remover consulta", services.remover_consulta, id,
                            sucesso="Consulta removida com sucesso!"):
                    modo, argumento = "iniciais", None
        else:
            aviso("Opção inválida.")


# --- Usuários ---

def tela_usuarios(usuario):
    if Perfil.normalizar(usuario.perfil) != Perfil.ADMIN:
        aviso("Opção indisponível para o seu perfil.")
        return
    while True:
        print("\n=== USUÁRIOS ===")
        listar(services.listar_usuarios, linhas_usuarios, CABECALHO_USUARIOS)
        print("[n] Novo  [r] Remover  [v] Voltar")
        escolha = perguntar("Opção").lower()
        if escolha == "v":
            return
        if escolha == "n":
            login = perguntar("Login")
            senha = getpass("Senha: ")
            perfil = perguntar("Perfil [ADMIN/RECEP/MEDICO]")
            executar("salvar usuário", services.cadastrar_usuario, login, senha, perfil,
                     sucesso="Usuário cadastrado com sucesso!")
        elif escolha == "r":
            id = ler_id("ID do usuário")
            if id is None:
                continue
            if id == usuario.id:
                aviso("Não é possível remover o usuário logado.")
                continue
            if confirmar("Deseja realmente remover este usuário?"):
                executar("remover usuário", services.remover_usuario, id,
                         sucesso="Usuário removido com sucesso!")
        else:
            aviso("Opção inválida.")
