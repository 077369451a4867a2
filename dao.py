# dao.py

import logging

from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import Session

import models
from datas import parse_data, parse_hora

logger = logging.getLogger(__name__)


def _padrao_like(termo: str) -> str:
    # Curingas digitados pelo usuário valem como texto literal.
    escapado = termo.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escapado}%"


def contem(coluna, termo: str):
    """`coluna` contém `termo`, sem diferenciar maiúsculas (acentuadas inclusive)."""
    return func.lower(coluna).like(_padrao_like(termo.lower()), escape="\\")


class DAO:
    """
    Operações básicas de persistência de uma entidade.
    Cada DAO trabalha sobre a sessão recebida; escritas fazem commit na hora.
    """
    modelo = None

    def __init__(self, db: Session):
        self.db = db

    @property
    def _nome(self):
        return self.modelo.__name__

    def inserir(self, obj):
        logger.info("DB | Inserindo %s", self._nome)
        try:
            self.db.add(obj)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error("Erro ao inserir %s: %s", self._nome, e)
            raise
        return obj

    def atualizar(self, obj):
        logger.info("DB | Atualizando %s id=%s", self._nome, obj.id)
        try:
            obj = self.db.merge(obj)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error("Erro ao atualizar %s id=%s: %s", self._nome, obj.id, e)
            raise
        return obj

    def deletar(self, id: int):
        obj = self.db.get(self.modelo, id)
        if obj is None:
            logger.info("DB | %s id=%s não encontrado para remoção", self._nome, id)
            return
        logger.info("DB | Removendo %s id=%s", self._nome, id)
        try:
            self.db.delete(obj)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error("Erro ao remover %s id=%s: %s", self._nome, id, e)
            raise

    def buscar_por_id(self, id: int):
        return self.db.get(self.modelo, id)

    def listar_todos(self):
        return self.db.query(self.modelo).order_by(self.modelo.id).all()


class UsuarioDAO(DAO):
    modelo = models.Usuario

    def buscar_por_login(self, login: str):
        logger.info("DB | Buscando usuário pelo login: %s", login)
        return self.db.query(models.Usuario).filter(models.Usuario.login == login).order_by(models.Usuario.id).first()


class PacienteDAO(DAO):
    modelo = models.Paciente

    def buscar_por_nome_ou_cpf(self, termo: str):
        return (
            self.db.query(models.Paciente)
            .filter(or_(
                contem(models.Paciente.nome, termo),
                contem(models.Paciente.cpf, termo),
                contem(models.Paciente.telefone, termo),
            ))
            .order_by(models.Paciente.id)
            .all()
        )


class MedicoDAO(DAO):
    modelo = models.Medico

    def buscar_por_nome_ou_crm(self, termo: str):
        return (
            self.db.query(models.Medico)
            .filter(or_(
                contem(models.Medico.nome, termo),
                contem(models.Medico.especialidade, termo),
                contem(models.Medico.crm, termo),
            ))
            .order_by(models.Medico.id)
            .all()
        )


class ConsultaDAO(DAO):
    modelo = models.Consulta

    def _query(self):
        return self.db.query(models.Consulta)

    def buscar_consulta(self, termo: str):
        """
        Busca livre: nome do paciente, nome do médico ou status contendo o termo
        (sem diferenciar maiúsculas), ou data/hora agendada igual ao termo interpretado.
        """
        logger.info("DB | Busca dinâmica de consultas: %r", termo)
        criterios = [
            contem(models.Paciente.nome, termo),
            contem(models.Medico.nome, termo),
            contem(cast(models.Consulta.status, String), termo),
        ]
        data = parse_data(termo)
        if data is not None:
            criterios.append(models.Consulta.data_agendada == data)
        hora = parse_hora(termo)
        if hora is not None:
            criterios.append(models.Consulta.hora_agendada == hora)

        return (
            self._query()
            .outerjoin(models.Consulta.paciente)
            .outerjoin(models.Consulta.medico)
            .filter(or_(*criterios))
            .order_by(models.Consulta.id)
            .all()
        )

    def listar_por_medico(self, medico_id: int):
        return self._query().filter(models.Consulta.medico_id == medico_id).order_by(models.Consulta.id).all()

    def listar_por_paciente(self, paciente_id: int):
        return self._query().filter(models.Consulta.paciente_id == paciente_id).order_by(models.Consulta.id).all()

    def listar_por_status(self, status):
        return self._query().filter(models.Consulta.status == status).order_by(models.Consulta.id).all()

    def listar_por_periodo(self, data_inicial, data_final):
        return (
            self._query()
            .filter(models.Consulta.data_agendada.between(data_inicial, data_final))
            .order_by(models.Consulta.id)
            .all()
        )

    def listar_por_paciente_e_medico(self, paciente_id: int, medico_id: int):
        return (
            self._query()
            .filter(models.Consulta.paciente_id == paciente_id, models.Consulta.medico_id == medico_id)
            .order_by(models.Consulta.id)
            .all()
        )

    def listar_por_status_e_medico(self, status, medico_id: int):
        return (
            self._query()
            .filter(models.Consulta.status == status, models.Consulta.medico_id == medico_id)
            .order_by(models.Consulta.id)
            .all()
        )

    def listar_por_periodo_e_medico(self, data_inicial, data_final, medico_id: int):
        return (
            self._query()
            .filter(
                models.Consulta.data_agendada.between(data_inicial, data_final),
                models.Consulta.medico_id == medico_id,
            )
            .order_by(models.Consulta.id)
            .all()
        )
