# models.py

import enum

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from database import Base


class StatusConsulta(str, enum.Enum):
    AGENDADA = "AGENDADA"
    REALIZADA = "REALIZADA"
    CANCELADA = "CANCELADA"

    @classmethod
    def de_texto(cls, texto):
        """Converte 'Agendada', ' realizada ' etc. no membro do enum; None se não existir."""
        if texto is None:
            return None
        if isinstance(texto, cls):
            return texto
        try:
            return cls[str(texto).strip().upper()]
        except KeyError:
            return None


class Perfil(str, enum.Enum):
    ADMIN = "ADMIN"
    RECEP = "RECEP"
    MEDICO = "MEDICO"

    @classmethod
    def normalizar(cls, texto):
        if texto is None:
            return None
        if isinstance(texto, cls):
            return texto
        valor = str(texto).strip().upper()
        if valor == "RECEPCIONISTA":
            return cls.RECEP
        try:
            return cls[valor]
        except KeyError:
            return None


class Usuario(Base):
    """
    Define a estrutura da tabela 'usuario'.
    O perfil fica gravado como texto livre; perfis desconhecidos não têm permissões.
    """
    __tablename__ = "usuario"

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String(80), index=True)
    senha = Column(String(120))
    perfil = Column(String(20))

    @property
    def perfil_normalizado(self):
        return Perfil.normalizar(self.perfil)

    def __repr__(self):
        return f"<Usuario {self.login} ({self.perfil})>"


class Paciente(Base):
    """
    Define a estrutura da tabela 'paciente'.
    Cada linha representa um único paciente.
    """
    __tablename__ = "paciente"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(150), index=True)
    cpf = Column(String(14))
    telefone = Column(String(20))

    def validar_cpf(self):
        # CPF formatado: 000.000.000-00
        return self.cpf is not None and len(self.cpf) == 14

    def atualizar_contato(self, telefone):
        self.telefone = telefone

    def __str__(self):
        return self.nome or ""


class Medico(Base):
    """
    Define a estrutura da tabela 'medico'.
    """
    __tablename__ = "medico"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(150), index=True)
    especialidade = Column(String(100))
    crm = Column(String(30))

    def validar_crm(self):
        return self.crm is not None and self.crm.startswith("CRM")

    def __str__(self):
        return self.nome or ""


class Consulta(Base):
    """
    Define a estrutura da tabela 'consulta'.
    Cada linha liga um paciente e um médico a uma data/hora e um status.
    """
    __tablename__ = "consulta"

    id = Column(Integer, primary_key=True, index=True)
    data_agendada = Column(Date)
    hora_agendada = Column(Time)
    status = Column(
        Enum(StatusConsulta, native_enum=False, length=20),
        default=StatusConsulta.AGENDADA,
        nullable=False,
    )
    paciente_id = Column(Integer, ForeignKey("paciente.id"), nullable=False)
    medico_id = Column(Integer, ForeignKey("medico.id"), nullable=False)

    # Sem coleção do lado do paciente/médico: remover um deles não mexe nas consultas.
    paciente = relationship("Paciente", lazy="joined")
    medico = relationship("Medico", lazy="joined")

    def __init__(self, **kwargs):
        kwargs.setdefault("status", StatusConsulta.AGENDADA)
        super().__init__(**kwargs)

    def concluir(self):
        self.status = StatusConsulta.REALIZADA

    def cancelar(self):
        self.status = StatusConsulta.CANCELADA

    def __repr__(self):
        return f"<Consulta {self.id} {self.data_agendada} {self.hora_agendada} {self.status}>"
