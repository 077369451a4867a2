import datetime

import pytest
from sqlalchemy.pool import StaticPool

import database
import models


@pytest.fixture(autouse=True)
def banco():
    """Banco SQLite em memória, recriado a cada teste."""
    engine = database.configurar("sqlite://", poolclass=StaticPool)
    database.criar_tabelas()
    yield engine
    database.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db():
    db_session = database.SessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()


@pytest.fixture
def dados(db):
    ana = models.Paciente(nome="Ana Souza", cpf="123.456.789-00", telefone="(11) 99999-0000")
    joao = models.Paciente(nome="João Lima", cpf="987.654.321-00", telefone="(21) 98888-1111")
    carlos = models.Medico(nome="Carlos Pereira", especialidade="Cardiologia", crm="CRM-SP 1234")
    marta = models.Medico(nome="Marta Reis", especialidade="Pediatria", crm="CRM-RJ 5678")
    db.add_all([ana, joao, carlos, marta])
    db.flush()

    consultas = [
        models.Consulta(paciente=ana, medico=carlos,
                        data_agendada=datetime.date(2024, 3, 5), hora_agendada=datetime.time(9, 0)),
        models.Consulta(paciente=joao, medico=marta,
                        data_agendada=datetime.date(2024, 3, 12), hora_agendada=datetime.time(14, 30),
                        status=models.StatusConsulta.REALIZADA),
        models.Consulta(paciente=ana, medico=marta,
                        data_agendada=datetime.date(2024, 4, 1), hora_agendada=datetime.time(10, 15, 30),
                        status=models.StatusConsulta.CANCELADA),
        models.Consulta(paciente=joao, medico=carlos,
                        data_agendada=datetime.date(2024, 4, 20), hora_agendada=datetime.time(9, 0)),
    ]
    db.add_all(consultas)
    db.commit()
    return {
        "ana": ana,
        "joao": joao,
        "carlos": carlos,
        "marta": marta,
        "consultas": consultas,
    }


@pytest.fixture
def digitar(monkeypatch):
    """Alimenta input() com as respostas dadas, na ordem."""
    def _digitar(*respostas):
        fila = iter(respostas)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(fila))
    return _digitar
