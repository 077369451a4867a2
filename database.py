# database.py

import logging
import os
from contextlib import contextmanager

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()

logger = logging.getLogger(__name__)

# Caminho padrão do banco; pode ser trocado pela variável CLINICA_DATABASE_URL no .env
DATABASE_URL = os.getenv("CLINICA_DATABASE_URL", "sqlite:///./clinica.db")


def _lower(texto):
    return texto.lower() if texto is not None else None


def _registrar_lower(dbapi_conn, connection_record):
    # O lower() nativo do SQLite só converte letras ASCII ("JOÃO" viraria "joÃo").
    dbapi_conn.create_function("lower", 1, _lower, deterministic=True)


def _criar_engine(url, **kwargs):
    if not url.startswith("sqlite"):
        return create_engine(url, **kwargs)
    # SQLite só aceita a conexão na thread que a criou, a menos que isso seja desligado.
    kwargs.setdefault("connect_args", {"check_same_thread": False})
    novo_engine = create_engine(url, **kwargs)
    event.listen(novo_engine, "connect", _registrar_lower)
    return novo_engine


# Cria o "motor" do SQLAlchemy, que gerencia a conexão.
engine = _criar_engine(DATABASE_URL)

# Cria uma fábrica de sessões. Os objetos continuam legíveis depois do commit.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

# Classe Base da qual os modelos (tabelas) herdam.
Base = declarative_base()


def configurar(url, **kwargs):
    """
    Aponta a fábrica de sessões para outro banco.
    Usado na inicialização e pelos testes (sqlite em memória).
    """
    global engine
    engine = _criar_engine(url, **kwargs)
    SessionLocal.configure(bind=engine)
    logger.info("DB | Banco configurado: %s", engine.url.render_as_string(hide_password=True))
    return engine


def criar_tabelas():
    # Importa os modelos para registrar as tabelas no metadata antes do create_all.
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def abrir_sessao():
    """Abre uma sessão curta para uma única ação do usuário e garante o fechamento."""
    db_session = SessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
