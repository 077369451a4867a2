# main.py

import logging
import os

from dotenv import load_dotenv

import database
import services
import telas

load_dotenv()


def configurar_logging():
    nivel = os.getenv("CLINICA_LOG_LEVEL", "WARNING").upper()
    arquivo = os.getenv("CLINICA_LOG_FILE")
    logging.basicConfig(
        level=getattr(logging, nivel, logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
        filename=arquivo or None,
    )


def inicializar():
    """Cria as tabelas e garante um administrador para o primeiro acesso."""
    database.criar_tabelas()
    with database.abrir_sessao() as db_session:
        services.garantir_admin(
            db_session,
            os.getenv("CLINICA_ADMIN_LOGIN", "admin"),
            os.getenv("CLINICA_ADMIN_SENHA", "admin"),
        )


def main():
    configurar_logging()
    # --- INICIALIZAÇÃO ---
    print("--- Iniciando o sistema e preparando o banco de dados... ---")
    inicializar()
    print("--- Sistema pronto. ---")

    try:
        while True:
            usuario = telas.tela_login()
            if usuario is None:
                continue
            telas.tela_menu(usuario)
    except (KeyboardInterrupt, EOFError):
        print("\nAté logo!")


if __name__ == "__main__":
    main()
