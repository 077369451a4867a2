# permissoes.py

from models import Perfil

HABILITADA = "habilitada"
DESABILITADA = "desabilitada"
OCULTA = "oculta"

# Telas de cadastro (pacientes, médicos) e agendamento de consultas
ACOES_CADASTRO = ("salvar", "editar", "remover", "limpar", "voltar")
# Tela de relatórios
ACOES_RELATORIO = ("gerar", "editar_status", "remover", "voltar")
# Menu principal, na ordem em que as opções aparecem
OPCOES_MENU = ("pacientes", "medicos", "agendar", "relatorios", "usuarios", "sair")

TELA_CADASTRO = "cadastro"
TELA_RELATORIO = "relatorio"


def acoes_cadastro(perfil):
    perfil = Perfil.normalizar(perfil)
    if perfil == Perfil.ADMIN:
        return frozenset(ACOES_CADASTRO)
    if perfil == Perfil.RECEP:
        return frozenset(ACOES_CADASTRO) - {"remover"}
    # MEDICO e perfis desconhecidos só consultam
    return frozenset({"voltar"})


def acoes_relatorio(perfil):
    perfil = Perfil.normalizar(perfil)
    if perfil == Perfil.ADMIN:
        return frozenset(ACOES_RELATORIO)
    if perfil in (Perfil.RECEP, Perfil.MEDICO):
        return frozenset(ACOES_RELATORIO) - {"remover"}
    return frozenset({"voltar"})


def opcoes_menu(perfil):
    """Estado (habilitada, desabilitada ou oculta) de cada opção do menu principal."""
    perfil = Perfil.normalizar(perfil)
    estados = dict.fromkeys(OPCOES_MENU, HABILITADA)
    if perfil != Perfil.ADMIN:
        estados["usuarios"] = OCULTA

    if perfil == Perfil.MEDICO:
        for opcao in ("pacientes", "medicos", "agendar"):
            estados[opcao] = DESABILITADA
    elif perfil is None:
        for opcao in ("pacientes", "medicos", "agendar", "relatorios"):
            estados[opcao] = OCULTA
    return estados


def pode(perfil, acao, tela=TELA_CADASTRO):
    if tela == TELA_RELATORIO:
        return acao in acoes_relatorio(perfil)
    return acao in acoes_cadastro(perfil)
