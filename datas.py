# datas.py

import datetime
import re

# Formatos aceitos, na ordem em que são tentados.
# Regex em vez de strptime: strptime aceitaria "2024-3-5" e "9:5", mas no ISO e nos minutos a largura é fixa.
# yyyy-MM-dd, d/M/yyyy, d-M-yyyy, dd/MM/yyyy, dd-MM-yyyy
FORMATOS_DATA = (
    re.compile(r"(?P<ano>\d{4})-(?P<mes>\d{2})-(?P<dia>\d{2})"),
    re.compile(r"(?P<dia>\d{1,2})/(?P<mes>\d{1,2})/(?P<ano>\d{4})"),
    re.compile(r"(?P<dia>\d{1,2})-(?P<mes>\d{1,2})-(?P<ano>\d{4})"),
    re.compile(r"(?P<dia>\d{2})/(?P<mes>\d{2})/(?P<ano>\d{4})"),
    re.compile(r"(?P<dia>\d{2})-(?P<mes>\d{2})-(?P<ano>\d{4})"),
)

# H:mm, HH:mm, H:mm:ss, HH:mm:ss
FORMATOS_HORA = (
    re.compile(r"(?P<hora>\d{1,2}):(?P<minuto>\d{2})"),
    re.compile(r"(?P<hora>\d{2}):(?P<minuto>\d{2})"),
    re.compile(r"(?P<hora>\d{1,2}):(?P<minuto>\d{2}):(?P<segundo>\d{2})"),
    re.compile(r"(?P<hora>\d{2}):(?P<minuto>\d{2}):(?P<segundo>\d{2})"),
)


def parse_data(texto):
    """
    Tenta interpretar o texto como data usando FORMATOS_DATA.
    Retorna a primeira data válida ou None (texto vazio, malformado ou data impossível).
    """
    if texto is None:
        return None
    texto = str(texto).strip()
    for formato in FORMATOS_DATA:
        achado = formato.fullmatch(texto)
        if not achado:
            continue
        try:
            return datetime.date(int(achado["ano"]), int(achado["mes"]), int(achado["dia"]))
        except ValueError:
            continue
    return None


def parse_hora(texto):
    """Mesma ideia de parse_data, para horários."""
    if texto is None:
        return None
    texto = str(texto).strip()
    for formato in FORMATOS_HORA:
        achado = formato.fullmatch(texto)
        if not achado:
            continue
        segundo = achado.groupdict().get("segundo") or 0
        try:
            return datetime.time(int(achado["hora"]), int(achado["minuto"]), int(segundo))
        except ValueError:
            continue
    return None


def formatar_data(data):
    return data.strftime("%d/%m/%Y") if data else ""


def formatar_hora(hora):
    if hora is None:
        return ""
    return hora.strftime("%H:%M:%S" if hora.second else "%H:%M")
