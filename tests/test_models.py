import datetime

import models
from dao import ConsultaDAO


def test_consulta_nova_comeca_agendada():
    assert models.Consulta().status == models.StatusConsulta.AGENDADA


def test_consulta_gravada_sem_status_fica_agendada(db, dados):
    consulta = models.Consulta(
        paciente=dados["ana"], medico=dados["carlos"],
        data_agendada=datetime.date(2024, 5, 2), hora_agendada=datetime.time(8, 0),
    )
    ConsultaDAO(db).inserir(consulta)

    db.expire_all()
    assert ConsultaDAO(db).buscar_por_id(consulta.id).status == models.StatusConsulta.AGENDADA


def test_concluir_e_cancelar():
    consulta = models.Consulta()
    consulta.concluir()
    assert consulta.status == models.StatusConsulta.REALIZADA
    consulta.cancelar()
    assert consulta.status == models.StatusConsulta.CANCELADA


def test_validar_cpf_exige_cpf_formatado():
    assert models.Paciente(cpf="123.456.789-00").validar_cpf()
    assert not models.Paciente(cpf="12345678900").validar_cpf()
    assert not models.Paciente().validar_cpf()


def test_atualizar_contato():
    paciente = models.Paciente(nome="Ana", telefone="1111")
    paciente.atualizar_contato("2222")
    assert paciente.telefone == "2222"


def test_validar_crm_exige_prefixo():
    assert models.Medico(crm="CRM-SP 1234").validar_crm()
    assert not models.Medico(crm="1234").validar_crm()
    assert not models.Medico().validar_crm()


def test_str_de_paciente_e_medico_e_o_nome():
    assert str(models.Paciente(nome="Ana Souza")) == "Ana Souza"
    assert str(models.Medico(nome="Carlos Pereira")) == "Carlos Pereira"


def test_perfil_normalizar():
    assert models.Perfil.normalizar(" admin ") == models.Perfil.ADMIN
    assert models.Perfil.normalizar("Medico") == models.Perfil.MEDICO
    assert models.Perfil.normalizar("recepcionista") == models.Perfil.RECEP
    assert models.Perfil.normalizar(models.Perfil.RECEP) == models.Perfil.RECEP
    assert models.Perfil.normalizar("ENFERMEIRO") is None
    assert models.Perfil.normalizar(None) is None


def test_status_de_texto():
    assert models.StatusConsulta.de_texto("Realizada") == models.StatusConsulta.REALIZADA
    assert models.StatusConsulta.de_texto("pendente") is None
