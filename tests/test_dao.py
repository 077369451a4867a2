import datetime

import pytest

import database
import models
from dao import ConsultaDAO, MedicoDAO, PacienteDAO, UsuarioDAO


def _ids(consultas):
    return [c.id for c in consultas]


def test_inserir_listar_e_buscar_por_id(db):
    dao = PacienteDAO(db)
    ana = dao.inserir(models.Paciente(nome="Ana", cpf="111.111.111-11", telefone="1"))
    bia = dao.inserir(models.Paciente(nome="Bia", cpf="222.222.222-22", telefone="2"))

    assert [p.nome for p in dao.listar_todos()] == ["Ana", "Bia"]
    assert dao.buscar_por_id(bia.id).nome == "Bia"
    assert dao.buscar_por_id(999) is None
    assert ana.id < bia.id


def test_atualizar_faz_merge_de_objeto_destacado(db, dados):
    alterado = models.Medico(id=dados["carlos"].id, nome="Carlos P.", especialidade="Clínica", crm="CRM 1")
    db.expunge_all()

    MedicoDAO(db).atualizar(alterado)

    db.expire_all()
    medico = MedicoDAO(db).buscar_por_id(dados["carlos"].id)
    assert (medico.nome, medico.especialidade, medico.crm) == ("Carlos P.", "Clínica", "CRM 1")


def test_deletar_por_id_e_ignora_id_inexistente(db, dados):
    dao = ConsultaDAO(db)
    dao.deletar(dados["consultas"][0].id)
    dao.deletar(999)

    assert _ids(dao.listar_todos()) == [2, 3, 4]


def test_deletar_paciente_nao_mexe_nas_consultas(db, dados):
    PacienteDAO(db).deletar(dados["ana"].id)

    outra_sessao = database.SessionLocal()
    try:
        consultas = ConsultaDAO(outra_sessao).listar_todos()
        assert _ids(consultas) == [1, 2, 3, 4]
        assert consultas[0].paciente is None
        assert consultas[0].paciente_id == dados["ana"].id
    finally:
        outra_sessao.close()


def test_erro_na_gravacao_faz_rollback_e_propaga(db):
    dao = ConsultaDAO(db)
    with pytest.raises(Exception):
        dao.inserir(models.Consulta(data_agendada=datetime.date(2024, 1, 1)))

    # sessão continua utilizável depois do rollback
    assert dao.listar_todos() == []


def test_buscar_usuario_por_login(db):
    dao = UsuarioDAO(db)
    dao.inserir(models.Usuario(login="recepcao", senha="123", perfil="RECEP"))

    assert dao.buscar_por_login("recepcao").perfil == "RECEP"
    assert dao.buscar_por_login("RECEPCAO") is None
    assert dao.buscar_por_login("outro") is None


def test_buscar_paciente_por_nome_cpf_ou_telefone(db, dados):
    dao = PacienteDAO(db)
    assert [p.nome for p in dao.buscar_por_nome_ou_cpf("souza")] == ["Ana Souza"]
    assert [p.nome for p in dao.buscar_por_nome_ou_cpf("987.654")] == ["João Lima"]
    assert [p.nome for p in dao.buscar_por_nome_ou_cpf("(21)")] == ["João Lima"]
    assert dao.buscar_por_nome_ou_cpf("inexistente") == []


def test_buscar_medico_por_nome_especialidade_ou_crm(db, dados):
    dao = MedicoDAO(db)
    assert [m.nome for m in dao.buscar_por_nome_ou_crm("pediatria")] == ["Marta Reis"]
    assert [m.nome for m in dao.buscar_por_nome_ou_crm("CRM-SP")] == ["Carlos Pereira"]
    assert [m.nome for m in dao.buscar_por_nome_ou_crm("r")] == ["Carlos Pereira", "Marta Reis"]


class TestBuscaDinamicaDeConsultas:

    def test_nome_do_paciente_sem_diferenciar_maiusculas(self, db, dados):
        assert _ids(ConsultaDAO(db).buscar_consulta("ANA sou")) == [1, 3]

    def test_nome_do_medico(self, db, dados):
        assert _ids(ConsultaDAO(db).buscar_consulta("marta")) == [2, 3]

    def test_status(self, db, dados):
        dao = ConsultaDAO(db)
        assert _ids(dao.buscar_consulta("agend")) == [1, 4]
        assert _ids(dao.buscar_consulta("Cancelada")) == [3]

    def test_uniao_dos_criterios_na_ordem_da_chave(self, db, dados):
        # "ca" casa com o médico Carlos (consultas 1 e 4) e com o status CANCELADA (consulta 3)
        assert _ids(ConsultaDAO(db).buscar_consulta("ca")) == [1, 3, 4]

    @pytest.mark.parametrize("termo", ["2024-03-12", "12/3/2024", "12-3-2024", "12/03/2024", "12-03-2024"])
    def test_data_em_qualquer_formato(self, db, dados, termo):
        assert _ids(ConsultaDAO(db).buscar_consulta(termo)) == [2]

    @pytest.mark.parametrize("termo", ["9:00", "09:00", "9:00:00", "09:00:00"])
    def test_hora(self, db, dados, termo):
        assert _ids(ConsultaDAO(db).buscar_consulta(termo)) == [1, 4]

    def test_hora_com_segundos(self, db, dados):
        assert _ids(ConsultaDAO(db).buscar_consulta("10:15:30")) == [3]

    def test_maiusculas_acentuadas(self, db, dados):
        dao = ConsultaDAO(db)
        assert _ids(dao.buscar_consulta("JOÃO")) == [2, 4]
        assert _ids(dao.buscar_consulta("joão lima")) == [2, 4]

    def test_curingas_sao_literais(self, db, dados):
        dao = ConsultaDAO(db)
        assert dao.buscar_consulta("%") == []
        assert dao.buscar_consulta("_") == []

    def test_sem_resultado(self, db, dados):
        assert ConsultaDAO(db).buscar_consulta("ortopedia") == []


def test_listagens_de_consultas(db, dados):
    dao = ConsultaDAO(db)
    carlos, marta = dados["carlos"].id, dados["marta"].id
    ana, joao = dados["ana"].id, dados["joao"].id

    assert _ids(dao.listar_por_medico(carlos)) == [1, 4]
    assert _ids(dao.listar_por_paciente(ana)) == [1, 3]
    assert _ids(dao.listar_por_status(models.StatusConsulta.AGENDADA)) == [1, 4]
    assert _ids(dao.listar_por_paciente_e_medico(joao, marta)) == [2]
    assert _ids(dao.listar_por_status_e_medico(models.StatusConsulta.AGENDADA, marta)) == []
    assert _ids(dao.listar_por_status_e_medico(models.StatusConsulta.AGENDADA, carlos)) == [1, 4]


def test_listar_por_periodo_inclui_os_limites(db, dados):
    dao = ConsultaDAO(db)
    inicio, fim = datetime.date(2024, 3, 5), datetime.date(2024, 4, 1)

    assert _ids(dao.listar_por_periodo(inicio, fim)) == [1, 2, 3]
    assert _ids(dao.listar_por_periodo_e_medico(inicio, fim, dados["marta"].id)) == [2, 3]
    assert dao.listar_por_periodo(datetime.date(2025, 1, 1), datetime.date(2025, 12, 31)) == []


def test_busca_de_paciente_e_medico_com_acentos(db):
    PacienteDAO(db).inserir(models.Paciente(nome="ÉRICA SANTOS", cpf="111.111.111-11", telefone="1"))
    MedicoDAO(db).inserir(models.Medico(nome="Otávio Luz", especialidade="Ortopedia", crm="CRM 9"))

    assert [p.nome for p in PacienteDAO(db).buscar_por_nome_ou_cpf("érica")] == ["ÉRICA SANTOS"]
    assert [m.nome for m in MedicoDAO(db).buscar_por_nome_ou_crm("OTÁVIO")] == ["Otávio Luz"]
