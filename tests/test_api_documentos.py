# tests/test_api_documentos.py
"""
Testes de integração das rotas de documentos e do dashboard

Uso:
    pytest tests/test_api_documentos.py -v
"""

import pytest
from datetime import timedelta

from utils.timezone import now_utc


def iso(dt):
    return dt.isoformat()


def novo_documento(client, headers, process_number="2024.001.0156", dias=1, **kwargs):
    dados = {
        "process_number": process_number,
        "prisoner_name": "João Silva Santos",
        "type": "Certidão",
        "deadline": iso(now_utc() + timedelta(days=dias)),
    }
    dados.update(kwargs)
    response = client.post("/documents", json=dados, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAutenticacaoObrigatoria:

    @pytest.mark.parametrize("rota", [
        "/documents", "/documents/archived", "/documents/deadlines", "/dashboard/stats",
    ])
    def test_sem_token(self, client, rota):
        assert client.get(rota).status_code == 401


class TestCriarDocumento:

    def test_criar(self, client, user_headers, common_user):
        doc = novo_documento(client, user_headers, assigned_to=common_user.id)

        assert doc["status"] == "Em Andamento"
        assert doc["assigned_user_name"] == "Marco Silva"
        assert doc["completed_at"] is None
        assert doc["is_archived"] is False
        assert doc["display_status"] == "Urgente"
        assert doc["days_until_deadline"] == 1

    def test_criar_concluido_grava_data(self, client, user_headers):
        doc = novo_documento(client, user_headers, status="Concluído")

        assert doc["completed_at"] is not None
        assert doc["display_status"] == "Concluído"

    def test_processo_duplicado(self, client, user_headers):
        novo_documento(client, user_headers)

        response = client.post("/documents", json={
            "process_number": "2024.001.0156",
            "prisoner_name": "Outro",
            "type": "Ofício",
            "deadline": iso(now_utc()),
        }, headers=user_headers)

        assert response.status_code == 409

    def test_tipo_invalido(self, client, user_headers):
        response = client.post("/documents", json={
            "process_number": "2024.001.0157",
            "prisoner_name": "Maria",
            "type": "Mandado",
            "deadline": iso(now_utc()),
        }, headers=user_headers)

        assert response.status_code == 422

    def test_status_derivado_nao_aceito(self, client, user_headers):
        response = client.post("/documents", json={
            "process_number": "2024.001.0157",
            "prisoner_name": "Maria",
            "type": "Ofício",
            "deadline": iso(now_utc()),
            "status": "Vencido",
        }, headers=user_headers)

        assert response.status_code == 422

    def test_responsavel_inexistente(self, client, user_headers):
        response = client.post("/documents", json={
            "process_number": "2024.001.0157",
            "prisoner_name": "Maria",
            "type": "Ofício",
            "deadline": iso(now_utc()),
            "assigned_to": 999,
        }, headers=user_headers)

        assert response.status_code == 400


class TestConsultarDocumentos:

    def test_listar_e_obter(self, client, user_headers):
        doc = novo_documento(client, user_headers)

        lista = client.get("/documents", headers=user_headers).json()
        unico = client.get(f"/documents/{doc['id']}", headers=user_headers)

        assert [d["id"] for d in lista] == [doc["id"]]
        assert unico.status_code == 200
        assert unico.json()["process_number"] == "2024.001.0156"

    def test_nao_encontrado(self, client, user_headers):
        assert client.get("/documents/999", headers=user_headers).status_code == 404

    def test_limit_retorna_recentes(self, client, user_headers):
        ids = [novo_documento(client, user_headers, f"2024.001.{n:04d}")["id"] for n in range(3)]

        lista = client.get("/documents?limit=2", headers=user_headers).json()

        assert [d["id"] for d in lista] == [ids[2], ids[1]]

    def test_filtrar_por_responsavel(self, client, user_headers, common_user, admin_user):
        do_marco = novo_documento(client, user_headers, "2024.001.0001", dias=5, assigned_to=common_user.id)
        novo_documento(client, user_headers, "2024.001.0002", assigned_to=admin_user.id)
        novo_documento(client, user_headers, "2024.001.0003")
        arquivado = novo_documento(client, user_headers, "2024.001.0004", assigned_to=common_user.id)
        client.post(f"/documents/{arquivado['id']}/archive", headers=user_headers)
        urgente = novo_documento(client, user_headers, "2024.001.0005", dias=1, assigned_to=common_user.id)

        lista = client.get(f"/documents?assigned_to={common_user.id}", headers=user_headers).json()
        recente = client.get(f"/documents?assigned_to={common_user.id}&limit=1", headers=user_headers).json()

        assert [d["id"] for d in lista] == [urgente["id"], do_marco["id"]]
        assert [d["id"] for d in recente] == [urgente["id"]]

    def test_vencido_exibido(self, client, user_headers):
        doc = novo_documento(client, user_headers, dias=-2)

        assert doc["display_status"] == "Vencido"
        assert doc["days_until_deadline"] < 0

    def test_prazos_agrupados(self, client, user_headers):
        vencido = novo_documento(client, user_headers, "2024.001.0001", dias=-1)
        urgente = novo_documento(client, user_headers, "2024.001.0002", dias=1)
        semana = novo_documento(client, user_headers, "2024.001.0003", dias=5)
        proximo = novo_documento(client, user_headers, "2024.001.0004", dias=30)
        concluido = novo_documento(client, user_headers, "2024.001.0005", dias=3, status="Concluído")

        grupos = client.get("/documents/deadlines", headers=user_headers).json()

        assert [d["id"] for d in grupos["overdue"]] == [vencido["id"]]
        assert [d["id"] for d in grupos["urgent"]] == [urgente["id"]]
        assert [d["id"] for d in grupos["this_week"]] == [semana["id"]]
        assert [d["id"] for d in grupos["upcoming"]] == [proximo["id"]]
        assert [d["id"] for d in grupos["completed"]] == [concluido["id"]]


class TestAtualizarDocumento:

    def test_concluir_e_reabrir(self, client, user_headers):
        doc = novo_documento(client, user_headers)

        concluido = client.patch(f"/documents/{doc['id']}", json={"status": "Concluído"}, headers=user_headers)
        reaberto = client.put(f"/documents/{doc['id']}", json={"status": "Em Andamento"}, headers=user_headers)

        assert concluido.status_code == 200
        assert concluido.json()["completed_at"] is not None
        assert reaberto.json()["completed_at"] is None
        assert reaberto.json()["status"] == "Em Andamento"

    def test_reatribuir(self, client, user_headers, admin_user):
        doc = novo_documento(client, user_headers)

        response = client.patch(
            f"/documents/{doc['id']}", json={"assigned_to": admin_user.id}, headers=user_headers
        )

        assert response.json()["assigned_user_name"] == "Admin Teste"

    def test_remover_responsavel(self, client, user_headers, common_user):
        doc = novo_documento(client, user_headers, assigned_to=common_user.id)

        response = client.patch(f"/documents/{doc['id']}", json={"assigned_to": None}, headers=user_headers)

        assert response.json()["assigned_to"] is None

    def test_processo_duplicado_na_edicao(self, client, user_headers):
        novo_documento(client, user_headers, "2024.001.0001")
        doc = novo_documento(client, user_headers, "2024.001.0002")

        response = client.patch(
            f"/documents/{doc['id']}", json={"process_number": "2024.001.0001"}, headers=user_headers
        )

        assert response.status_code == 409

    def test_atualizar_inexistente(self, client, user_headers):
        response = client.patch("/documents/999", json={"status": "Concluído"}, headers=user_headers)

        assert response.status_code == 404


class TestAtualizacaoEmLote:

    def test_lote(self, client, user_headers):
        ids = [novo_documento(client, user_headers, f"2024.001.{n:04d}")["id"] for n in range(2)]

        response = client.patch(
            "/documents/bulk", json={"ids": ids, "status": "Concluído"}, headers=user_headers
        )

        assert response.status_code == 200
        assert response.json() == {"updated": 2, "ids": ids}
        for documento_id in ids:
            assert client.get(f"/documents/{documento_id}", headers=user_headers).json()["status"] == "Concluído"

    def test_lote_tudo_ou_nada(self, client, user_headers):
        doc = novo_documento(client, user_headers)

        response = client.patch(
            "/documents/bulk", json={"ids": [doc["id"], 999], "status": "Concluído"}, headers=user_headers
        )

        assert response.status_code == 404
        assert client.get(f"/documents/{doc['id']}", headers=user_headers).json()["status"] == "Em Andamento"

    def test_lote_sem_alteracoes(self, client, user_headers):
        doc = novo_documento(client, user_headers)

        response = client.patch("/documents/bulk", json={"ids": [doc["id"]]}, headers=user_headers)

        assert response.status_code == 400


class TestArquivamento:

    def test_arquivar_e_restaurar(self, client, user_headers):
        doc = novo_documento(client, user_headers, status="Concluído")

        arquivado = client.post(f"/documents/{doc['id']}/archive", headers=user_headers).json()
        ativos = client.get("/documents", headers=user_headers).json()
        arquivados = client.get("/documents/archived", headers=user_headers).json()

        assert arquivado["is_archived"] is True
        assert arquivado["status"] == "Arquivado"
        assert arquivado["archived_at"] is not None
        assert arquivado["display_status"] == "Arquivado"
        assert ativos == []
        assert [d["id"] for d in arquivados] == [doc["id"]]

        restaurado = client.post(f"/documents/{doc['id']}/restore", headers=user_headers).json()

        assert restaurado["is_archived"] is False
        assert restaurado["archived_at"] is None
        assert restaurado["completed_at"] is None
        assert restaurado["status"] == "Em Andamento"

    def test_arquivar_sem_conclusao_grava_data(self, client, user_headers):
        doc = novo_documento(client, user_headers)

        arquivado = client.post(f"/documents/{doc['id']}/archive", headers=user_headers).json()

        assert arquivado["completed_at"] is not None

    def test_arquivar_duas_vezes(self, client, user_headers):
        doc = novo_documento(client, user_headers)
        client.post(f"/documents/{doc['id']}/archive", headers=user_headers)

        assert client.post(f"/documents/{doc['id']}/archive", headers=user_headers).status_code == 400

    def test_restaurar_nao_arquivado(self, client, user_headers):
        doc = novo_documento(client, user_headers)

        assert client.patch(f"/documents/{doc['id']}/restore", headers=user_headers).status_code == 400

    def test_status_de_arquivado_nao_muda(self, client, user_headers):
        doc = novo_documento(client, user_headers)
        client.post(f"/documents/{doc['id']}/archive", headers=user_headers)

        response = client.patch(f"/documents/{doc['id']}", json={"status": "Em Andamento"}, headers=user_headers)

        assert response.status_code == 400


class TestExcluirDocumento:

    def test_excluir(self, client, user_headers):
        doc = novo_documento(client, user_headers)

        response = client.delete(f"/documents/{doc['id']}", headers=user_headers)

        assert response.status_code == 204
        assert client.get(f"/documents/{doc['id']}", headers=user_headers).status_code == 404

    def test_excluir_inexistente(self, client, user_headers):
        assert client.delete("/documents/999", headers=user_headers).status_code == 404


class TestDashboard:

    def test_stats(self, client, user_headers):
        novo_documento(client, user_headers, "2024.001.0001", dias=-1)
        novo_documento(client, user_headers, "2024.001.0002", dias=3)
        novo_documento(client, user_headers, "2024.001.0003", dias=-3, status="Concluído")
        arquivado = novo_documento(client, user_headers, "2024.001.0004", type="Ofício")
        client.post(f"/documents/{arquivado['id']}/archive", headers=user_headers)

        stats = client.get("/dashboard/stats", headers=user_headers).json()

        assert stats == {"total_documents": 3, "in_progress": 2, "completed": 1, "overdue": 1}

    def test_document_types(self, client, user_headers):
        novo_documento(client, user_headers, "2024.001.0001", type="Certidão")
        novo_documento(client, user_headers, "2024.001.0002", type="Certidão")
        novo_documento(client, user_headers, "2024.001.0003", type="Extinção")

        tipos = client.get("/dashboard/document-types", headers=user_headers).json()

        assert tipos == {"certidoes": 2, "relatorios": 0, "oficios": 0, "extincoes": 1}

    def test_next_deadline(self, client, user_headers):
        novo_documento(client, user_headers, "2024.001.0001", dias=-1)
        novo_documento(client, user_headers, "2024.001.0002", dias=2, status="Concluído")
        proximo = novo_documento(client, user_headers, "2024.001.0003", dias=4)
        novo_documento(client, user_headers, "2024.001.0004", dias=9)

        resposta = client.get("/dashboard/next-deadline", headers=user_headers).json()

        assert resposta["next_deadline"][:16] == proximo["deadline"][:16]

    def test_next_deadline_vazio(self, client, user_headers):
        assert client.get("/dashboard/next-deadline", headers=user_headers).json() == {"next_deadline": None}
