# tests/test_api_relatorios.py
"""
Testes de integração de relatórios, exportação, snapshots de produtividade
e configurações do sistema
"""

import csv
import fitz
import io
import pytest
from datetime import timedelta

from config import SYSTEM_NAME
from utils.timezone import now_utc


@pytest.fixture
def documentos(client, admin_headers, common_user):
    """Dois documentos de Marco: um concluído e um vencido; um sem responsável"""
    criados = []
    for numero, dias, status, responsavel, nome in [
        ("2024.001.0156", 3, "Concluído", common_user.id, 'Silva, "Tonho"'),
        ("2024.001.0157", -1, "Em Andamento", common_user.id, "Maria Oliveira"),
        ("2024.001.0158", 10, "Em Andamento", None, "Carlos Lima"),
    ]:
        response = client.post("/documents", json={
            "process_number": numero,
            "prisoner_name": nome,
            "type": "Relatório",
            "deadline": (now_utc() + timedelta(days=dias)).isoformat(),
            "status": status,
            "assigned_to": responsavel,
        }, headers=admin_headers)
        assert response.status_code == 201, response.text
        criados.append(response.json())
    return criados


class TestRelatorioProdutividade:

    def test_relatorio(self, client, user_headers, documentos):
        response = client.get("/reports/productivity", headers=user_headers)
        dados = response.json()

        assert response.status_code == 200
        assert "no-cache" in response.headers["cache-control"]
        assert dados["total_documents"] == 3
        assert dados["completed_documents"] == 1
        assert dados["in_progress_documents"] == 2
        assert dados["overdue_documents"] == 1
        assert dados["documents_by_type"]["relatorios"] == 3
        assert len(dados["daily_production"]) == 30
        assert len(dados["monthly_trends"]) == 6
        assert dados["daily_production"][-1]["created"] == 3

    def test_uma_entrada_por_usuario(self, client, user_headers, admin_user, documentos):
        dados = client.get("/reports/productivity", headers=user_headers).json()
        por_nome = {u["user_name"]: u for u in dados["user_productivity"]}

        assert set(por_nome) == {"Admin Teste", "Marco Silva"}
        assert por_nome["Marco Silva"]["total_documents"] == 2
        assert por_nome["Marco Silva"]["completion_rate"] == 50
        assert por_nome["Admin Teste"]["total_documents"] == 0

    def test_arquivado_conta_como_concluido(self, client, user_headers, documentos):
        vencido = documentos[1]
        client.post(f"/documents/{vencido['id']}/archive", headers=user_headers)

        dados = client.get("/reports/productivity", headers=user_headers).json()

        assert dados["total_documents"] == 3
        assert dados["completed_documents"] == 2
        assert dados["overdue_documents"] == 0

    def test_comparativo_anual(self, client, user_headers, documentos):
        dados = client.get("/reports/yearly", headers=user_headers).json()

        assert dados["current_year"]["total_documents"] == 3
        assert dados["previous_year"]["total_documents"] == 0
        assert dados["growth_rate"] == 100

    def test_comparativo_ano_informado(self, client, user_headers, documentos):
        dados = client.get("/reports/yearly?year=2001", headers=user_headers).json()

        assert dados["current_year"]["year"] == 2001
        assert dados["growth_rate"] == 0

    def test_pdf(self, client, user_headers, documentos):
        response = client.get("/reports/pdf", headers=user_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "attachment" in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")

        doc = fitz.open(stream=response.content, filetype="pdf")
        texto = "\n".join(page.get_text("text") for page in doc)
        doc.close()

        assert SYSTEM_NAME in texto
        assert "Marco Silva" in texto
        assert "Admin Teste" in texto


class TestExportacao:

    def test_csv(self, client, user_headers, documentos):
        response = client.get("/reports/export?format=csv&period=all", headers=user_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.content.startswith(b"\xef\xbb\xbf")

        texto = response.content.decode("utf-8-sig")
        linhas = list(csv.reader(io.StringIO(texto)))
        por_processo = {linha[1]: linha for linha in linhas[1:]}

        assert len(linhas) == 4
        assert por_processo["2024.001.0156"][2] == 'Silva, "Tonho"'
        assert por_processo["2024.001.0156"][6] == "Marco Silva"
        assert por_processo["2024.001.0158"][6] == "Não atribuído"

    def test_json(self, client, user_headers, documentos):
        dados = client.get("/reports/export?format=json&period=last30days", headers=user_headers).json()

        assert dados["period"] == "last30days"
        assert dados["summary"] == {"total_documents": 3, "in_progress": 2, "completed": 1, "overdue": 1}
        assert dados["document_types"]["relatorios"] == 3
        assert len(dados["documents"]) == 3
        assert dados["productivity"] == []

    def test_json_inclui_snapshots(self, client, admin_headers, documentos):
        client.post("/servers/refresh", headers=admin_headers)

        dados = client.get("/reports/export", headers=admin_headers).json()

        assert dados["period"] == "last6months"
        assert {p["name"] for p in dados["productivity"]} == {"Admin Teste", "Marco Silva"}

    def test_periodo_invalido(self, client, user_headers):
        response = client.get("/reports/export?period=ontem", headers=user_headers)

        assert response.status_code == 400

    def test_formato_invalido(self, client, user_headers):
        response = client.get("/reports/export?format=xlsx", headers=user_headers)

        assert response.status_code == 400

    def test_sem_token(self, client):
        assert client.get("/reports/export").status_code == 401


class TestServidores:

    def test_refresh(self, client, admin_headers, documentos, common_user):
        response = client.post("/servers/refresh", headers=admin_headers)
        servidores = client.get("/servers", headers=admin_headers).json()

        assert response.json()["updated"] == 2
        assert servidores[0]["user"]["name"] == "Marco Silva"
        assert servidores[0]["total_documents"] == 2
        assert servidores[0]["completed_documents"] == 1
        assert servidores[0]["completion_percentage"] == 50
        assert servidores[1]["completion_percentage"] == 0

    def test_refresh_atualiza_existente(self, client, admin_headers, documentos):
        client.post("/servers/refresh", headers=admin_headers)
        client.post(f"/documents/{documentos[1]['id']}/archive", headers=admin_headers)
        client.post("/servers/refresh", headers=admin_headers)

        servidores = client.get("/servers", headers=admin_headers).json()

        assert len(servidores) == 2
        assert servidores[0]["completion_percentage"] == 100

    def test_obter(self, client, admin_headers, documentos):
        client.post("/servers/refresh", headers=admin_headers)
        snapshot_id = client.get("/servers", headers=admin_headers).json()[0]["id"]

        assert client.get(f"/servers/{snapshot_id}", headers=admin_headers).status_code == 200
        assert client.get("/servers/999", headers=admin_headers).status_code == 404

    def test_refresh_apenas_admin(self, client, user_headers):
        assert client.post("/servers/refresh", headers=user_headers).status_code == 403


class TestConfiguracoes:

    CONFIGURACAO = {
        "system_name": "Sistema de Teste",
        "institution": "Unidade Teste",
        "admin_name": "Lazarus",
        "timezone": "america/manaus",
        "language": "pt-br",
        "urgent_days": 3,
        "warning_days": 10,
        "auto_archive": False,
    }

    def test_padroes_sem_gravar(self, client, user_headers):
        dados = client.get("/settings", headers=user_headers).json()

        assert dados["system_name"] == SYSTEM_NAME
        assert dados["urgent_days"] == 2
        assert dados["warning_days"] == 7
        assert dados["updated_at"] is None

    def test_gravar_e_atualizar(self, client, admin_headers):
        criado = client.post("/settings", json=self.CONFIGURACAO, headers=admin_headers)
        atualizado = client.put("/settings", json={**self.CONFIGURACAO, "urgent_days": 1}, headers=admin_headers)
        lido = client.get("/settings", headers=admin_headers).json()

        assert criado.status_code == 200
        assert criado.json()["timezone"] == "America/Manaus"
        assert atualizado.json()["urgent_days"] == 1
        assert lido["urgent_days"] == 1
        assert lido["auto_archive"] is False
        assert lido["updated_at"] is not None

    def test_urgencia_maior_que_alerta(self, client, admin_headers):
        response = client.post(
            "/settings", json={**self.CONFIGURACAO, "urgent_days": 15}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_timezone_invalido(self, client, admin_headers):
        response = client.post(
            "/settings", json={**self.CONFIGURACAO, "timezone": "Marte/Olympus"}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_apenas_admin(self, client, user_headers):
        assert client.post("/settings", json=self.CONFIGURACAO, headers=user_headers).status_code == 403

    def test_urgencia_configurada_no_status(self, client, admin_headers):
        client.post("/settings", json={**self.CONFIGURACAO, "urgent_days": 5}, headers=admin_headers)

        doc = client.post("/documents", json={
            "process_number": "2024.001.0200",
            "prisoner_name": "Ana Paula",
            "type": "Ofício",
            "deadline": (now_utc() + timedelta(days=4)).isoformat(),
        }, headers=admin_headers).json()

        assert doc["display_status"] == "Urgente"


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
