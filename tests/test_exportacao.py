# tests/test_exportacao.py
# -*- coding: utf-8 -*-
"""
Testes da exportação (sistemas/relatorios/exportacao.py) e do PDF
(sistemas/relatorios/pdf.py)
"""

import csv
import fitz
import io
import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from sistemas.relatorios.agregacao import calcular_relatorio_sistema
from sistemas.relatorios.exceptions import PeriodoInvalidoError, FormatoInvalidoError, RelatoriosError
from sistemas.relatorios.exportacao import (
    CABECALHO_CSV,
    ExportService,
    get_export_service,
    filtrar_por_periodo,
    inicio_do_periodo,
    validar_formato,
)
from sistemas.relatorios.pdf import RelatorioPDFService


def documento(id, created_at, **kwargs):
    dados = dict(
        id=id,
        process_number=f"2024.001.{id:04d}",
        prisoner_name="João Silva Santos",
        type="Certidão",
        status="Em Andamento",
        deadline=created_at + timedelta(days=10),
        assigned_to=None,
        responsavel=None,
        created_at=created_at,
        completed_at=None,
        archived_at=None,
        is_archived=False,
    )
    dados.update(kwargs)
    return SimpleNamespace(**dados)


def texto_pdf(conteudo: bytes) -> str:
    """Texto extraído de todas as páginas (PyMuPDF)"""
    doc = fitz.open(stream=conteudo, filetype="pdf")
    try:
        return "\n".join(page.get_text("text") for page in doc)
    finally:
        doc.close()


@pytest.fixture
def documentos(agora):
    ana = SimpleNamespace(id=1, name="Ana Costa")
    return [
        documento(1, agora - timedelta(days=2), assigned_to=1, responsavel=ana),
        documento(2, agora - timedelta(days=40), prisoner_name='Silva, "Tonho" Pereira',
                  status="Concluído", completed_at=agora - timedelta(days=35)),
        documento(3, agora - timedelta(days=200), type="Relatório",
                  prisoner_name="Maria\nOliveira"),
    ]


# ==================================================
# CSV
# ==================================================


class TestExportarCSV:

    def test_cabecalho(self, documentos):
        buffer = ExportService().exportar_csv(documentos)

        linhas = list(csv.reader(io.StringIO(buffer.getvalue())))

        assert linhas[0] == CABECALHO_CSV
        assert len(linhas) == 4

    def test_ida_e_volta_preserva_campos(self, documentos):
        """Vírgulas, aspas e quebras de linha voltam intactas com csv.reader"""
        buffer = ExportService().exportar_csv(documentos)

        linhas = list(csv.reader(io.StringIO(buffer.getvalue())))[1:]

        for linha, doc in zip(linhas, documentos):
            assert linha[1] == doc.process_number
            assert linha[2] == doc.prisoner_name
            assert linha[3] == doc.type
            assert linha[4] == doc.status
            assert datetime.fromisoformat(linha[5]) == doc.deadline

    def test_responsavel_e_datas(self, documentos):
        buffer = ExportService().exportar_csv(documentos)

        linhas = list(csv.reader(io.StringIO(buffer.getvalue())))[1:]

        assert linhas[0][6] == "Ana Costa"
        assert linhas[1][6] == "Não atribuído"
        assert linhas[0][8] == ""
        assert linhas[1][8] == documentos[1].completed_at.isoformat()

    def test_sem_bom_no_servico(self, documentos):
        """O BOM é adicionado apenas na resposta HTTP"""
        conteudo = ExportService().exportar_csv(documentos).getvalue()

        assert not conteudo.startswith("\ufeff")

    def test_separador_customizado(self, documentos):
        conteudo = ExportService().exportar_csv(documentos, separador=";").getvalue()

        linhas = list(csv.reader(io.StringIO(conteudo), delimiter=";"))
        assert linhas[2][2] == 'Silva, "Tonho" Pereira'


# ==================================================
# JSON
# ==================================================


class TestExportarJSON:

    def test_payload(self, documentos, agora):
        payload = ExportService().exportar_json(
            documentos, "all", agora,
            resumo={"total_documents": 3},
            tipos={"certidoes": 2, "relatorios": 1, "oficios": 0, "extincoes": 0},
            produtividade=[],
        )

        assert set(payload) == {
            "generated_at", "period", "summary", "document_types", "documents", "productivity"
        }
        assert payload["generated_at"] == "2025-06-15T12:00:00+00:00"
        assert payload["period"] == "all"
        assert len(payload["documents"]) == 3

    def test_documento_para_dict(self, documentos):
        dados = ExportService().documento_para_dict(documentos[0])

        assert dados["assigned_user"] == "Ana Costa"
        assert dados["completed_at"] is None
        assert dados["is_archived"] is False
        assert dados["deadline"].endswith("+00:00")

    def test_singleton(self):
        assert get_export_service() is get_export_service()


# ==================================================
# PERÍODO E FORMATO
# ==================================================


class TestPeriodo:

    def test_inicio_last30days(self, agora):
        assert inicio_do_periodo("last30days", agora) == agora - timedelta(days=30)

    def test_inicio_last6months(self, agora):
        """Início do mês local de 5 meses atrás: 01/01/2025 00:00 em Manaus"""
        assert inicio_do_periodo("last6months", agora) == datetime(2025, 1, 1, 4, 0, tzinfo=timezone.utc)

    def test_inicio_lastyear(self, agora):
        assert inicio_do_periodo("lastyear", agora) == agora - timedelta(days=365)

    def test_all_sem_limite(self, agora, documentos):
        assert inicio_do_periodo("all", agora) is None
        assert filtrar_por_periodo(documentos, "all", agora) == documentos

    @pytest.mark.parametrize("periodo,ids", [
        ("last30days", [1]),
        ("last6months", [1, 2]),
        ("lastyear", [1, 2, 3]),
    ])
    def test_filtrar(self, documentos, agora, periodo, ids):
        assert [d.id for d in filtrar_por_periodo(documentos, periodo, agora)] == ids

    def test_periodo_invalido(self, agora):
        with pytest.raises(PeriodoInvalidoError):
            inicio_do_periodo("ontem", agora)

    def test_formato(self):
        assert validar_formato("CSV") == "csv"
        assert validar_formato(None) == "json"
        with pytest.raises(FormatoInvalidoError):
            validar_formato("xlsx")

    def test_erros_sao_relatorios_error(self):
        assert issubclass(PeriodoInvalidoError, RelatoriosError)
        assert issubclass(FormatoInvalidoError, ValueError)


# ==================================================
# PDF
# ==================================================


class TestRelatorioPDF:

    USUARIOS = [SimpleNamespace(id=1, name="Ana Costa"), SimpleNamespace(id=2, name="Lucia Ferreira")]

    def test_gera_pdf(self, documentos, agora):
        relatorio = calcular_relatorio_sistema(documentos, [], self.USUARIOS, agora)

        conteudo = RelatorioPDFService().gerar(relatorio, agora, sistema="Sistema", instituicao="Unidade")
        texto = texto_pdf(conteudo)

        assert conteudo.startswith(b"%PDF")
        assert "DE PRODUTIVIDADE" in texto
        assert "Ana Costa" in texto
        assert "Lucia Ferreira" in texto
        assert "Jun/25" in texto
        assert "Jan/25" in texto

    def test_grafico_com_criados_e_concluidos(self, documentos, agora):
        """O gráfico mensal traz as séries de criados e de concluídos, com legenda"""
        relatorio = calcular_relatorio_sistema(documentos, [], self.USUARIOS, agora)

        desenho = RelatorioPDFService()._grafico_mensal(relatorio)[1]
        grafico, legenda = desenho.contents

        assert grafico.data == [[0, 0, 0, 0, 1, 1], [0, 0, 0, 0, 1, 0]]
        assert grafico.categoryAxis.categoryNames[-1] == "Jun/25"
        assert [nome for _, nome in legenda.colorNamePairs] == ["Criados", "Concluídos"]

    @pytest.mark.parametrize("nome", ["A<b", "Costa & Filhos", "Ana <Chefe> Costa", "x > y"])
    def test_nomes_com_caracteres_de_marcacao(self, agora, nome):
        """Nomes livres aparecem literalmente, sem serem lidos como marcação"""
        relatorio = calcular_relatorio_sistema([], [], [SimpleNamespace(id=1, name=nome)], agora)

        texto = texto_pdf(RelatorioPDFService().gerar(relatorio, agora))

        assert nome in texto

    def test_sistema_e_instituicao_com_marcacao(self, agora):
        relatorio = calcular_relatorio_sistema([], [], [], agora)

        conteudo = RelatorioPDFService().gerar(
            relatorio, agora, sistema="Prazos <beta", instituicao="Unidade & Anexo"
        )
        texto = texto_pdf(conteudo)

        assert "Prazos <beta" in texto
        assert "Unidade & Anexo" in texto

    def test_gera_pdf_vazio(self, agora):
        relatorio = calcular_relatorio_sistema([], [], [], agora)

        conteudo = RelatorioPDFService().gerar(relatorio, agora, tz="America/Sao_Paulo")

        assert conteudo.startswith(b"%PDF")
        assert "Nenhum servidor cadastrado." in texto_pdf(conteudo)
