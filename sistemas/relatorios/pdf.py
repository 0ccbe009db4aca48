# sistemas/relatorios/pdf.py
"""
Geração do relatório de produtividade em PDF (reportlab/platypus).

Seções, nesta ordem:
1. Cabeçalho (título, sistema/unidade, data de geração)
2. Resumo geral do sistema
3. Distribuição por tipo de documento
4. Gráfico de barras: criados e concluídos por mês
5. Produtividade por servidor
6. Produção diária recente (últimos 7 dias)
Rodapé com "Página N" em todas as páginas.
"""

from datetime import datetime
from xml.sax.saxutils import escape
from io import BytesIO
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.graphics.shapes import Drawing
from reportlab.graphics.charts.legends import Legend
from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, PageBreak, Table, TableStyle, KeepTogether
)

from config import SYSTEM_NAME, INSTITUTION
from sistemas.relatorios.agregacao import RelatorioSistema, ProdutividadeUsuario
from utils.logging_config import get_logger
from utils.timezone import format_local

logger = get_logger(__name__)

COR_PRIMARIA = HexColor("#0064c8")
COR_CABECALHO_TABELA = HexColor("#e8eef7")
COR_CRIADOS = HexColor("#9bbbe0")
DIAS_RECENTES = 7

ROTULOS_TIPO = [
    ("certidoes", "Certidões"),
    ("relatorios", "Relatórios"),
    ("oficios", "Ofícios"),
    ("extincoes", "Extinções"),
]


def _decimal(valor: float) -> str:
    """1 casa decimal com vírgula (pt-BR)"""
    return f"{valor:.1f}".replace(".", ",")


def _rodape(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawCentredString(A4[0] / 2, 1.2 * cm, f"Página {doc.page}")
    canvas.restoreState()


class RelatorioPDFService:
    """Monta o PDF a partir de um RelatorioSistema já calculado"""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name="TituloRelatorio",
            parent=self.styles["Title"],
            fontSize=20,
            textColor=COR_PRIMARIA,
            alignment=TA_CENTER,
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name="Subtitulo",
            parent=self.styles["Normal"],
            fontSize=11,
            textColor=colors.grey,
            alignment=TA_CENTER,
            spaceAfter=2,
        ))
        self.styles.add(ParagraphStyle(
            name="Secao",
            parent=self.styles["Heading2"],
            textColor=colors.black,
            spaceBefore=12,
            spaceAfter=6,
        ))

    def _tabela(self, linhas: List[List], larguras: Optional[List[float]] = None) -> Table:
        tabela = Table(linhas, colWidths=larguras, hAlign="LEFT")
        tabela.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), COR_CABECALHO_TABELA),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ]))
        return tabela

    # ==========================================
    # Seções
    # ==========================================

    def _cabecalho(self, agora: datetime, sistema: str, instituicao: str, tz) -> List:
        return [
            Paragraph("RELATÓRIO DE PRODUTIVIDADE", self.styles["TituloRelatorio"]),
            Paragraph(escape(sistema), self.styles["Subtitulo"]),
            Paragraph(escape(instituicao), self.styles["Subtitulo"]),
            Paragraph(f"Gerado em: {format_local(agora, tz=tz)}", self.styles["Subtitulo"]),
            Spacer(1, 0.6 * cm),
        ]

    def _resumo(self, relatorio: RelatorioSistema) -> List:
        linhas = [
            ["Indicador", "Valor"],
            ["Total de Documentos", relatorio.total_documents],
            ["Documentos Concluídos", relatorio.completed_documents],
            ["Documentos em Andamento", relatorio.in_progress_documents],
            ["Documentos Vencidos", relatorio.overdue_documents],
            ["Taxa de Conclusão", f"{_decimal(relatorio.completion_rate)}%"],
            ["Tempo Médio de Conclusão", f"{_decimal(relatorio.average_completion_time)} dias"],
        ]
        return [
            Paragraph("Resumo Geral do Sistema", self.styles["Secao"]),
            self._tabela(linhas, [9 * cm, 5 * cm]),
        ]

    def _distribuicao_tipos(self, relatorio: RelatorioSistema) -> List:
        por_tipo = relatorio.documents_by_type.to_dict()
        linhas = [["Tipo", "Quantidade"]]
        linhas += [[rotulo, por_tipo[chave]] for chave, rotulo in ROTULOS_TIPO]
        return [
            Paragraph("Distribuição por Tipo", self.styles["Secao"]),
            self._tabela(linhas, [9 * cm, 5 * cm]),
        ]

    def _grafico_mensal(self, relatorio: RelatorioSistema) -> List:
        meses = relatorio.monthly_trends
        criados = [m.created for m in meses] or [0]
        concluidos = [m.completed for m in meses] or [0]

        desenho = Drawing(16 * cm, 6.5 * cm)
        grafico = VerticalBarChart()
        grafico.x = 1.2 * cm
        grafico.y = 1 * cm
        grafico.width = 14 * cm
        grafico.height = 4.2 * cm
        grafico.data = [criados, concluidos]
        grafico.categoryAxis.categoryNames = [m.month for m in meses] or [""]
        grafico.valueAxis.valueMin = 0
        grafico.valueAxis.valueMax = max(criados + concluidos + [1])
        grafico.bars[0].fillColor = COR_CRIADOS
        grafico.bars[1].fillColor = COR_PRIMARIA
        grafico.barLabelFormat = "%d"
        grafico.barLabels.nudge = 6
        desenho.add(grafico)

        legenda = Legend()
        legenda.x = 1.2 * cm
        legenda.y = 6.1 * cm
        legenda.alignment = "right"
        legenda.columnMaximum = 1
        legenda.fontSize = 8
        legenda.colorNamePairs = [(COR_CRIADOS, "Criados"), (COR_PRIMARIA, "Concluídos")]
        desenho.add(legenda)

        return [
            Paragraph("Tendências Mensais", self.styles["Secao"]),
            desenho,
        ]

    def _usuario(self, usuario: ProdutividadeUsuario) -> KeepTogether:
        linhas = [
            ["Total", "Concluídos", "Em Andamento", "Vencidos", "Taxa", "Tempo Médio"],
            [
                usuario.total_documents,
                usuario.completed_documents,
                usuario.in_progress_documents,
                usuario.overdue_documents,
                f"{_decimal(usuario.completion_rate)}%",
                f"{_decimal(usuario.average_completion_time)} dias",
            ],
        ]
        return KeepTogether([
            Paragraph(escape(usuario.user_name or f"Usuário {usuario.user_id}"), self.styles["Heading3"]),
            self._tabela(linhas),
            Spacer(1, 0.3 * cm),
        ])

    def _produtividade_usuarios(self, relatorio: RelatorioSistema) -> List:
        story = [PageBreak(), Paragraph("Produtividade por Servidor", self.styles["Secao"])]
        if not relatorio.user_productivity:
            story.append(Paragraph("Nenhum servidor cadastrado.", self.styles["Normal"]))
        for usuario in relatorio.user_productivity:
            story.append(self._usuario(usuario))
        return story

    def _producao_recente(self, relatorio: RelatorioSistema) -> List:
        linhas = [["Data", "Criados", "Concluídos"]]
        linhas += [[d.date, d.created, d.completed] for d in relatorio.daily_production[-DIAS_RECENTES:]]
        return [
            Paragraph("Produção Diária Recente", self.styles["Secao"]),
            self._tabela(linhas, [5 * cm, 4 * cm, 4 * cm]),
        ]

    # ==========================================
    # Geração
    # ==========================================

    def gerar(
        self,
        relatorio: RelatorioSistema,
        agora: datetime,
        sistema: str = SYSTEM_NAME,
        instituicao: str = INSTITUTION,
        tz=None,
    ) -> bytes:
        """
        Gera o PDF em memória.

        Returns:
            bytes do arquivo PDF
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2 * cm,
            leftMargin=2 * cm,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
            title="Relatório de Produtividade",
        )

        story = []
        story.extend(self._cabecalho(agora, sistema, instituicao, tz))
        story.extend(self._resumo(relatorio))
        story.extend(self._distribuicao_tipos(relatorio))
        story.extend(self._grafico_mensal(relatorio))
        story.extend(self._produtividade_usuarios(relatorio))
        story.extend(self._producao_recente(relatorio))

        doc.build(story, onFirstPage=_rodape, onLaterPages=_rodape)

        conteudo = buffer.getvalue()
        logger.info("PDF de produtividade gerado", bytes=len(conteudo), usuarios=len(relatorio.user_productivity))
        return conteudo
