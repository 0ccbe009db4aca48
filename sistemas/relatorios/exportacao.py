# sistemas/relatorios/exportacao.py
"""
Serviço de exportação de documentos e produtividade.

Suporta exportação em:
- JSON (payload completo: resumo, tipos, documentos, produtividade)
- CSV (uma linha por documento)

O filtro de período considera a data de criação do documento.
"""

import csv
import io
from datetime import datetime, timedelta
from typing import List, Dict, Any, Optional

from sistemas.documentos.constants import NAO_ATRIBUIDO
from sistemas.relatorios.agregacao import janela_mensal
from sistemas.relatorios.exceptions import PeriodoInvalidoError, FormatoInvalidoError
from utils.timezone import ensure_utc, format_iso

PERIODO_PADRAO = "last6months"
PERIODOS = ("last30days", "last6months", "lastyear", "all")
FORMATOS = ("json", "csv")

CABECALHO_CSV = [
    "ID",
    "Número do Processo",
    "Nome do Interno",
    "Tipo",
    "Status",
    "Prazo",
    "Responsável",
    "Criado em",
    "Concluído em",
]

# Marca de ordem de bytes para o Excel reconhecer UTF-8
BOM = "\ufeff"


def validar_formato(formato: str) -> str:
    formato = (formato or "json").lower()
    if formato not in FORMATOS:
        raise FormatoInvalidoError(f"Formato inválido: {formato}. Use um de {', '.join(FORMATOS)}")
    return formato


def inicio_do_periodo(periodo: str, agora: datetime, tz=None) -> Optional[datetime]:
    """
    Instante inicial do período (None = sem limite).

    - last30days: agora - 30 dias
    - last6months: início do mês local de 5 meses atrás (mesma janela da série mensal)
    - lastyear: agora - 365 dias
    - all: sem filtro

    Raises:
        PeriodoInvalidoError: período desconhecido
    """
    agora = ensure_utc(agora)
    if periodo == "last30days":
        return agora - timedelta(days=30)
    if periodo == "last6months":
        return ensure_utc(janela_mensal(agora, tz)[0][0])
    if periodo == "lastyear":
        return agora - timedelta(days=365)
    if periodo == "all":
        return None
    raise PeriodoInvalidoError(f"Período inválido: {periodo}. Use um de {', '.join(PERIODOS)}")


def filtrar_por_periodo(documentos: List, periodo: str, agora: datetime, tz=None) -> List:
    """Documentos criados a partir do início do período (até "agora")"""
    inicio = inicio_do_periodo(periodo, agora, tz)
    if inicio is None:
        return list(documentos)
    agora = ensure_utc(agora)
    return [
        d for d in documentos
        if d.created_at is not None and inicio <= ensure_utc(d.created_at) <= agora
    ]


def _nome_responsavel(documento) -> str:
    responsavel = getattr(documento, "responsavel", None)
    return responsavel.name if responsavel else NAO_ATRIBUIDO


class ExportService:
    """Serviço para exportação dos documentos e indicadores"""

    def documento_para_dict(self, documento) -> Dict[str, Any]:
        return {
            "id": documento.id,
            "process_number": documento.process_number,
            "prisoner_name": documento.prisoner_name,
            "type": documento.type,
            "status": documento.status,
            "deadline": format_iso(documento.deadline) or None,
            "assigned_user": _nome_responsavel(documento),
            "created_at": format_iso(documento.created_at) or None,
            "completed_at": format_iso(documento.completed_at) or None,
            "is_archived": bool(documento.is_archived),
        }

    def exportar_json(
        self,
        documentos: List,
        periodo: str,
        agora: datetime,
        resumo: Dict[str, Any],
        tipos: Dict[str, int],
        produtividade: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Monta o payload de exportação.

        Args:
            documentos: documentos já filtrados pelo período
            resumo: totais do painel (total, em andamento, concluídos, vencidos)
            tipos: contagem por tipo
            produtividade: snapshots por usuário
        """
        return {
            "generated_at": format_iso(agora),
            "period": periodo,
            "summary": resumo,
            "document_types": tipos,
            "documents": [self.documento_para_dict(d) for d in documentos],
            "productivity": produtividade,
        }

    def exportar_csv(self, documentos: List, separador: str = ",") -> io.StringIO:
        """
        Exporta documentos para CSV.

        Campos com separador, aspas ou quebra de linha são escapados pelo
        módulo csv e voltam intactos ao serem lidos com csv.reader.

        Returns:
            StringIO com o arquivo CSV (sem BOM)
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=separador, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")

        writer.writerow(CABECALHO_CSV)

        for documento in documentos:
            writer.writerow([
                documento.id,
                documento.process_number or "",
                documento.prisoner_name or "",
                documento.type or "",
                documento.status or "",
                format_iso(documento.deadline),
                _nome_responsavel(documento),
                format_iso(documento.created_at),
                format_iso(documento.completed_at),
            ])

        buffer.seek(0)
        return buffer


# Instância global
_export_service: Optional[ExportService] = None


def get_export_service() -> ExportService:
    """Retorna instância singleton do serviço de exportação"""
    global _export_service
    if _export_service is None:
        _export_service = ExportService()
    return _export_service
