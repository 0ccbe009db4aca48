# sistemas/relatorios/router.py
"""
Router dos relatórios de produtividade.

Endpoints para:
- Relatório completo em JSON (sem cache)
- Comparativo anual
- PDF para download
- Exportação de documentos em JSON/CSV por período
"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.dependencies import get_current_active_user
from sistemas.configuracoes.services import obter_configuracoes
from sistemas.documentos.services import DocumentoService
from sistemas.produtividade.services import ProdutividadeService
from sistemas.relatorios.agregacao import (
    calcular_relatorio_sistema, calcular_comparativo_anual
)
from sistemas.relatorios.exceptions import RelatoriosError
from sistemas.relatorios.exportacao import (
    get_export_service, filtrar_por_periodo, validar_formato, PERIODO_PADRAO, BOM
)
from sistemas.relatorios.pdf import RelatorioPDFService
from utils.audit import log_data_export
from utils.rate_limit import limiter, LIMITS, get_user_identifier
from utils.timezone import now_utc, to_local

router = APIRouter(prefix="/reports", tags=["Relatórios"])

SEM_CACHE = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _gerar_relatorio(db: Session, agora, tz):
    documentos = DocumentoService(db)
    usuarios = db.query(User).order_by(User.id).all()
    return calcular_relatorio_sistema(
        documentos.listar_ativos(), documentos.listar_arquivados(), usuarios, agora, tz
    )


@router.get("/productivity")
async def relatorio_produtividade(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Relatório de produtividade completo, sempre calculado na hora"""
    configuracao = obter_configuracoes(db)
    relatorio = _gerar_relatorio(db, now_utc(), configuracao.timezone)
    return JSONResponse(content=relatorio.to_dict(), headers=SEM_CACHE)


@router.get("/yearly")
async def comparativo_anual(
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Ano atual da comparação"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Compara o ano informado (padrão: ano corrente) com o anterior"""
    configuracao = obter_configuracoes(db)
    comparativo = calcular_comparativo_anual(
        DocumentoService(db).listar_todos(), now_utc(), ano_atual=year, tz=configuracao.timezone
    )
    return JSONResponse(content=comparativo.to_dict(), headers=SEM_CACHE)


@router.get("/pdf")
async def relatorio_pdf(
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Relatório de produtividade em PDF (download)"""
    agora = now_utc()
    configuracao = obter_configuracoes(db)
    relatorio = _gerar_relatorio(db, agora, configuracao.timezone)

    conteudo = RelatorioPDFService().gerar(
        relatorio, agora,
        sistema=configuracao.system_name,
        instituicao=configuracao.institution,
        tz=configuracao.timezone,
    )

    log_data_export(
        current_user.id, current_user.username, request,
        export_type="produtividade",
        record_count=relatorio.total_documents,
        format="pdf"
    )

    filename = f"relatorio-produtividade-{to_local(agora, configuracao.timezone).date().isoformat()}.pdf"
    return Response(
        content=conteudo,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/export")
@limiter.limit(LIMITS["export"], key_func=get_user_identifier)
async def exportar(
    request: Request,
    formato: str = Query("json", alias="format", description="json ou csv"),
    period: str = Query(PERIODO_PADRAO, description="last30days, last6months, lastyear ou all"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Exporta os documentos do período.

    - **json**: resumo, tipos, documentos e produtividade por servidor
    - **csv**: uma linha por documento (UTF-8 com BOM)
    """
    agora = now_utc()
    configuracao = obter_configuracoes(db)
    tz = configuracao.timezone

    try:
        formato = validar_formato(formato)
        documentos = filtrar_por_periodo(DocumentoService(db).listar_todos(), period, agora, tz)
    except RelatoriosError as e:
        raise HTTPException(status_code=400, detail=str(e))

    export_service = get_export_service()

    log_data_export(
        current_user.id, current_user.username, request,
        export_type="documentos",
        record_count=len(documentos),
        format=formato
    )

    if formato == "csv":
        buffer = export_service.exportar_csv(documentos)
        return Response(
            content=(BOM + buffer.getvalue()).encode("utf-8"),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": 'attachment; filename="relatorio-documentos.csv"'}
        )

    relatorio = _gerar_relatorio(db, agora, tz)
    resumo = {
        "total_documents": relatorio.total_documents,
        "in_progress": relatorio.in_progress_documents,
        "completed": relatorio.completed_documents,
        "overdue": relatorio.overdue_documents,
    }
    produtividade = [
        {
            "name": s.user.name,
            "cargo": s.user.cargo,
            "total_documents": s.total_documents,
            "completed_documents": s.completed_documents,
            "completion_percentage": s.completion_percentage,
        }
        for s in ProdutividadeService(db).listar()
    ]

    return export_service.exportar_json(
        documentos, period, agora,
        resumo=resumo,
        tipos=relatorio.documents_by_type.to_dict(),
        produtividade=produtividade,
    )
