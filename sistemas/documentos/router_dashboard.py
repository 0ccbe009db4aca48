# sistemas/documentos/router_dashboard.py
"""
Indicadores do painel inicial (documentos ativos)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.dependencies import get_current_active_user
from sistemas.documentos.constants import StatusDocumento, CHAVES_POR_TIPO
from sistemas.documentos.prazos import esta_vencido
from sistemas.documentos.schemas import DashboardStats, DocumentTypeStats, NextDeadlineResponse
from sistemas.documentos.services import DocumentoService
from utils.timezone import now_utc, ensure_utc

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Totais de documentos ativos; vencidos são calculados pelo prazo"""
    agora = now_utc()
    documentos = DocumentoService(db).listar_ativos()

    return DashboardStats(
        total_documents=len(documentos),
        in_progress=sum(1 for d in documentos if d.status == StatusDocumento.EM_ANDAMENTO),
        completed=sum(1 for d in documentos if d.status == StatusDocumento.CONCLUIDO),
        overdue=sum(1 for d in documentos if esta_vencido(d, agora)),
    )


@router.get("/document-types", response_model=DocumentTypeStats)
async def get_document_types(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    contagem = {chave: 0 for chave in CHAVES_POR_TIPO.values()}
    for documento in DocumentoService(db).listar_ativos():
        chave = CHAVES_POR_TIPO.get(documento.type)
        if chave:
            contagem[chave] += 1
    return DocumentTypeStats(**contagem)


@router.get("/next-deadline", response_model=NextDeadlineResponse)
async def get_next_deadline(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Prazo futuro mais próximo entre os documentos ainda não concluídos"""
    agora = now_utc()
    prazos = [
        ensure_utc(d.deadline)
        for d in DocumentoService(db).listar_ativos()
        if d.status != StatusDocumento.CONCLUIDO and ensure_utc(d.deadline) > agora
    ]
    return NextDeadlineResponse(next_deadline=min(prazos) if prazos else None)
