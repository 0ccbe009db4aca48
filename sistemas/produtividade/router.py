# sistemas/produtividade/router.py
"""
Endpoints dos snapshots de produtividade por servidor
"""

from typing import List
from fastapi import APIRouter, HTTPException, Depends, Request
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.dependencies import get_current_active_user, require_admin
from sistemas.configuracoes.services import obter_configuracoes
from sistemas.produtividade.schemas import ProdutividadeServidorResponse, RefreshResponse
from sistemas.produtividade.services import ProdutividadeService
from utils.audit import AuditEvent, log_admin_action
from utils.timezone import now_utc

router = APIRouter(prefix="/servers", tags=["Produtividade"])


@router.get("", response_model=List[ProdutividadeServidorResponse])
async def listar_servidores(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Snapshots de produtividade, maior percentual primeiro"""
    return ProdutividadeService(db).listar()


@router.post("/refresh", response_model=RefreshResponse)
async def atualizar_servidores(
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Recalcula os snapshots a partir dos documentos atuais.

    **Acesso:** Apenas administradores
    """
    agora = now_utc()
    tz = obter_configuracoes(db).timezone
    atualizados = ProdutividadeService(db).atualizar(agora, tz)

    log_admin_action(
        AuditEvent.SNAPSHOTS_REFRESHED, admin.id, admin.username, request,
        details={"quantidade": len(atualizados)}
    )
    return RefreshResponse(updated=len(atualizados), generated_at=agora)


@router.get("/{snapshot_id}", response_model=ProdutividadeServidorResponse)
async def obter_servidor(
    snapshot_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    snapshot = ProdutividadeService(db).obter(snapshot_id)
    if not snapshot:
        raise HTTPException(status_code=404, detail="Servidor não encontrado")
    return snapshot
