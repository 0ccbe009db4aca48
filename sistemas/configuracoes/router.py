# sistemas/configuracoes/router.py
"""
Endpoints de configurações do sistema
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.dependencies import get_current_active_user, require_admin
from sistemas.configuracoes.schemas import ConfiguracoesUpdate, ConfiguracoesResponse
from sistemas.configuracoes.services import obter_configuracoes, salvar_configuracoes
from utils.audit import AuditEvent, log_admin_action

router = APIRouter(prefix="/settings", tags=["Configurações"])


@router.get("", response_model=ConfiguracoesResponse)
async def get_settings(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Retorna as configurações atuais (ou os padrões, se nunca gravadas)"""
    return obter_configuracoes(db)


@router.post("", response_model=ConfiguracoesResponse)
@router.put("", response_model=ConfiguracoesResponse)
async def save_settings(
    request: Request,
    dados: ConfiguracoesUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Grava as configurações (cria a linha na primeira vez).

    **Acesso:** Apenas administradores
    """
    configuracao = salvar_configuracoes(db, dados.model_dump())

    log_admin_action(
        AuditEvent.SETTINGS_CHANGED, admin.id, admin.username, request,
        details=dados.model_dump()
    )
    return configuracao
