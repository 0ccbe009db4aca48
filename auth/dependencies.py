# auth/dependencies.py
"""
Dependencies de autenticação das rotas.

    get_current_active_user -> qualquer servidor ativo (documentos, painel, relatórios)
    require_admin           -> usuários, snapshots e configurações
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

SESSAO_INVALIDA = "Sessão inválida ou expirada. Entre novamente."


def _usuario_do_token(db: Session, payload: dict) -> Optional[User]:
    """Localiza o servidor pelo claim user_id (tokens antigos só têm sub)"""
    user_id = payload.get("user_id")
    if user_id is not None:
        return db.query(User).filter(User.id == user_id).first()

    username = payload.get("sub")
    if username is None:
        return None
    return db.query(User).filter(User.username == username).first()


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Servidor dono do token; 401 se o token não identificar ninguém"""
    payload = decode_token(token)
    user = _usuario_do_token(db, payload) if payload else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=SESSAO_INVALIDA,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """403 para servidor desativado depois de emitido o token"""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuário desativado. Procure a administração da unidade."
        )
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_active_user)
) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas administradores podem realizar esta operação."
        )
    return current_user
