# users/router.py
"""
Endpoints de gestão de usuários (somente admin)
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import List

from database.connection import get_db
from auth.models import User, ROLE_USER
from auth.schemas import UserCreate, UserUpdate, UserResponse
from auth.security import get_password_hash
from auth.dependencies import require_admin
from config import DEFAULT_USER_PASSWORD
from users.exceptions import (
    UsuariosError, UsuarioNaoEncontradoError, UsuarioDuplicadoError
)
from users.services import obter_usuario, criar_usuario, excluir_usuario
from utils.audit import (
    AuditEvent, log_audit_event, log_user_created, log_user_deleted
)

router = APIRouter(prefix="/users", tags=["Usuários"])


def _erro_http(e: UsuariosError) -> HTTPException:
    if isinstance(e, UsuarioNaoEncontradoError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuário não encontrado")
    # UsuarioDuplicadoError, AutoExclusaoError, UsuarioComDocumentosError
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=List[UserResponse])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Lista todos os usuários do sistema.

    **Acesso:** Apenas administradores
    """
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    user_data: UserCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Cria um novo usuário.

    **Acesso:** Apenas administradores

    - Se **password** não for informada, usa a senha padrão
    - Se **initials** não for informada, é derivada do nome
    - O usuário será forçado a trocar a senha no primeiro acesso
    """
    try:
        new_user = criar_usuario(
            db,
            username=user_data.username,
            name=user_data.name,
            role=user_data.role,
            cargo=user_data.cargo,
            initials=user_data.initials,
            password=user_data.password,
        )
    except UsuarioDuplicadoError as e:
        raise _erro_http(e)

    log_user_created(new_user.id, new_user.username, admin.username, request)
    return new_user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Retorna detalhes de um usuário específico.

    **Acesso:** Apenas administradores
    """
    try:
        return obter_usuario(db, user_id)
    except UsuariosError as e:
        raise _erro_http(e)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    request: Request,
    user_data: UserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Atualiza dados de um usuário.

    **Acesso:** Apenas administradores

    Campos que podem ser atualizados: name, role, cargo, initials, is_active
    """
    try:
        user = obter_usuario(db, user_id)
    except UsuariosError as e:
        raise _erro_http(e)

    # Impede desativar o próprio usuário admin
    if user.id == admin.id and user_data.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Você não pode desativar sua própria conta"
        )

    # Impede remover role admin do próprio usuário
    if user.id == admin.id and user_data.role == ROLE_USER:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Você não pode remover seu próprio acesso de administrador"
        )

    update_data = user_data.model_dump(exclude_unset=True)
    if update_data.get("initials"):
        update_data["initials"] = update_data["initials"].upper()
    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    log_audit_event(
        AuditEvent.USER_UPDATED, user_id=user.id, username=user.username,
        request=request, details={"updated_by": admin.username, "campos": sorted(update_data)}
    )
    return user


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Exclui um usuário.

    **Acesso:** Apenas administradores

    Bloqueado (400) enquanto houver documentos atribuídos ao usuário.
    """
    try:
        username = excluir_usuario(db, user_id, solicitante_id=admin.id)
    except UsuariosError as e:
        raise _erro_http(e)

    log_user_deleted(user_id, username, admin.username, request)
    return {"message": f"Usuário '{username}' excluído com sucesso"}


@router.post("/{user_id}/reset-password")
async def reset_password(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Reseta a senha de um usuário para a senha padrão.

    **Acesso:** Apenas administradores

    - O usuário será forçado a trocar no próximo acesso
    """
    try:
        user = obter_usuario(db, user_id)
    except UsuariosError as e:
        raise _erro_http(e)

    user.hashed_password = get_password_hash(DEFAULT_USER_PASSWORD)
    user.must_change_password = True
    db.commit()

    log_audit_event(
        AuditEvent.USER_PASSWORD_RESET, user_id=user.id, username=user.username,
        request=request, details={"reset_by": admin.username}
    )
    return {
        "message": f"Senha do usuário '{user.username}' resetada com sucesso",
        "new_password": DEFAULT_USER_PASSWORD
    }
