# users/services.py
"""
Regras da gestão de usuários compartilhadas por rotas e scripts
"""

from typing import Optional
from sqlalchemy.orm import Session

from auth.models import User, gerar_iniciais
from auth.security import get_password_hash
from config import DEFAULT_USER_PASSWORD
from sistemas.documentos.services import DocumentoService
from sistemas.produtividade.models import ProdutividadeServidor
from users.exceptions import (
    UsuarioNaoEncontradoError, UsuarioDuplicadoError,
    AutoExclusaoError, UsuarioComDocumentosError
)


def obter_usuario(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UsuarioNaoEncontradoError(f"Usuário {user_id} não encontrado")
    return user


def criar_usuario(
    db: Session,
    username: str,
    name: str,
    role: str = "user",
    cargo: Optional[str] = None,
    initials: Optional[str] = None,
    password: Optional[str] = None,
    must_change_password: bool = True,
) -> User:
    """
    Cria um usuário. Sem senha informada, usa DEFAULT_USER_PASSWORD;
    sem iniciais, deriva do nome.
    """
    if db.query(User.id).filter(User.username == username).first():
        raise UsuarioDuplicadoError(f"Usuário '{username}' já existe")

    user = User(
        username=username,
        name=name,
        hashed_password=get_password_hash(password or DEFAULT_USER_PASSWORD),
        role=role,
        cargo=cargo,
        initials=(initials or gerar_iniciais(name)).upper(),
        must_change_password=must_change_password,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def excluir_usuario(db: Session, user_id: int, solicitante_id: Optional[int] = None) -> str:
    """
    Exclui o usuário definitivamente.

    Bloqueada enquanto houver documentos (ativos ou arquivados) atribuídos.
    O snapshot de produtividade do usuário é removido junto.

    Returns:
        username excluído
    """
    user = obter_usuario(db, user_id)

    if solicitante_id is not None and user.id == solicitante_id:
        raise AutoExclusaoError("Você não pode excluir sua própria conta")

    quantidade = DocumentoService(db).contar_por_usuario(user.id)
    if quantidade > 0:
        raise UsuarioComDocumentosError(user.username, quantidade)

    username = user.username
    db.query(ProdutividadeServidor).filter(ProdutividadeServidor.user_id == user.id).delete()
    db.delete(user)
    db.commit()
    return username
