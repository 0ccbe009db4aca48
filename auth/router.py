# auth/router.py
"""
Sessão do servidor: login, dados do usuário logado, troca de senha e logout.

Login e troca de senha têm limite por IP (slowapi) e todas as tentativas
vão para a trilha de auditoria.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from database.connection import get_db
from auth.models import User
from auth.schemas import Token, ChangePasswordRequest, UserMe
from auth.security import verify_password, get_password_hash, token_de_acesso
from auth.dependencies import get_current_active_user
from utils.audit import log_login_success, log_login_failure, log_logout, log_password_change
from utils.rate_limit import limiter, LIMITS

router = APIRouter(prefix="/auth", tags=["Autenticação"])


def _autenticar(db: Session, username: str, senha: str, request: Request) -> User:
    """Confere credenciais e situação do cadastro; registra a falha antes de recusar"""
    user = db.query(User).filter(User.username == username).first()

    if user is None or not verify_password(senha, user.hashed_password):
        log_login_failure(username, request, "user_not_found" if user is None else "invalid_password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário ou senha incorretos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        log_login_failure(username, request, "user_inactive")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuário desativado. Procure a administração da unidade."
        )

    return user


@router.post("/login", response_model=Token)
@limiter.limit(LIMITS["login"])
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Entrada no sistema (formulário OAuth2: username e password).

    O token traz `must_change_password`, para o cliente pedir a troca da
    senha provisória.
    """
    user = _autenticar(db, form_data.username, form_data.password, request)
    log_login_success(user.id, user.username, request)
    return Token(access_token=token_de_acesso(user))


@router.get("/me", response_model=UserMe)
async def get_me(current_user: User = Depends(get_current_active_user)):
    return current_user


@router.post("/change-password")
@limiter.limit(LIMITS["login"])
async def change_password(
    request: Request,
    password_request: ChangePasswordRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Troca a própria senha; a provisória deixa de ser exigida"""
    if not verify_password(password_request.current_password, current_user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Senha atual incorreta")

    if password_request.new_password == password_request.current_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A nova senha deve ser diferente da atual"
        )

    current_user.hashed_password = get_password_hash(password_request.new_password)
    current_user.must_change_password = False
    db.commit()

    log_password_change(current_user.id, current_user.username, request)
    return {"message": "Senha alterada com sucesso"}


@router.post("/logout")
async def logout(request: Request, current_user: User = Depends(get_current_active_user)):
    """Só registra a saída; o cliente descarta o token"""
    log_logout(current_user.id, current_user.username, request)
    return {"message": "Sessão encerrada"}
