# auth/security.py
"""
Senhas (bcrypt) e tokens de acesso (JWT) do Controle de Prazos.

O token carrega o id e o username do servidor, o perfil e se a senha
ainda é a provisória. É stateless: o logout só é registrado na auditoria.
"""

from datetime import timedelta
from typing import Optional
from jose import JWTError, jwt
import bcrypt

from config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from utils.timezone import now_utc


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Assina um JWT com os claims informados e expiração em UTC.

    Sem expires_delta, vale ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    expira_em = now_utc() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode({**data, "exp": expira_em}, SECRET_KEY, algorithm=ALGORITHM)


def token_de_acesso(usuario) -> str:
    """Token de sessão de um servidor autenticado"""
    return create_access_token({
        "sub": usuario.username,
        "user_id": usuario.id,
        "role": usuario.role,
        "must_change_password": usuario.must_change_password,
    })


def decode_token(token: str) -> Optional[dict]:
    """Claims do token, ou None se a assinatura for inválida ou o token tiver expirado"""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
