# auth/schemas.py
"""
Schemas Pydantic para autenticação e usuários
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


# ==========================================
# Schemas de Token
# ==========================================

class Token(BaseModel):
    """Token JWT retornado no login"""
    access_token: str
    token_type: str = "bearer"


# ==========================================
# Schemas de Senha
# ==========================================

class ChangePasswordRequest(BaseModel):
    """Request de troca de senha"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=100)


# ==========================================
# Schemas de Usuário
# ==========================================

class UserBase(BaseModel):
    """Base para schemas de usuário"""
    username: str = Field(..., min_length=3, max_length=50)
    name: str = Field(..., min_length=2, max_length=200)
    role: str = Field(default="user", pattern="^(admin|user)$")
    cargo: Optional[str] = Field(None, max_length=100)
    initials: Optional[str] = Field(None, max_length=5)


class UserCreate(UserBase):
    """Schema para criação de usuário"""
    password: Optional[str] = None  # Se None, usa senha padrão


class UserUpdate(BaseModel):
    """Schema para atualização de usuário"""
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    role: Optional[str] = Field(None, pattern="^(admin|user)$")
    cargo: Optional[str] = Field(None, max_length=100)
    initials: Optional[str] = Field(None, max_length=5)
    is_active: Optional[bool] = None


class UserResponse(BaseModel):
    """Schema de resposta com dados do usuário"""
    id: int
    username: str
    name: str
    role: str
    cargo: Optional[str] = None
    initials: str
    is_active: bool
    must_change_password: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserMe(BaseModel):
    """Schema para /auth/me - dados do usuário logado"""
    id: int
    username: str
    name: str
    role: str
    cargo: Optional[str] = None
    initials: str
    must_change_password: bool

    model_config = {"from_attributes": True}
