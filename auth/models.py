# auth/models.py
"""
Modelo de usuário (servidor da unidade)
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from database.connection import Base
from utils.timezone import get_utc_now

ROLE_ADMIN = "admin"
ROLE_USER = "user"


def gerar_iniciais(nome: str) -> str:
    """
    Gera as iniciais de exibição a partir do nome.

    Usa a primeira letra do primeiro e do último nome ("Ana Costa" -> "AC").
    """
    partes = [p for p in (nome or "").split() if p]
    if not partes:
        return ""
    if len(partes) == 1:
        return partes[0][:2].upper()
    return (partes[0][0] + partes[-1][0]).upper()


class User(Base):
    """Usuário do sistema, a quem documentos podem ser atribuídos"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_USER)
    cargo = Column(String(100), nullable=True)  # Função (ex: "Assistente Social")
    initials = Column(String(5), nullable=False, default="")
    must_change_password = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=get_utc_now)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    documentos = relationship("Documento", back_populates="responsavel")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
