# sistemas/produtividade/models.py
"""
Snapshot de produtividade por servidor (tabela de cache)
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from database.connection import Base
from utils.timezone import get_utc_now


class ProdutividadeServidor(Base):
    """
    Totais por usuário, recalculados sob demanda (POST /servers/refresh).

    Entre duas atualizações pode divergir dos documentos reais.
    """
    __tablename__ = "servers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    user = relationship("User")

    total_documents = Column(Integer, nullable=False, default=0)
    completed_documents = Column(Integer, nullable=False, default=0)
    completion_percentage = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    def __repr__(self):
        return f"<ProdutividadeServidor(user_id={self.user_id}, {self.completion_percentage}%)>"
