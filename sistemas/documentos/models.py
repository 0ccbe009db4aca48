# sistemas/documentos/models.py
"""
Modelo de dados do registro de documentos (certidões, relatórios, ofícios)
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from database.connection import Base
from utils.timezone import get_utc_now


class Documento(Base):
    """
    Documento acompanhado pelo setor, com prazo e responsável.

    O status "Vencido"/"Urgente" não é gravado: é derivado do prazo
    (ver sistemas.documentos.prazos).
    """
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)

    # Dados do processo
    process_number = Column(String(20), unique=True, nullable=False, index=True)
    prisoner_name = Column(String(200), nullable=False)
    type = Column(String(30), nullable=False)  # Certidão, Relatório, Ofício, Extinção

    # Prazo e situação
    deadline = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(30), nullable=False, default="Em Andamento", index=True)

    # Responsável
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    responsavel = relationship("User", back_populates="documentos")

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=get_utc_now, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    archived_at = Column(DateTime(timezone=True), nullable=True)
    is_archived = Column(Boolean, default=False, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    __table_args__ = (
        Index("ix_documents_archived_deadline", "is_archived", "deadline"),
    )

    @property
    def assigned_user_name(self):
        return self.responsavel.name if self.responsavel else None

    def __repr__(self):
        return f"<Documento(id={self.id}, processo='{self.process_number}', status='{self.status}')>"
