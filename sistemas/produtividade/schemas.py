# sistemas/produtividade/schemas.py
"""
Schemas Pydantic dos snapshots de produtividade
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ServidorResumo(BaseModel):
    id: int
    name: str
    cargo: Optional[str] = None
    initials: str

    model_config = {"from_attributes": True}


class ProdutividadeServidorResponse(BaseModel):
    id: int
    user_id: int
    total_documents: int
    completed_documents: int
    completion_percentage: int
    updated_at: Optional[datetime] = None
    user: ServidorResumo

    model_config = {"from_attributes": True}


class RefreshResponse(BaseModel):
    updated: int
    generated_at: datetime
