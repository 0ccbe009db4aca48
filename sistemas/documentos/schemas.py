# sistemas/documentos/schemas.py
"""
Schemas Pydantic para o registro de documentos e o dashboard
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime


TipoLiteral = Literal["Certidão", "Relatório", "Ofício", "Extinção"]
StatusLiteral = Literal["Em Andamento", "Concluído"]


# =====================================================
# REQUESTS
# =====================================================

class DocumentoCreate(BaseModel):
    """Request de criação de documento"""
    process_number: str = Field(..., min_length=1, max_length=20)
    prisoner_name: str = Field(..., min_length=1, max_length=200)
    type: TipoLiteral
    deadline: datetime
    status: StatusLiteral = "Em Andamento"
    assigned_to: Optional[int] = None


class DocumentoUpdate(BaseModel):
    """Request de atualização parcial (PATCH/PUT)"""
    process_number: Optional[str] = Field(None, min_length=1, max_length=20)
    prisoner_name: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[TipoLiteral] = None
    deadline: Optional[datetime] = None
    status: Optional[StatusLiteral] = None
    assigned_to: Optional[int] = None
    completed_at: Optional[datetime] = None


class DocumentoBulkUpdate(BaseModel):
    """Request de atualização em lote"""
    ids: List[int] = Field(..., min_length=1)
    status: Optional[StatusLiteral] = None
    assigned_to: Optional[int] = None
    deadline: Optional[datetime] = None


# =====================================================
# RESPONSES
# =====================================================

class DocumentoResponse(BaseModel):
    """Documento com o nome do responsável e o status de exibição"""
    id: int
    process_number: str
    prisoner_name: str
    type: str
    deadline: datetime
    status: str
    assigned_to: Optional[int] = None
    assigned_user_name: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    is_archived: bool = False
    display_status: Optional[str] = None
    days_until_deadline: Optional[int] = None

    model_config = {"from_attributes": True}


class BulkUpdateResponse(BaseModel):
    updated: int
    ids: List[int]


class PrazosResponse(BaseModel):
    """Documentos ativos agrupados por proximidade do prazo"""
    overdue: List[DocumentoResponse]
    urgent: List[DocumentoResponse]
    this_week: List[DocumentoResponse]
    upcoming: List[DocumentoResponse]
    completed: List[DocumentoResponse]


class DashboardStats(BaseModel):
    total_documents: int
    in_progress: int
    completed: int
    overdue: int


class DocumentTypeStats(BaseModel):
    certidoes: int
    relatorios: int
    oficios: int
    extincoes: int


class NextDeadlineResponse(BaseModel):
    next_deadline: Optional[datetime] = None
