# sistemas/configuracoes/schemas.py
"""
Schemas Pydantic das configurações do sistema
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
import pytz

from utils.timezone import get_timezone


class ConfiguracoesUpdate(BaseModel):
    """Request de gravação (upsert) das configurações"""
    system_name: str = Field(..., min_length=1, max_length=200)
    institution: str = Field(..., min_length=1, max_length=200)
    admin_name: str = Field("Lazarus", min_length=1, max_length=100)
    timezone: str = Field("America/Manaus", max_length=64)
    language: str = Field("pt-br", max_length=10)
    urgent_days: int = Field(2, ge=0, le=365)
    warning_days: int = Field(7, ge=0, le=365)
    auto_archive: bool = True

    @field_validator("timezone")
    @classmethod
    def timezone_valido(cls, v: str) -> str:
        try:
            return get_timezone(v).zone
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Timezone desconhecido: {v}")

    @model_validator(mode="after")
    def limites_coerentes(self):
        if self.urgent_days > self.warning_days:
            raise ValueError("urgent_days não pode ser maior que warning_days")
        return self


class ConfiguracoesResponse(BaseModel):
    system_name: str
    institution: str
    admin_name: str
    timezone: str
    language: str
    urgent_days: int
    warning_days: int
    auto_archive: bool
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
