# sistemas/configuracoes/models.py
"""
Configurações do sistema (linha única, id = 1)
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime

from database.connection import Base
from utils.timezone import get_utc_now


class ConfiguracaoSistema(Base):
    """Parâmetros globais: identificação da unidade e limites de prazo"""
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True)
    system_name = Column(String(200), nullable=False)
    institution = Column(String(200), nullable=False)
    admin_name = Column(String(100), nullable=False)
    timezone = Column(String(64), nullable=False)
    language = Column(String(10), nullable=False)
    urgent_days = Column(Integer, nullable=False)
    warning_days = Column(Integer, nullable=False)
    auto_archive = Column(Boolean, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    def __repr__(self):
        return f"<ConfiguracaoSistema(system_name='{self.system_name}', urgent_days={self.urgent_days})>"
