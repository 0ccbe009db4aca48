# sistemas/configuracoes/services.py
"""
Leitura e gravação das configurações do sistema.

A tabela tem no máximo uma linha (id = 1). Enquanto ela não existir,
a leitura devolve os valores padrão sem gravar nada.
"""

from typing import Dict, Any
from sqlalchemy.orm import Session

from config import SYSTEM_NAME, INSTITUTION, TIMEZONE_LOCAL, URGENT_DAYS, WARNING_DAYS
from sistemas.configuracoes.models import ConfiguracaoSistema
from utils.logging_config import get_logger

logger = get_logger(__name__)

CONFIGURACAO_ID = 1

PADROES = {
    "system_name": SYSTEM_NAME,
    "institution": INSTITUTION,
    "admin_name": "Lazarus",
    "timezone": TIMEZONE_LOCAL,
    "language": "pt-br",
    "urgent_days": URGENT_DAYS,
    "warning_days": WARNING_DAYS,
    "auto_archive": True,
}


def obter_configuracoes(db: Session) -> ConfiguracaoSistema:
    """
    Retorna as configurações gravadas, ou um objeto transiente com os padrões.
    """
    configuracao = db.query(ConfiguracaoSistema).filter(
        ConfiguracaoSistema.id == CONFIGURACAO_ID
    ).first()

    if configuracao is None:
        return ConfiguracaoSistema(id=CONFIGURACAO_ID, updated_at=None, **PADROES)

    return configuracao


def salvar_configuracoes(db: Session, dados: Dict[str, Any]) -> ConfiguracaoSistema:
    """Upsert da linha única de configurações"""
    configuracao = db.query(ConfiguracaoSistema).filter(
        ConfiguracaoSistema.id == CONFIGURACAO_ID
    ).first()

    if configuracao is None:
        configuracao = ConfiguracaoSistema(id=CONFIGURACAO_ID, **{**PADROES, **dados})
        db.add(configuracao)
    else:
        for campo, valor in dados.items():
            setattr(configuracao, campo, valor)

    db.commit()
    db.refresh(configuracao)

    logger.info("Configurações salvas", campos=sorted(dados))
    return configuracao
