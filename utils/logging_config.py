# utils/logging_config.py
"""
Configuração centralizada de logging estruturado com structlog.

- Logs em formato JSON em produção
- Console legível em desenvolvimento
- Request ID automático em todos os logs

USO:
    from utils.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Documento arquivado", documento_id=12, user_id=3)
"""

import logging
import sys
from functools import lru_cache

import structlog

from config import IS_PRODUCTION

SERVICE_NAME = "controle-prazos"


def add_request_id(logger, method_name: str, event_dict: dict) -> dict:
    """
    Processador structlog que adiciona request_id automaticamente.

    Obtém o request_id do ContextVar definido no middleware.
    """
    from middleware.request_id import get_request_id

    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_service_info(logger, method_name: str, event_dict: dict) -> dict:
    """Adiciona informações do serviço ao log."""
    event_dict["service"] = SERVICE_NAME
    return event_dict


def configure_structlog():
    """
    Configura structlog para logging estruturado.

    Em produção: JSON formatado para parsing por ferramentas
    Em desenvolvimento: Console legível
    """
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_request_id,
        add_service_info,
    ]

    if IS_PRODUCTION:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=False)
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging():
    """
    Configura logging padrão do Python para integração com structlog.
    """
    root_level = logging.INFO if IS_PRODUCTION else logging.DEBUG

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(root_level)

    if IS_PRODUCTION:
        handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(ensure_ascii=False),
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                add_request_id,
            ],
        ))
    else:
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers = [handler]

    # Silencia loggers verbosos
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def setup_logging():
    """
    Função principal de configuração de logging.

    Chame esta função no início da aplicação (em main.py lifespan).
    """
    configure_stdlib_logging()
    configure_structlog()


@lru_cache(maxsize=128)
def get_logger(name: str):
    """
    Obtém um logger structlog.

    Uso:
        logger = get_logger(__name__)
        logger.info("mensagem", chave="valor")
    """
    return structlog.get_logger(name)


configure_structlog()


__all__ = [
    "setup_logging",
    "get_logger",
]
