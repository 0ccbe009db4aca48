# middleware/request_id.py
"""
Middleware para adicionar Request ID único a cada requisição.

- Gera UUID único para cada requisição (ou reaproveita X-Request-ID)
- Armazena em request.state e em um ContextVar (lido pelo logging)
- Devolve o header X-Request-ID na response

Uso em outros módulos:
    from middleware.request_id import get_request_id
"""

import time
import uuid
import logging
from contextvars import ContextVar
from typing import Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

logger = logging.getLogger(__name__)


def get_request_id() -> Optional[str]:
    """
    Retorna o Request ID da requisição atual.

    Retorna None se chamado fora do contexto de uma requisição.
    """
    return _request_id_ctx.get()


def set_request_id(request_id: Optional[str]) -> None:
    """Uso interno pelo middleware."""
    _request_id_ctx.set(request_id)


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware FastAPI para gerenciamento de Request ID.

    Também registra uma linha por requisição da API com método, caminho,
    status e duração.

    Uso:
        app.add_middleware(RequestIDMiddleware)
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        existing_request_id = request.headers.get(REQUEST_ID_HEADER)
        request_id = existing_request_id[:64] if existing_request_id else generate_request_id()

        request.state.request_id = request_id
        set_request_id(request_id)
        inicio = time.perf_counter()

        try:
            response: Response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id

            duracao_ms = (time.perf_counter() - inicio) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} em {duracao_ms:.0f}ms"
            )
            return response

        except Exception as e:
            # Deixa a exceção propagar para os handlers de erro
            logger.error(f"[{request_id}] Erro durante requisição: {e}")
            raise

        finally:
            set_request_id(None)
