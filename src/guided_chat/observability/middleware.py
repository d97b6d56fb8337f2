"""Middleware HTTP: correlation_id por request e log de acesso da API de chat."""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Logger direto (sem get_logger) para evitar import circular com logging.py
access_logger = logging.getLogger("guided_chat.access")


def get_correlation_id() -> str:
    """Retorna o correlation_id corrente (ou vazio)."""

    return _correlation_id.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Gera ou propaga correlation_id e registra cada request concluído.

    O header é configurável (Settings.correlation_id_header). O log de acesso
    carrega apenas método, rota, status e duração; nunca o corpo.
    """

    def __init__(self, app, header_name: str = "X-Correlation-ID") -> None:
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        correlation_id = request.headers.get(self._header_name) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        token = _correlation_id.set(correlation_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            access_logger.debug(
                "Chat API request completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        finally:
            _correlation_id.reset(token)

        response.headers[self._header_name] = correlation_id
        return response
