"""Logging estruturado (JSON) do chat guiado.

Todo record sai com service, correlation_id e conversation_id (truncado);
eventos do fluxo usam log_flow_event para manter os campos padronizados.
"""

from __future__ import annotations

import logging
from typing import IO

from pythonjsonlogger.json import JsonFormatter

from guided_chat.observability.middleware import get_correlation_id

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(message)s "
    "%(correlation_id)s %(conversation_id)s %(service)s"
)


class ChatContextFilter(logging.Filter):
    """Completa o record com service, correlation_id e conversation_id.

    Importante: nunca adicionar valores digitados pelo usuário (PII) nos logs.
    """

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # correlation_id explícito em `extra` tem precedência sobre o do request
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        if not hasattr(record, "conversation_id"):
            record.conversation_id = None
        record.service = self._service_name
        return True


def configure_logging(level: str, service_name: str, stream: IO[str] | None = None) -> None:
    """Configura logging JSON no root logger (substitui handlers existentes)."""

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(
        JsonFormatter(LOG_FORMAT, rename_fields={"levelname": "level", "name": "logger"})
    )
    handler.addFilter(ChatContextFilter(service_name))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger simples; o filtro injeta service/correlation_id."""

    return logging.getLogger(name)


def short_id(value: str | None) -> str | None:
    """Trunca identificadores para log (8 chars + reticências)."""
    if not value:
        return None
    return value[:8] + "..."


def log_flow_event(
    logger: logging.Logger,
    event: str,
    conversation_id: str | None,
    step_id: str | None = None,
    level: int = logging.DEBUG,
    **fields: object,
) -> None:
    """Log observável de evento do fluxo (sem PII).

    Args:
        logger: Logger instance
        event: Nome do evento (ex: "step_activated", "advance_cancelled")
        conversation_id: ID da conversa (truncado no log)
        step_id: Passo do fluxo envolvido, quando houver
        fields: Campos extras; nunca passar valores digitados pelo usuário

    Exemplo:
        log_flow_event(logger, "step_activated", conv.id, step_id="welcome")
    """
    extra: dict[str, object] = {
        "event": event,
        "conversation_id": short_id(conversation_id),
    }
    if step_id is not None:
        extra["step_id"] = step_id
    extra.update(fields)

    logger.log(level, event, extra=extra)
