"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

import random

from fastapi import FastAPI

from guided_chat.api.routes import router
from guided_chat.application.chat_service import ChatService
from guided_chat.config.settings import Settings, get_settings
from guided_chat.flows.registry import load_registry
from guided_chat.infra.scheduler import AsyncioScheduler, Scheduler
from guided_chat.observability.logging import configure_logging, get_logger
from guided_chat.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    scheduler: Scheduler | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI.

    Configuração inválida aborta a inicialização (fail closed), assim como
    grafos de fluxo malformados (FlowConfigError no carregamento do registro).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_timing_config())
    validation_errors.extend(settings.validate_domains_config())

    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    app = FastAPI(title=settings.service_name, version=settings.version)
    app.add_middleware(CorrelationIdMiddleware, header_name=settings.correlation_id_header)
    app.include_router(router)

    registry = load_registry(settings.enabled_domains)
    app.state.settings = settings
    app.state.chat_service = ChatService(
        settings=settings,
        registry=registry,
        scheduler=scheduler or AsyncioScheduler(),
        rng=rng,
    )

    logger.info(
        "Guided chat app created",
        extra={"environment": settings.environment, "domains": settings.enabled_domains},
    )
    return app


app = create_app()
