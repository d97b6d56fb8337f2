"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from guided_chat.application.chat_service import ChatService
from guided_chat.config.settings import Settings


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_chat_service(request: Request) -> ChatService:
    """Retorna o runtime do chat (um por aplicação)."""

    return request.app.state.chat_service
