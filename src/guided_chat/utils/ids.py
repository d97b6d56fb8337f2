"""Geradores de identificadores."""

from __future__ import annotations

import secrets
import uuid


def new_conversation_id() -> str:
    """Gera um conversation_id único."""

    return str(uuid.uuid4())


def new_message_id() -> str:
    """Gera um message_id único (ordenável apenas dentro da conversa)."""

    return uuid.uuid4().hex


def new_file_id() -> str:
    """Gera ID de anexo no formato file_<hex>."""

    return f"file_{secrets.token_hex(6)}"
