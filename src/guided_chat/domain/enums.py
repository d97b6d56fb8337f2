"""Enums de domínio para mensagens, progresso, sidebar e inputs."""

from __future__ import annotations

from enum import StrEnum


class DomainId(StrEnum):
    """Domínios com fluxo conversacional roteirizado."""

    INSURANCE = "insurance"
    BANKING = "banking"
    BOOKING = "booking"
    HEALTHCARE = "healthcare"


class MessageType(StrEnum):
    """Autor da mensagem no log da conversa."""

    BOT = "bot"
    USER = "user"


class StepStatus(StrEnum):
    """Status de um passo do tracker de progresso."""

    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"


class BadgeVariant(StrEnum):
    """Variantes visuais do badge de seção da sidebar."""

    DEFAULT = "default"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class InputFieldType(StrEnum):
    """Tipos de input esperados por um passo do fluxo."""

    TEXT = "text"
    EMAIL = "email"
    DATE = "date"
    TEL = "tel"
    NUMBER = "number"
    FILE = "file"
    TEXTAREA = "textarea"


class AttachmentStatus(StrEnum):
    """Estado do upload (simulado) de um anexo."""

    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


class AgentStatus(StrEnum):
    """Disponibilidade de um atendente humano."""

    ONLINE = "online"
    BUSY = "busy"
    OFFLINE = "offline"


class ConnectionStatus(StrEnum):
    """Estado da conexão (simulada) com atendente humano."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"
