"""Configurações centralizadas do guided_chat.

Este módulo exporta:
- Settings: classe de configuração via variáveis de ambiente
- get_settings: função cacheada para obter instância única
- Constantes de tempo do fluxo (DEFAULT_STEP_DELAY_MS, etc.)

Uso típico:
    from guided_chat.config import get_settings, RESPONSE_ADVANCE_DELAY_MS
"""

from guided_chat.config.settings import (
    AUTO_ADVANCE_DELAY_MS,
    DEFAULT_STEP_DELAY_MS,
    RESPONSE_ADVANCE_DELAY_MS,
    SUPPORTED_DOMAINS,
    TITLE_MAX_CHARS,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "AUTO_ADVANCE_DELAY_MS",
    "DEFAULT_STEP_DELAY_MS",
    "RESPONSE_ADVANCE_DELAY_MS",
    "SUPPORTED_DOMAINS",
    "TITLE_MAX_CHARS",
]
