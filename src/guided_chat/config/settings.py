"""Configurações da aplicação via variáveis de ambiente.

Todos os tempos do fluxo (digitação, auto-avanço, avanço após resposta) são
configuráveis, mas os defaults reproduzem o comportamento roteirizado:
500ms / 500ms / 800ms.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# -----------------------------------------------------------------------------
# Constantes do fluxo
# -----------------------------------------------------------------------------
DEFAULT_STEP_DELAY_MS: int = 500
AUTO_ADVANCE_DELAY_MS: int = 500
RESPONSE_ADVANCE_DELAY_MS: int = 800
TITLE_MAX_CHARS: int = 50

SUPPORTED_DOMAINS: tuple[str, ...] = ("insurance", "banking", "booking", "healthcare")


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
    )

    # Aplicação
    service_name: str = "guided_chat"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    timezone: str = "America/New_York"  # Usado para "hoje" na validação de datas

    # Tempos do fluxo (ms)
    default_step_delay_ms: int = DEFAULT_STEP_DELAY_MS  # Digitação quando o passo não define delay
    auto_advance_delay_ms: int = AUTO_ADVANCE_DELAY_MS  # Passos informativos (sem input)
    response_advance_delay_ms: int = RESPONSE_ADVANCE_DELAY_MS  # Após resposta do usuário

    # Conversas
    title_max_chars: int = TITLE_MAX_CHARS
    enabled_domains: list[str] = list(SUPPORTED_DOMAINS)

    # Colaboradores simulados
    agent_connect_delay_ms: int = 2000  # Conexão simulada com atendente humano
    upload_tick_ms: int = 200  # Intervalo de progresso do upload simulado
    upload_failure_rate: float = 0.05  # 5% dos uploads simulados falham

    # Observabilidade
    correlation_id_header: str = "X-Correlation-ID"

    def validate_timing_config(self) -> list[str]:
        """Valida tempos do fluxo.

        Retorna lista de erros (vazia = OK).
        """
        errors: list[str] = []
        timings = {
            "DEFAULT_STEP_DELAY_MS": self.default_step_delay_ms,
            "AUTO_ADVANCE_DELAY_MS": self.auto_advance_delay_ms,
            "RESPONSE_ADVANCE_DELAY_MS": self.response_advance_delay_ms,
            "AGENT_CONNECT_DELAY_MS": self.agent_connect_delay_ms,
        }
        for name, value in timings.items():
            if value < 0:
                errors.append(f"{name} deve ser >= 0 (atual: {value})")

        if self.upload_tick_ms <= 0:
            errors.append("UPLOAD_TICK_MS deve ser > 0")
        if not 0 <= self.upload_failure_rate <= 1:
            errors.append("UPLOAD_FAILURE_RATE deve estar entre 0 e 1")
        if self.title_max_chars < 1:
            errors.append("TITLE_MAX_CHARS deve ser >= 1")
        return errors

    def validate_domains_config(self) -> list[str]:
        """Valida domínios habilitados contra os fluxos disponíveis."""
        errors: list[str] = []
        if not self.enabled_domains:
            errors.append("ENABLED_DOMAINS não pode ser vazio")
        unknown = [d for d in self.enabled_domains if d not in SUPPORTED_DOMAINS]
        if unknown:
            errors.append(
                f"ENABLED_DOMAINS contém domínios desconhecidos: {unknown}. "
                f"Valores válidos: {list(SUPPORTED_DOMAINS)}"
            )
        return errors


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
