"""Registro de domínios: grafo de fluxo + estado inicial + colaboradores.

O carregamento valida todos os grafos; configuração malformada levanta
FlowConfigError e deve abortar a inicialização.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from guided_chat.domain.enums import DomainId
from guided_chat.domain.flow import FlowConfig, FlowConfigError
from guided_chat.domain.models import ProgressStep, SidebarSection
from guided_chat.domain.patches import SidebarPatch
from guided_chat.flows import banking, booking, healthcare, insurance
from guided_chat.flows.agents import AGENTS, SupportAgent
from guided_chat.flows.attachments import FILE_RULES, FileRules
from guided_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class DomainProfile(BaseModel):
    """Tudo o que um domínio fornece ao runtime. Nunca mutado; sempre copiado."""

    model_config = ConfigDict(frozen=True)

    id: DomainId
    name: str
    title: str
    subtitle: str
    fallback_title: str
    flow: FlowConfig
    initial_progress: tuple[ProgressStep, ...]
    initial_sidebar: tuple[SidebarSection, ...]
    creation_patches: tuple[SidebarPatch, ...] = ()
    file_rules: FileRules
    agents: tuple[SupportAgent, ...] = ()


DEFAULT_PROFILES: tuple[DomainProfile, ...] = (
    DomainProfile(
        id=DomainId.INSURANCE,
        name="Insurance Claims",
        title=insurance.BRAND_NAME,
        subtitle=insurance.BRAND_TAGLINE,
        fallback_title="Insurance Chat",
        flow=insurance.FLOW,
        initial_progress=insurance.PROGRESS,
        initial_sidebar=insurance.SIDEBAR,
        creation_patches=insurance.CREATION_PATCHES,
        file_rules=FILE_RULES[DomainId.INSURANCE],
        agents=AGENTS[DomainId.INSURANCE],
    ),
    DomainProfile(
        id=DomainId.BANKING,
        name="Banking",
        title="Virtual Banking Assistant",
        subtitle="Account Services",
        fallback_title="Banking Chat",
        flow=banking.FLOW,
        initial_progress=banking.PROGRESS,
        initial_sidebar=banking.SIDEBAR,
        file_rules=FILE_RULES[DomainId.BANKING],
        agents=AGENTS[DomainId.BANKING],
    ),
    DomainProfile(
        id=DomainId.BOOKING,
        name="Booking",
        title="Virtual Booking Assistant",
        subtitle="Travel Reservations",
        fallback_title="Travel Booking Chat",
        flow=booking.FLOW,
        initial_progress=booking.PROGRESS,
        initial_sidebar=booking.SIDEBAR,
        file_rules=FILE_RULES[DomainId.BOOKING],
        agents=AGENTS[DomainId.BOOKING],
    ),
    DomainProfile(
        id=DomainId.HEALTHCARE,
        name="Healthcare",
        title="Virtual Healthcare Assistant",
        subtitle="Medical Services",
        fallback_title="Healthcare Chat",
        flow=healthcare.FLOW,
        initial_progress=healthcare.PROGRESS,
        initial_sidebar=healthcare.SIDEBAR,
        file_rules=FILE_RULES[DomainId.HEALTHCARE],
        agents=AGENTS[DomainId.HEALTHCARE],
    ),
)


class DomainRegistry:
    """Mapa domínio → perfil, com grafos validados na construção."""

    def __init__(self, profiles: Iterable[DomainProfile]) -> None:
        self._profiles: dict[DomainId, DomainProfile] = {}
        for profile in profiles:
            if profile.flow.domain != profile.id:
                raise FlowConfigError(
                    f"Profile '{profile.id}' carries a flow for domain '{profile.flow.domain}'"
                )
            profile.flow.validate_graph()
            self._profiles[profile.id] = profile

        logger.info(
            "Domain registry loaded",
            extra={
                "domains": [str(domain) for domain in self._profiles],
                "steps_total": sum(len(p.flow.steps) for p in self._profiles.values()),
            },
        )

    def get(self, domain: DomainId | str) -> DomainProfile | None:
        try:
            return self._profiles.get(DomainId(domain))
        except ValueError:
            return None

    def __contains__(self, domain: object) -> bool:
        return isinstance(domain, str) and self.get(domain) is not None

    def domains(self) -> list[DomainId]:
        return list(self._profiles)

    def profiles(self) -> list[DomainProfile]:
        return list(self._profiles.values())


def load_registry(enabled_domains: Iterable[str] | None = None) -> DomainRegistry:
    """Carrega os perfis padrão, filtrando pelos domínios habilitados."""
    if enabled_domains is None:
        return DomainRegistry(DEFAULT_PROFILES)
    enabled = set(enabled_domains)
    return DomainRegistry(p for p in DEFAULT_PROFILES if p.id in enabled)
