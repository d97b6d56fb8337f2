"""Motor de fluxo puro: planeja transições sem possuir estado.

Conforme o contrato do runtime:
- activate(): mensagem do bot + progresso/sidebar novos + auto-avanço
- respond(): sidebar/scratch novos + próximo passo resolvido
- Nunca muta as listas recebidas; o ChatService aplica o plano na conversa
- Passo desconhecido é inerte (WARNING no log, sem exceção)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from guided_chat.domain.enums import MessageType
from guided_chat.domain.flow import FlowConfig, FlowStep
from guided_chat.domain.models import (
    InputField,
    Message,
    ProgressStep,
    SidebarSection,
)
from guided_chat.domain.patches import (
    PatchContext,
    apply_progress_patches,
    apply_sidebar_patches,
)
from guided_chat.observability.logging import get_logger
from guided_chat.utils.ids import new_message_id

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True)
class ActivationPlan:
    """Resultado da ativação de um passo.

    Contém:
    - message: mensagem do bot a anexar
    - progress / sidebar: novos estados (listas novas)
    - auto_advance_to: próximo passo de avanço automático (ou None)
    """

    step: FlowStep
    message: Message
    progress: list[ProgressStep]
    sidebar: list[SidebarSection]
    auto_advance_to: str | None = None


@dataclass(slots=True)
class ResponsePlan:
    """Resultado do processamento de uma resposta do usuário."""

    step_id: str | None
    sidebar: list[SidebarSection]
    scratch: dict[str, str] = field(default_factory=dict)
    next_step_id: str | None = None
    step_found: bool = True

    def is_terminal(self) -> bool:
        """True se não há próximo passo (fim do fluxo ou passo desconhecido)."""
        return self.next_step_id is None


class FlowEngine:
    """Planejador de transições, determinístico dado (grafo, cursor, estado)."""

    def activate(
        self,
        flow: FlowConfig,
        step_id: str | None,
        progress: list[ProgressStep],
        sidebar: list[SidebarSection],
        scratch: Mapping[str, str] | None = None,
    ) -> ActivationPlan | None:
        """Planeja a ativação de `step_id`.

        Returns:
            ActivationPlan, ou None se o passo não existe no grafo
        """
        step = flow.get_step(step_id)
        if step is None:
            logger.warning(
                "Flow step not found on activation",
                extra={"domain": flow.domain, "step_id": step_id},
            )
            return None

        ctx = PatchContext(value="", scratch=dict(scratch or {}))
        new_progress = apply_progress_patches(progress, step.progress, ctx)

        # Patches de sidebar na ativação só valem para passos informativos
        if step.sidebar and not step.expects_response:
            new_sidebar = apply_sidebar_patches(sidebar, step.sidebar, ctx)
        else:
            new_sidebar = list(sidebar)

        message = Message(
            id=new_message_id(),
            type=MessageType.BOT,
            content=step.bot_message,
            quick_replies=list(step.quick_replies) if step.quick_replies else None,
            input_field=step.input_field,
        )

        logger.debug(
            "Flow step activation planned",
            extra={
                "domain": flow.domain,
                "step_id": step.id,
                "auto_advance_to": step.auto_advance_target,
            },
        )
        return ActivationPlan(
            step=step,
            message=message,
            progress=new_progress,
            sidebar=new_sidebar,
            auto_advance_to=step.auto_advance_target,
        )

    def respond(
        self,
        flow: FlowConfig,
        step_id: str | None,
        value: str,
        sidebar: list[SidebarSection],
        scratch: Mapping[str, str] | None = None,
    ) -> ResponsePlan:
        """Planeja a resposta do usuário ao passo corrente.

        Ordem: lembra o valor no scratch (se o passo declara `remember`),
        aplica patches de sidebar com o valor literal e resolve o próximo passo.
        """
        current_scratch = dict(scratch or {})
        step = flow.get_step(step_id)
        if step is None:
            logger.warning(
                "Flow step not found on response",
                extra={"domain": flow.domain, "step_id": step_id},
            )
            return ResponsePlan(
                step_id=step_id,
                sidebar=list(sidebar),
                scratch=current_scratch,
                next_step_id=None,
                step_found=False,
            )

        if step.remember:
            current_scratch[step.remember] = value

        ctx = PatchContext(value=value, scratch=current_scratch)
        new_sidebar = apply_sidebar_patches(sidebar, step.sidebar, ctx)
        next_step_id = step.resolve_next(value, current_scratch)

        if next_step_id is not None and flow.get_step(next_step_id) is None:
            logger.warning(
                "Flow resolved to unknown step",
                extra={"domain": flow.domain, "step_id": step.id, "next_step_id": next_step_id},
            )

        logger.debug(
            "Flow response planned",
            extra={
                "domain": flow.domain,
                "step_id": step.id,
                "next_step_id": next_step_id,
                "terminal": next_step_id is None,
            },
        )
        return ResponsePlan(
            step_id=step.id,
            sidebar=new_sidebar,
            scratch=current_scratch,
            next_step_id=next_step_id,
        )

    def expected_input(self, flow: FlowConfig, step_id: str | None) -> InputField | None:
        step = flow.get_step(step_id)
        return step.input_field if step else None
