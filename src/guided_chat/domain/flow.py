"""Tipos do grafo de passos do fluxo conversacional.

- FlowStep: nó do grafo (mensagem do bot, input esperado, próximo passo, patches)
- Branch: tabela de decisão (valor → próximo passo), sem callbacks
- FlowConfig: grafo completo de um domínio, validado no carregamento
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from guided_chat.domain.enums import DomainId
from guided_chat.domain.models import InputField, QuickReply
from guided_chat.domain.patches import ProgressPatch, SidebarPatch


class FlowConfigError(Exception):
    """Grafo de fluxo malformado (erro fatal de inicialização)."""


class Branch(BaseModel):
    """Resolução de próximo passo por tabela.

    Casa `cases` pelo valor submetido ou, com `scratch_key`, pelo valor
    lembrado no scratch da conversa. Sem correspondência usa `default`.
    """

    model_config = ConfigDict(frozen=True)

    cases: dict[str, str | None] = {}
    default: str | None = None
    scratch_key: str | None = None

    def resolve(self, value: str, scratch: Mapping[str, str]) -> str | None:
        key = scratch.get(self.scratch_key, "") if self.scratch_key else value
        if key in self.cases:
            return self.cases[key]
        return self.default

    def targets(self) -> set[str]:
        found = {target for target in self.cases.values() if target}
        if self.default:
            found.add(self.default)
        return found


class FlowStep(BaseModel):
    """Nó do grafo de conversa de um domínio."""

    model_config = ConfigDict(frozen=True)

    id: str
    bot_message: str
    quick_replies: tuple[QuickReply, ...] | None = None
    input_field: InputField | None = None
    delay_ms: int | None = None  # None = atraso padrão das configurações
    next: str | Branch | None = None
    progress: tuple[ProgressPatch, ...] = ()
    sidebar: tuple[SidebarPatch, ...] = ()
    remember: str | None = None

    @property
    def expects_response(self) -> bool:
        """True se o passo aguarda input livre ou escolha de quick reply."""
        return self.input_field is not None or bool(self.quick_replies)

    @property
    def auto_advance_target(self) -> str | None:
        """Próximo passo de avanço automático (apenas passos informativos com next literal)."""
        if self.expects_response or not isinstance(self.next, str):
            return None
        return self.next

    def resolve_next(self, value: str, scratch: Mapping[str, str]) -> str | None:
        if isinstance(self.next, Branch):
            return self.next.resolve(value, scratch)
        return self.next

    def next_targets(self) -> set[str]:
        if isinstance(self.next, Branch):
            return self.next.targets()
        return {self.next} if self.next else set()


class FlowConfig(BaseModel):
    """Grafo de passos de um domínio. Nunca mutado após o carregamento."""

    model_config = ConfigDict(frozen=True)

    domain: DomainId
    start_step_id: str
    steps: tuple[FlowStep, ...]

    def get_step(self, step_id: str | None) -> FlowStep | None:
        if step_id is None:
            return None
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def step_ids(self) -> set[str]:
        return {step.id for step in self.steps}

    def graph_errors(self) -> list[str]:
        """Lista problemas estruturais do grafo (vazia se consistente)."""
        errors: list[str] = []
        seen: set[str] = set()
        for step in self.steps:
            if step.id in seen:
                errors.append(f"duplicate step id '{step.id}'")
            seen.add(step.id)

        if self.start_step_id not in seen:
            errors.append(f"start step '{self.start_step_id}' not found")

        for step in self.steps:
            for target in sorted(step.next_targets()):
                if target not in seen:
                    errors.append(f"step '{step.id}' points to unknown step '{target}'")
            if isinstance(step.next, Branch) and step.next.scratch_key:
                if not any(other.remember == step.next.scratch_key for other in self.steps):
                    errors.append(
                        f"step '{step.id}' branches on scratch key "
                        f"'{step.next.scratch_key}' that no step remembers"
                    )
        return errors

    def validate_graph(self) -> None:
        """Valida o grafo; levanta FlowConfigError se houver referências quebradas."""
        errors = self.graph_errors()
        if errors:
            raise FlowConfigError(f"Invalid flow for domain '{self.domain}': " + "; ".join(errors))
