"""Linguagem de patches para progresso e sidebar.

Substitui callbacks arbitrários por dados serializáveis:
- Patches de progresso: set_status, complete_all
- Patches de sidebar: set_field, upsert_field, remove_field,
  replace_fields, set_badge, replace_sections
- Todo patch aceita condição `when` (valor submetido ou scratch da conversa)

Contrato:
- Puro: nunca muta as listas recebidas, sempre retorna listas novas
- Idempotente: aplicar o mesmo patch duas vezes com o mesmo valor
  produz o mesmo estado que aplicar uma vez
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Annotated, Literal

from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, Field

from guided_chat.domain.enums import BadgeVariant, StepStatus
from guided_chat.domain.models import (
    ProgressStep,
    SidebarBadge,
    SidebarField,
    SidebarSection,
    clone_sidebar,
)

# Códigos de aeroporto conhecidos (cidade em minúsculas → IATA)
CITY_CODES: dict[str, str] = {
    "new york": "JFK",
    "los angeles": "LAX",
    "chicago": "ORD",
    "san francisco": "SFO",
    "miami": "MIA",
    "boston": "BOS",
    "seattle": "SEA",
    "atlanta": "ATL",
    "dallas": "DFW",
    "denver": "DEN",
}
UNKNOWN_CITY_CODE = "XXX"


class ValueTransform(StrEnum):
    """Transformação aplicada ao valor submetido antes de gravar na sidebar."""

    RAW = "raw"
    UPPER = "upper"
    CITY_CODE = "city_code"
    US_DATE = "us_date"


@dataclass(frozen=True, slots=True)
class PatchContext:
    """Entrada dos patches: valor submetido e scratch da conversa."""

    value: str = ""
    scratch: Mapping[str, str] = field(default_factory=dict)


def city_code(city: str) -> str:
    return CITY_CODES.get(city.strip().lower(), UNKNOWN_CITY_CODE)


def format_us_date(raw: str) -> str:
    """Formata data no padrão americano curto (ex.: 'Jan 5, 2027').

    Valor não parseável é devolvido sem alteração.
    """
    try:
        parsed = date_parser.parse(raw)
    except (ValueError, OverflowError):
        return raw
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def apply_transform(transform: ValueTransform, value: str) -> str:
    if transform == ValueTransform.UPPER:
        return value.upper()
    if transform == ValueTransform.CITY_CODE:
        return f"{value} ({city_code(value)})"
    if transform == ValueTransform.US_DATE:
        return format_us_date(value)
    return value


class Condition(BaseModel):
    """Condição de aplicação de um patch; todos os critérios presentes devem casar."""

    model_config = ConfigDict(frozen=True)

    value_in: tuple[str, ...] | None = None
    value_present: bool | None = None
    scratch_equals: dict[str, str] | None = None

    def matches(self, ctx: PatchContext) -> bool:
        if self.value_in is not None and ctx.value not in self.value_in:
            return False
        if self.value_present is not None and bool(ctx.value.strip()) != self.value_present:
            return False
        if self.scratch_equals:
            for key, expected in self.scratch_equals.items():
                if ctx.scratch.get(key) != expected:
                    return False
        return True


class _Patch(BaseModel):
    model_config = ConfigDict(frozen=True)

    when: Condition | None = None

    def applies(self, ctx: PatchContext) -> bool:
        return self.when is None or self.when.matches(ctx)


class _ValueSource(_Patch):
    """Origem do valor gravado: literal fixo ou valor submetido transformado.

    Com `value_map`, valores mapeados são substituídos; valores fora do mapa
    usam `default` quando definido.
    """

    value: str | int | None = None
    transform: ValueTransform = ValueTransform.RAW
    value_map: dict[str, str] | None = None
    default: str | None = None
    template: str = "{value}"

    def resolve(self, ctx: PatchContext) -> str | int:
        if self.value is not None:
            return self.value
        resolved = ctx.value
        if self.value_map is not None:
            if resolved in self.value_map:
                resolved = self.value_map[resolved]
            elif self.default is not None:
                resolved = self.default
        return self.template.format(value=apply_transform(self.transform, resolved))


# === Progresso ===


class SetStatus(_Patch):
    op: Literal["set_status"] = "set_status"
    step_id: str
    status: StepStatus


class CompleteAll(_Patch):
    op: Literal["complete_all"] = "complete_all"


ProgressPatch = Annotated[SetStatus | CompleteAll, Field(discriminator="op")]


def apply_progress_patches(
    steps: list[ProgressStep],
    patches: Iterable[ProgressPatch],
    ctx: PatchContext | None = None,
) -> list[ProgressStep]:
    """Aplica patches de progresso em sequência, retornando lista nova."""
    ctx = ctx or PatchContext()
    result = [step.model_copy() for step in steps]
    for patch in patches:
        if not patch.applies(ctx):
            continue
        if isinstance(patch, CompleteAll):
            result = [step.model_copy(update={"status": StepStatus.COMPLETED}) for step in result]
        else:
            result = [
                step.model_copy(update={"status": patch.status})
                if step.id == patch.step_id
                else step
                for step in result
            ]
    return result


# === Sidebar ===


class SetField(_ValueSource):
    """Atualiza o valor do campo com o label informado (se existir)."""

    op: Literal["set_field"] = "set_field"
    section_id: str
    label: str


class UpsertField(_ValueSource):
    """Atualiza o campo se existir, senão anexa ao final da seção."""

    op: Literal["upsert_field"] = "upsert_field"
    section_id: str
    label: str
    bold: bool | None = None
    highlight: bool | None = None


class RemoveField(_Patch):
    op: Literal["remove_field"] = "remove_field"
    section_id: str
    label: str


class ReplaceFields(_Patch):
    op: Literal["replace_fields"] = "replace_fields"
    section_id: str
    fields: tuple[SidebarField, ...]


class SetBadge(_ValueSource):
    """Define o badge da seção; variante fixa ou mapeada pelo valor submetido."""

    op: Literal["set_badge"] = "set_badge"
    section_id: str
    variant: BadgeVariant = BadgeVariant.DEFAULT
    variant_map: dict[str, BadgeVariant] | None = None

    def resolve_variant(self, ctx: PatchContext) -> BadgeVariant:
        if self.variant_map is not None and ctx.value in self.variant_map:
            return self.variant_map[ctx.value]
        return self.variant


class ReplaceSections(_Patch):
    """Troca a sidebar inteira pelo template selecionado pelo valor submetido."""

    op: Literal["replace_sections"] = "replace_sections"
    templates: dict[str, tuple[SidebarSection, ...]]
    fallback: str | None = None

    def select(self, ctx: PatchContext) -> tuple[SidebarSection, ...] | None:
        if ctx.value in self.templates:
            return self.templates[ctx.value]
        if self.fallback is not None:
            return self.templates.get(self.fallback)
        return None


SidebarPatch = Annotated[
    SetField | UpsertField | RemoveField | ReplaceFields | SetBadge | ReplaceSections,
    Field(discriminator="op"),
]


def _patch_section(
    sections: list[SidebarSection], section_id: str, patch: SidebarPatch, ctx: PatchContext
) -> list[SidebarSection]:
    return [
        _apply_to_section(section, patch, ctx) if section.id == section_id else section
        for section in sections
    ]


def _apply_to_section(
    section: SidebarSection, patch: SidebarPatch, ctx: PatchContext
) -> SidebarSection:
    if isinstance(patch, SetField):
        value = patch.resolve(ctx)
        fields = [
            item.model_copy(update={"value": value}) if item.label == patch.label else item
            for item in section.fields
        ]
        return section.model_copy(update={"fields": fields})

    if isinstance(patch, UpsertField):
        value = patch.resolve(ctx)
        if section.field(patch.label) is not None:
            fields = [
                item.model_copy(update={"value": value}) if item.label == patch.label else item
                for item in section.fields
            ]
        else:
            fields = [
                *section.fields,
                SidebarField(
                    label=patch.label, value=value, bold=patch.bold, highlight=patch.highlight
                ),
            ]
        return section.model_copy(update={"fields": fields})

    if isinstance(patch, RemoveField):
        fields = [item for item in section.fields if item.label != patch.label]
        return section.model_copy(update={"fields": fields})

    if isinstance(patch, ReplaceFields):
        fields = [item.model_copy() for item in patch.fields]
        return section.model_copy(update={"fields": fields})

    if isinstance(patch, SetBadge):
        badge = SidebarBadge(label=str(patch.resolve(ctx)), variant=patch.resolve_variant(ctx))
        return section.model_copy(update={"badge": badge})

    return section


def apply_sidebar_patches(
    sections: list[SidebarSection],
    patches: Iterable[SidebarPatch],
    ctx: PatchContext | None = None,
) -> list[SidebarSection]:
    """Aplica patches de sidebar em sequência, retornando lista nova.

    Seções inexistentes são ignoradas (o patch vira no-op).
    """
    ctx = ctx or PatchContext()
    result = list(sections)
    for patch in patches:
        if not patch.applies(ctx):
            continue
        if isinstance(patch, ReplaceSections):
            template = patch.select(ctx)
            if template is not None:
                result = clone_sidebar(list(template))
            continue
        result = _patch_section(result, patch.section_id, patch, ctx)
    return result
