"""Atalhos para declarar grafos de fluxo de forma compacta."""

from __future__ import annotations

from guided_chat.domain.enums import InputFieldType, StepStatus
from guided_chat.domain.models import InputField, QuickReply
from guided_chat.domain.patches import SetField, SetStatus


def replies(*options: tuple[str, str], **flags: object) -> tuple[QuickReply, ...]:
    """Quick replies numeradas a partir de (label, value).

    Flags extras (is_primary_action, exclusive_group) valem para todas as opções.
    """
    return tuple(
        QuickReply(id=str(index), label=label, value=value, **flags)
        for index, (label, value) in enumerate(options, start=1)
    )


def yes_no() -> tuple[QuickReply, ...]:
    return replies(("✅ Yes", "Yes"), ("❌ No", "No"))


def text_input(
    field_id: str,
    label: str,
    placeholder: str | None = None,
    *,
    kind: InputFieldType = InputFieldType.TEXT,
    required: bool = True,
) -> InputField:
    return InputField(
        id=field_id, type=kind, label=label, placeholder=placeholder, required=required
    )


def advance_stage(completed: str, current: str) -> tuple[SetStatus, SetStatus]:
    """Marca um estágio como concluído e o seguinte como corrente."""
    return (
        SetStatus(step_id=completed, status=StepStatus.COMPLETED),
        SetStatus(step_id=current, status=StepStatus.CURRENT),
    )


def set_field(section_id: str, label: str, **kwargs: object) -> SetField:
    return SetField(section_id=section_id, label=label, **kwargs)
