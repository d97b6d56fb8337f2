"""Testes da linguagem de patches de progresso e sidebar."""

from __future__ import annotations

from guided_chat.domain.enums import BadgeVariant, StepStatus
from guided_chat.domain.models import ProgressStep, SidebarField, SidebarSection
from guided_chat.domain.patches import (
    CompleteAll,
    Condition,
    PatchContext,
    RemoveField,
    ReplaceSections,
    SetBadge,
    SetField,
    SetStatus,
    UpsertField,
    ValueTransform,
    apply_progress_patches,
    apply_sidebar_patches,
    format_us_date,
)


def _trip_section() -> list[SidebarSection]:
    return [
        SidebarSection(
            id="trip",
            title="Trip",
            fields=[
                SidebarField(label="From", value="Not provided"),
                SidebarField(label="Trip Type", value="Not selected"),
                SidebarField(label="Return Date", value="Not selected"),
            ],
        )
    ]


def test_set_field_does_not_mutate_input():
    sections = _trip_section()
    result = apply_sidebar_patches(
        sections,
        [SetField(section_id="trip", label="From", transform=ValueTransform.CITY_CODE)],
        PatchContext(value="New York"),
    )
    assert result[0].field("From").value == "New York (JFK)"
    assert sections[0].field("From").value == "Not provided"


def test_unknown_city_gets_placeholder_code():
    result = apply_sidebar_patches(
        _trip_section(),
        [SetField(section_id="trip", label="From", transform=ValueTransform.CITY_CODE)],
        PatchContext(value="Springfield"),
    )
    assert result[0].field("From").value == "Springfield (XXX)"


def test_upsert_is_idempotent():
    """Selecionar 'One-way' duas vezes mantém um único campo 'Trip Type'."""
    patch = UpsertField(section_id="trip", label="Trip Type")
    ctx = PatchContext(value="One-way")
    once = apply_sidebar_patches(_trip_section(), [patch], ctx)
    twice = apply_sidebar_patches(once, [patch], ctx)

    labels = [item.label for item in twice[0].fields]
    assert labels.count("Trip Type") == 1
    assert twice == once


def test_upsert_appends_missing_label():
    result = apply_sidebar_patches(
        _trip_section(),
        [UpsertField(section_id="trip", label="Preferences", bold=True)],
        PatchContext(value="Nonstop"),
    )
    added = result[0].fields[-1]
    assert (added.label, added.value, added.bold) == ("Preferences", "Nonstop", True)


def test_remove_field_respects_scratch_condition():
    patch = RemoveField(
        section_id="trip",
        label="Return Date",
        when=Condition(scratch_equals={"trip_type": "One-way"}),
    )
    kept = apply_sidebar_patches(
        _trip_section(), [patch], PatchContext(scratch={"trip_type": "Round-trip"})
    )
    removed = apply_sidebar_patches(
        _trip_section(), [patch], PatchContext(scratch={"trip_type": "One-way"})
    )
    assert kept[0].field("Return Date") is not None
    assert removed[0].field("Return Date") is None


def test_value_present_condition_skips_empty_value():
    patch = UpsertField(section_id="trip", label="Preferences", when=Condition(value_present=True))
    result = apply_sidebar_patches(_trip_section(), [patch], PatchContext(value="  "))
    assert result[0].field("Preferences") is None


def test_value_map_with_default_and_template():
    patch = SetField(
        section_id="trip",
        label="From",
        value_map={"yes": "Processing..."},
        default="Pending",
        template="<{value}>",
    )
    mapped = apply_sidebar_patches(_trip_section(), [patch], PatchContext(value="yes"))
    fallback = apply_sidebar_patches(_trip_section(), [patch], PatchContext(value="review"))
    assert mapped[0].field("From").value == "<Processing...>"
    assert fallback[0].field("From").value == "<Pending>"


def test_badge_variant_map():
    patch = SetBadge(
        section_id="trip",
        transform=ValueTransform.UPPER,
        variant=BadgeVariant.ERROR,
        variant_map={"Minor": BadgeVariant.SUCCESS},
    )
    minor = apply_sidebar_patches(_trip_section(), [patch], PatchContext(value="Minor"))
    major = apply_sidebar_patches(_trip_section(), [patch], PatchContext(value="Major"))
    assert (minor[0].badge.label, minor[0].badge.variant) == ("MINOR", BadgeVariant.SUCCESS)
    assert (major[0].badge.label, major[0].badge.variant) == ("MAJOR", BadgeVariant.ERROR)


def test_replace_sections_uses_fallback_template():
    hotel = (SidebarSection(id="hotel", title="Hotel"),)
    flight = (SidebarSection(id="flight", title="Flight"),)
    patch = ReplaceSections(templates={"hotel": hotel, "flight": flight}, fallback="flight")

    assert apply_sidebar_patches([], [patch], PatchContext(value="hotel"))[0].id == "hotel"
    assert apply_sidebar_patches([], [patch], PatchContext(value="other"))[0].id == "flight"


def test_missing_section_is_noop():
    sections = _trip_section()
    result = apply_sidebar_patches(
        sections, [SetField(section_id="nope", label="From", value="x")], PatchContext()
    )
    assert result == sections


def test_progress_patches():
    steps = [
        ProgressStep(id="a", label="A", status=StepStatus.CURRENT),
        ProgressStep(id="b", label="B"),
    ]
    advanced = apply_progress_patches(
        steps,
        [
            SetStatus(step_id="a", status=StepStatus.COMPLETED),
            SetStatus(step_id="b", status=StepStatus.CURRENT),
        ],
    )
    assert [s.status for s in advanced] == [StepStatus.COMPLETED, StepStatus.CURRENT]
    assert steps[0].status == StepStatus.CURRENT

    done = apply_progress_patches(advanced, [CompleteAll()])
    assert all(s.status == StepStatus.COMPLETED for s in done)


def test_format_us_date():
    assert format_us_date("2027-01-05") == "Jan 5, 2027"
    assert format_us_date("whenever") == "whenever"
