"""Testes dos grafos de fluxo e do registro de domínios."""

from __future__ import annotations

import pytest

from guided_chat.domain.enums import DomainId
from guided_chat.domain.flow import Branch, FlowConfig, FlowConfigError, FlowStep
from guided_chat.flows import booking
from guided_chat.flows.common import replies
from guided_chat.flows.registry import DEFAULT_PROFILES, DomainProfile, DomainRegistry, load_registry


@pytest.mark.parametrize("profile", DEFAULT_PROFILES, ids=lambda p: str(p.id))
def test_default_graphs_are_consistent(profile: DomainProfile):
    assert profile.flow.graph_errors() == []
    assert profile.flow.get_step(profile.flow.start_step_id) is not None


@pytest.mark.parametrize("profile", DEFAULT_PROFILES, ids=lambda p: str(p.id))
def test_every_quick_reply_resolves_to_known_step(profile: DomainProfile):
    """Cada valor de quick reply leva a um passo existente (ou ao fim do fluxo)."""
    step_ids = profile.flow.step_ids()
    for step in profile.flow.steps:
        if not isinstance(step.next, Branch) or not step.quick_replies:
            continue
        for reply in step.quick_replies:
            target = step.resolve_next(reply.value, {})
            assert target is None or target in step_ids, (step.id, reply.value, target)


def test_banking_fraud_routes_to_account_number():
    profile = load_registry().get(DomainId.BANKING)
    welcome = profile.flow.get_step("welcome")
    assert welcome.resolve_next("fraud", {}) == "account_number"
    assert welcome.resolve_next("dispute", {}) == "account_number"


def test_departure_date_branches_on_remembered_trip_type():
    step = booking.FLOW.get_step("departure_date")
    assert step.resolve_next("2026-11-20", {booking.TRIP_TYPE_KEY: booking.ONE_WAY}) == "passenger_count"
    assert step.resolve_next("2026-11-20", {booking.TRIP_TYPE_KEY: booking.ROUND_TRIP}) == "return_date"


def test_auto_advance_only_for_literal_pass_through_steps():
    info = FlowStep(id="info", bot_message="hi", next="ask")
    ask = FlowStep(id="ask", bot_message="?", quick_replies=replies(("A", "a")), next="info")
    branching = FlowStep(id="b", bot_message="...", next=Branch(default="info"))

    assert info.auto_advance_target == "ask"
    assert ask.auto_advance_target is None
    assert branching.auto_advance_target is None


def test_broken_reference_is_fatal():
    flow = FlowConfig(
        domain=DomainId.BANKING,
        start_step_id="start",
        steps=(FlowStep(id="start", bot_message="hi", next="missing"),),
    )
    with pytest.raises(FlowConfigError, match="unknown step 'missing'"):
        flow.validate_graph()


def test_scratch_branch_requires_remembering_step():
    flow = FlowConfig(
        domain=DomainId.BOOKING,
        start_step_id="start",
        steps=(
            FlowStep(
                id="start",
                bot_message="hi",
                input_field=None,
                next=Branch(scratch_key="trip_type", default="start"),
            ),
        ),
    )
    assert any("trip_type" in error for error in flow.graph_errors())


def test_registry_rejects_mismatched_domain():
    profile = DEFAULT_PROFILES[0].model_copy(update={"id": DomainId.BANKING})
    with pytest.raises(FlowConfigError):
        DomainRegistry([profile])


def test_registry_filters_enabled_domains():
    registry = load_registry(["booking"])
    assert registry.domains() == [DomainId.BOOKING]
    assert registry.get("insurance") is None
    assert registry.get("unknown") is None
    assert "booking" in registry
