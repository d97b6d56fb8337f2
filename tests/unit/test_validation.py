"""Testes dos validadores de campo."""

from __future__ import annotations

from datetime import date

import pytest

from guided_chat.domain.validation import (
    get_validator_for_field,
    validate_date,
    validate_email,
    validate_field,
    validate_name,
    validate_number,
    validate_phone,
    validate_policy_number,
    validate_ssn_last4,
    validate_textarea,
)

TODAY = date(2026, 10, 19)


class TestPolicyNumber:
    """Limites de tamanho do número de apólice."""

    def test_seven_digits_fails(self):
        result = validate_policy_number("1234567")
        assert not result.is_valid
        assert result.error == "❌ Policy number must be at least 8 digits (currently 7)"

    def test_eight_digits_passes(self):
        assert validate_policy_number("12345678").is_valid

    def test_ten_digits_passes(self):
        assert validate_policy_number("1234567890").is_valid

    def test_eleven_digits_fails(self):
        result = validate_policy_number("12345678901")
        assert not result.is_valid
        assert result.error == "❌ Policy number cannot exceed 10 digits (currently 11)"

    def test_letters_rejected(self):
        result = validate_policy_number("12AB5678")
        assert not result.is_valid
        assert "only numbers" in (result.error or "")

    def test_surrounding_whitespace_is_ignored(self):
        assert validate_policy_number("  887654321 ").is_valid


def test_email_rules():
    assert validate_email("name@example.com").is_valid
    assert not validate_email("name@example").is_valid
    assert validate_email("").error == "❌ Email address is required"


def test_phone_strips_separators():
    assert validate_phone("(555) 123-4567").is_valid
    assert validate_phone("555.123.4567").is_valid
    result = validate_phone("555-1234")
    assert not result.is_valid
    assert result.error == "❌ Phone number must be exactly 10 digits (currently 7)"


def test_ssn_requires_exactly_four_digits():
    assert validate_ssn_last4("1234").is_valid
    assert not validate_ssn_last4("123").is_valid
    assert not validate_ssn_last4("12a4").is_valid


class TestDate:
    def test_today_is_accepted(self):
        assert validate_date("2026-10-19", today=TODAY).is_valid

    def test_future_is_accepted(self):
        assert validate_date("11/20/2026", today=TODAY).is_valid

    def test_past_is_rejected(self):
        result = validate_date("2026-10-18", today=TODAY)
        assert not result.is_valid
        assert result.error == "Please select a valid travel date."

    def test_garbage_is_rejected(self):
        result = validate_date("not a date", today=TODAY)
        assert result.error == "❌ Please enter a valid date"

    def test_partial_date_is_completed_from_today(self):
        assert validate_date("19", today=TODAY).is_valid
        assert validate_date("Nov 1", today=TODAY).is_valid

        result = validate_date("18", today=TODAY)
        assert result.error == "Please select a valid travel date."


def test_name_rules():
    assert validate_name("Mary-Jane O'Neil").is_valid
    assert not validate_name("J").is_valid
    assert not validate_name("John3").is_valid


def test_textarea_minimum_length():
    assert not validate_textarea("short").is_valid
    assert validate_textarea("x" * 50).is_valid


def test_number_bounds():
    assert validate_number("2020", 1990, 2027).is_valid
    assert not validate_number("1989", 1990, 2027).is_valid
    assert not validate_number("12a").is_valid


class TestDispatch:
    """Ordem de prioridade da seleção de regra."""

    def test_policy_number_wins_over_number_type(self):
        assert get_validator_for_field("number", "policyNumber") is validate_policy_number

    def test_policy_holder_name_uses_name_rule(self):
        assert get_validator_for_field("text", "policyHolderName") is validate_name

    def test_email_by_id(self):
        assert get_validator_for_field("text", "contactEmail") is validate_email

    def test_phone_by_type(self):
        assert get_validator_for_field("tel", "whatever") is validate_phone

    def test_year_is_bounded_by_next_year(self):
        validator = get_validator_for_field("number", "vehicleYear", today=TODAY)
        assert validator("2027").is_valid
        assert not validator("2028").is_valid
        assert not validator("1989").is_valid

    @pytest.mark.parametrize(
        ("field_type", "field_id", "value", "valid"),
        [
            ("date", "departureDate", "2026-10-18", False),
            ("text", "incidentLocation", "Main", False),
            ("text", "incidentLocation", "123 Main St", True),
            ("textarea", "incidentDescription", "too short", False),
            ("text", "vehicleMake", "H", True),
            ("text", "vehicleMake", "   ", False),
        ],
    )
    def test_validate_field(self, field_type, field_id, value, valid):
        assert validate_field(field_type, field_id, value, today=TODAY).is_valid is valid


DISPATCH_BRANCHES = [
    ("text", "policyNumber"),
    ("email", "policyHolderEmail"),
    ("tel", "policyHolderPhone"),
    ("text", "ssn"),
    ("date", "incidentDate"),
    ("text", "policyHolderName"),
    ("text", "incidentLocation"),
    ("number", "accountNumber"),
    ("number", "vehicleYear"),
    ("textarea", "incidentDescription"),
    ("text", "destination"),
]

HOSTILE_VALUES = [
    "1" * 5000,
    "9" * 5000,
    "0" * 5000,
    "٨٨٧٦٥٤٣٢١",  # dígitos arábico-índicos
    "１２３４５６７８９０",  # dígitos de largura total
    "\u200b",
    "2026-10-19\x00",
]


class TestNeverRaises:
    """Entradas extremas viram ValidationResult, nunca exceção."""

    @pytest.mark.parametrize(("field_type", "field_id"), DISPATCH_BRANCHES)
    @pytest.mark.parametrize("value", HOSTILE_VALUES)
    def test_hostile_input_returns_result(self, field_type, field_id, value):
        result = validate_field(field_type, field_id, value, today=TODAY)
        assert result.is_valid in (True, False)
        if not result.is_valid:
            assert result.error

    @pytest.mark.parametrize(
        ("field_type", "field_id", "value"),
        [
            ("text", "policyNumber", "٨٨٧٦٥٤٣٢١"),
            ("tel", "policyHolderPhone", "٥٥٥١٢٣٤٥٦٧"),
            ("text", "ssn", "１２３４"),
            ("number", "accountNumber", "١٢٣٤٥٦٧٨"),
            ("number", "vehicleYear", "２０１８"),
        ],
    )
    def test_only_ascii_digits_count_as_digits(self, field_type, field_id, value):
        assert not validate_field(field_type, field_id, value, today=TODAY).is_valid


class TestLongNumbers:
    def test_unbounded_number_is_capped(self):
        result = validate_field("number", "accountNumber", "1" * 5000, today=TODAY)
        assert result.error == "❌ Please enter a valid number (digits only)"

    def test_eighteen_digits_still_pass(self):
        assert validate_number("9" * 18).is_valid

    def test_bounded_number_fails_on_length(self):
        result = validate_field("number", "vehicleYear", "9" * 5000, today=TODAY)
        assert result.error == "❌ Number cannot exceed 2027"

    def test_leading_zeros_do_not_count(self):
        assert validate_number("0002018", minimum=1990, maximum=2027).is_valid
        assert validate_number("0" * 5000).is_valid
