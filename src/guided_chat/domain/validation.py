"""Validadores de campo para inputs do chat.

Contrato:
- Puro: entrada → ValidationResult, sem side effects
- Nunca lança exceção; input inválido é um retorno normal
- Dispatch por tipo/ID do campo, primeira regra que casa vence
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time

from dateutil import parser as date_parser

# Apenas dígitos ASCII (0-9)
_DIGITS_RE = re.compile(r"^\d+$", re.ASCII)
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_PHONE_STRIP_RE = re.compile(r"[\s\-().]")
_SSN_LAST4_RE = re.compile(r"^\d{4}$", re.ASCII)
_NAME_RE = re.compile(r"^[a-zA-Z\s\-']+$")

MIN_YEAR = 1990
TEXTAREA_MIN_LENGTH = 50
MAX_NUMBER_DIGITS = 18


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Resultado de validação (is_valid + mensagem para o usuário)."""

    is_valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def fail(cls, error: str) -> ValidationResult:
        return cls(is_valid=False, error=error)


Validator = Callable[[str], ValidationResult]


def validate_policy_number(value: str) -> ValidationResult:
    """Número de apólice: apenas dígitos, 8 a 10 caracteres."""
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ Policy number is required")
    if not _DIGITS_RE.match(trimmed):
        return ValidationResult.fail(
            "❌ Policy number must contain only numbers (no letters or symbols)"
        )
    if len(trimmed) < 8:
        return ValidationResult.fail(
            f"❌ Policy number must be at least 8 digits (currently {len(trimmed)})"
        )
    if len(trimmed) > 10:
        return ValidationResult.fail(
            f"❌ Policy number cannot exceed 10 digits (currently {len(trimmed)})"
        )
    return ValidationResult.ok()


def validate_email(value: str) -> ValidationResult:
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ Email address is required")
    if not _EMAIL_RE.match(trimmed):
        return ValidationResult.fail(
            "❌ Please enter a valid email address (e.g., name@example.com)"
        )
    return ValidationResult.ok()


def validate_phone(value: str) -> ValidationResult:
    """Telefone: exatamente 10 dígitos após remover espaços, hífens, parênteses e pontos."""
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ Phone number is required")
    digits_only = _PHONE_STRIP_RE.sub("", trimmed)
    if not _DIGITS_RE.match(digits_only):
        return ValidationResult.fail("❌ Phone number must contain only digits")
    if len(digits_only) != 10:
        return ValidationResult.fail(
            f"❌ Phone number must be exactly 10 digits (currently {len(digits_only)})"
        )
    return ValidationResult.ok()


def validate_ssn_last4(value: str) -> ValidationResult:
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ SSN last 4 digits is required")
    if not _SSN_LAST4_RE.match(trimmed):
        return ValidationResult.fail("❌ Please enter exactly 4 digits")
    return ValidationResult.ok()


def validate_date(value: str, today: date | None = None) -> ValidationResult:
    """Data parseável e não anterior a hoje (comparação por dia)."""
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ Date is required")
    if not trimmed.isascii():
        return ValidationResult.fail("❌ Please enter a valid date")
    reference = today or date.today()
    try:
        # Campos ausentes (ex.: só o dia) vêm de `reference`, não do relógio
        parsed = date_parser.parse(trimmed, default=datetime.combine(reference, time()))
    except (ValueError, OverflowError):
        return ValidationResult.fail("❌ Please enter a valid date")

    if parsed.date() < reference:
        return ValidationResult.fail("Please select a valid travel date.")
    return ValidationResult.ok()


def validate_text(value: str, min_length: int = 1) -> ValidationResult:
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ This field is required")
    if len(trimmed) < min_length:
        return ValidationResult.fail(f"❌ Must be at least {min_length} characters")
    return ValidationResult.ok()


def validate_name(value: str) -> ValidationResult:
    """Nome: letras, espaços, hífens e apóstrofos; mínimo 2 caracteres."""
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ Name is required")
    if not _NAME_RE.match(trimmed):
        return ValidationResult.fail(
            "❌ Name can only contain letters, spaces, hyphens, and apostrophes"
        )
    if len(trimmed) < 2:
        return ValidationResult.fail("❌ Name must be at least 2 characters")
    return ValidationResult.ok()


def validate_textarea(value: str, min_length: int = TEXTAREA_MIN_LENGTH) -> ValidationResult:
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ This field is required")
    if len(trimmed) < min_length:
        return ValidationResult.fail(
            f"❌ Please provide at least {min_length} characters (currently {len(trimmed)})"
        )
    return ValidationResult.ok()


def validate_number(
    value: str, minimum: int | None = None, maximum: int | None = None
) -> ValidationResult:
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ This field is required")
    if not _DIGITS_RE.match(trimmed):
        return ValidationResult.fail("❌ Please enter a valid number (digits only)")

    # Limite de tamanho antes do int(): strings muito longas levantam ValueError
    significant = trimmed.lstrip("0") or "0"
    if maximum is not None and len(significant) > len(str(maximum)):
        return ValidationResult.fail(f"❌ Number cannot exceed {maximum}")
    if len(significant) > MAX_NUMBER_DIGITS:
        return ValidationResult.fail("❌ Please enter a valid number (digits only)")

    number = int(significant)
    if minimum is not None and number < minimum:
        return ValidationResult.fail(f"❌ Number must be at least {minimum}")
    if maximum is not None and number > maximum:
        return ValidationResult.fail(f"❌ Number cannot exceed {maximum}")
    return ValidationResult.ok()


def validate_location(value: str) -> ValidationResult:
    trimmed = value.strip()
    if not trimmed:
        return ValidationResult.fail("❌ Location is required")
    if len(trimmed) < 5:
        return ValidationResult.fail("❌ Please provide a complete address or location")
    return ValidationResult.ok()


def get_validator_for_field(
    field_type: str | None, field_id: str, today: date | None = None
) -> Validator:
    """Seleciona a regra de validação pelo tipo e ID do campo.

    Ordem de prioridade (primeira que casa vence):
    policy+number, email, tel/phone, ssn, date, name/holder,
    location/address, number/year, textarea/description/details, texto.
    """
    kind = (field_type or "").lower()
    lowered = field_id.lower()

    if "policy" in lowered and "number" in lowered:
        return validate_policy_number

    if kind == "email" or "email" in lowered:
        return validate_email

    if kind == "tel" or "phone" in lowered:
        return validate_phone

    if "ssn" in lowered:
        return validate_ssn_last4

    if kind == "date" or "date" in lowered:
        return lambda value: validate_date(value, today=today)

    if "name" in lowered or "holder" in lowered:
        return validate_name

    if "location" in lowered or "address" in lowered:
        return validate_location

    if kind == "number" or "year" in lowered:
        if "year" in lowered:
            current_year = (today or date.today()).year
            return lambda value: validate_number(value, MIN_YEAR, current_year + 1)
        return validate_number

    if kind == "textarea" or "description" in lowered or "details" in lowered:
        return validate_textarea

    return validate_text


def validate_field(
    field_type: str | None,
    field_id: str,
    raw_value: str,
    today: date | None = None,
) -> ValidationResult:
    """Valida um valor bruto para o campo informado. Nunca lança exceção."""
    return get_validator_for_field(field_type, field_id, today=today)(raw_value)
