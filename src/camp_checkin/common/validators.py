from __future__ import annotations

import re

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_CHARS_RE = re.compile(r"^[0-9()\-\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} es obligatorio")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} debe tener al menos {min_len} caracteres")
    return value


def require_length_between(value: str, field_name: str, min_len: int, max_len: int) -> str:
    value = require_non_empty(value, field_name)
    if not min_len <= len(value) <= max_len:
        raise ValidationError(f"{field_name} debe tener entre {min_len} y {max_len} caracteres")
    return value


def require_email(value: str) -> str:
    value = require_non_empty(value, "Correo electrónico").lower()
    if not EMAIL_RE.match(value):
        raise ValidationError("Correo electrónico inválido")
    return value


def require_phone(value: str) -> str:
    """Online form phone: 10-15 chars of digits, parentheses, dashes or spaces."""
    value = require_non_empty(value, "Teléfono")
    if not PHONE_CHARS_RE.match(value):
        raise ValidationError("El teléfono solo puede contener números, paréntesis, guiones y espacios")
    if not 10 <= len(value) <= 15:
        raise ValidationError("El teléfono debe tener entre 10 y 15 caracteres")
    return value


def require_ten_digit_phone(value: str) -> str:
    """Walk-in desk phone: exactly 10 digits once formatting is stripped."""
    digits = re.sub(r"\D", "", value or "")
    if len(digits) != 10:
        raise ValidationError("El teléfono debe tener exactamente 10 dígitos")
    return digits


def require_non_negative(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} debe ser numérico")
    if number < 0:
        raise ValidationError(f"{field_name} no puede ser negativo")
    return number
