from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive(value: float, field_name: str) -> float:
    if value is None or float(value) <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return float(value)
