from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_number(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} không hợp lệ")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} không hợp lệ")
    return int(number) if number.is_integer() else number


def require_non_negative(value, message: str) -> None:
    if value < 0:
        raise ValidationError(message)


def require_not_less_than(value, minimum, message: str) -> None:
    if value < minimum:
        raise ValidationError(message)
