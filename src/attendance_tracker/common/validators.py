from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_object(data: Any) -> Mapping[str, Any]:
    """Treat a missing body as empty; anything but a JSON object is rejected."""
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_fields(data: Mapping[str, Any], fields: Sequence[str], message: str) -> None:
    """Raise a single ValidationError when any of ``fields`` is missing or blank."""
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def normalize_email(value: str) -> str:
    return require_non_empty(value, "Email").lower()


def parse_positive_int(value: Any, field_name: str, *, default: int, maximum: int | None = None) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if number < 1:
        raise ValidationError(f"{field_name} must be a positive integer")
    if maximum is not None:
        number = min(number, maximum)
    return number
