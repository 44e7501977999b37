from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import UnauthenticatedError, ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field_name, "is required")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def require_number(value: Any, field_name: str) -> float:
    if value is None or isinstance(value, bool) or value == "":
        raise ValidationError(field_name, "is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field_name, "must be a number")
    if not math.isfinite(number):
        raise ValidationError(field_name, "must be a finite number")
    return number


def optional_object(value: Any, field_name: str) -> dict[str, Any]:
    """Nested JSON part; missing means empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(field_name, "must be an object")
    return value


def optional_bool(value: Any, field_name: str, default: bool = False) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(field_name, "must be true or false")
    return value


def split_csv(value: Any, field_name: str = "value") -> list[str]:
    """Accept a list or a comma-separated string; drop blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise ValidationError(field_name, "must be a list or comma-separated text")
    return [str(v).strip() for v in items if str(v).strip()]


def require_caller(caller_id: Optional[str]) -> str:
    """Mutating operations need an authenticated caller."""
    if caller_id is None or not str(caller_id).strip():
        raise UnauthenticatedError("Sign in to continue")
    return str(caller_id).strip()
