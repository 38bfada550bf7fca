from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_list(value: Any, field_name: str) -> list:
    if value is None or not isinstance(value, list):
        raise ValidationError(f"Invalid workflow data: {field_name} array is required")
    return value
