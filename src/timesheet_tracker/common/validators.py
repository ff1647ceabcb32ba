from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def clean_name(value: Optional[str]) -> str:
    """Trimmed name, or an empty string for None/blank input."""
    return (value or "").strip()
