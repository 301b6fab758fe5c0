from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def normalize_email(value: Optional[str]) -> str:
    """Comparison key for e-mail addresses (trimmed, case-folded)."""
    return (value or "").strip().casefold()


def require_email(value: str) -> str:
    email = require_non_empty(value, "E-mail")
    if "@" not in email:
        raise ValidationError(f"Invalid e-mail address: {email}")
    return email
