from __future__ import annotations

from typing import Any, Dict, Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if number < 1:
        raise ValidationError(f"{field_name} must be >= 1")
    return number


def clean_changes(changes: Dict[str, Any], *, mutable: Iterable[str], immutable: Iterable[str] = ()) -> Dict[str, Any]:
    """Filter a partial update.

    Immutable keys (ids, creation timestamps) are dropped; unknown keys are
    rejected.
    """

    allowed = set(mutable)
    skipped = set(immutable)
    unknown = sorted(k for k in changes if k not in allowed and k not in skipped)
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}")
    return {k: v for k, v in changes.items() if k in allowed}
