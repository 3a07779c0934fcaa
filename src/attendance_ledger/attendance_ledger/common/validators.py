from __future__ import annotations

from typing import Iterable, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def require_int(value: object, field_name: str) -> int:
    # bool is an int subclass; 1.9 must not truncate to 1.
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number") from None


def require_positive_id(value: object, field_name: str) -> int:
    try:
        parsed = require_int(value, field_name)
    except ValidationError:
        raise ValidationError(f"{field_name} is not a valid id") from None
    if parsed <= 0:
        raise ValidationError(f"{field_name} is not a valid id")
    return parsed


def require_status(value: object, allowed: Iterable[AttendanceStatus], operation: str) -> AttendanceStatus:
    try:
        status = AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status: {value!r}") from None
    allowed = frozenset(allowed)
    if status not in allowed:
        names = ", ".join(sorted(s.value for s in allowed))
        raise ValidationError(f"{operation} accepts only {names}; got {status.value}")
    return status


def clean_note(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
