from __future__ import annotations

from typing import Any, Optional

from ..core.constants import DEFAULT_HISTORY_LIMIT, PERCENTAGE_MAX, PERCENTAGE_MIN
from ..core.enums import HomeworkState, ScoreType
from ..core.exceptions import ValidationError
from .degree import round_half_up


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_student_id(value: Any) -> int:
    if value is None or value == "":
        raise ValidationError("Student ID is required")
    try:
        student_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid student ID: {value!r}")
    if student_id <= 0:
        raise ValidationError(f"Invalid student ID: {value!r}")
    return student_id


def require_score_type(value: Any) -> ScoreType:
    if isinstance(value, ScoreType):
        return value
    raw = require_non_empty(value, "Type")
    try:
        return ScoreType(raw.lower())
    except ValueError:
        raise ValidationError(f"Unsupported type: {raw}")


def optional_week(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        week = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid week: {value!r}")
    if week < 1:
        raise ValidationError(f"Invalid week: {value!r}")
    return week


def optional_percentage(value: Any, field_name: str) -> Optional[int]:
    """Whole percentage, rounded half up like stored degrees."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        pct = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not PERCENTAGE_MIN <= pct <= PERCENTAGE_MAX:
        raise ValidationError(f"{field_name} must be between {PERCENTAGE_MIN} and {PERCENTAGE_MAX}")
    return round_half_up(pct)


def optional_hw_done(value: Any, field_name: str):
    """Accept True, False or "Not Completed"; strings "true"/"false" are coerced."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip()
        if v.lower() == "true":
            return True
        if v.lower() == "false":
            return False
        if v == HomeworkState.NOT_COMPLETED.value:
            return HomeworkState.NOT_COMPLETED.value
    raise ValidationError(f"{field_name} must be true, false or \"{HomeworkState.NOT_COMPLETED.value}\"")


def optional_flag(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def optional_limit(value: Any, *, default: int = DEFAULT_HISTORY_LIMIT) -> int:
    if value is None or value == "":
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid limit: {value!r}")
    if limit < 1:
        raise ValidationError(f"Invalid limit: {value!r}")
    return limit
