from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from ..common.validators import optional_flag, optional_hw_done, optional_percentage
from ..core.enums import ScoreType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceObservation:
    status: str


@dataclass(frozen=True)
class HomeworkDoneObservation:
    """Homework completion without a degree: True, False or "Not Completed"."""

    hw_done: Union[bool, str]


@dataclass(frozen=True)
class PercentageObservation:
    """Graded homework (with degree) or quiz result, 0-100."""

    percentage: float


Observation = Union[AttendanceObservation, HomeworkDoneObservation, PercentageObservation]


@dataclass(frozen=True)
class ObservationEvent:
    """One scoring call after boundary validation."""

    student_id: int
    type: ScoreType
    week: Optional[int]
    current: Optional[Observation]
    previous: Optional[Observation] = None
    reverse_only: bool = False
    with_degree: Optional[bool] = None
    auto_reverse_homework: bool = True
    auto_reverse_quiz: bool = True
    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_reversal(self) -> bool:
        # reverseOnly without a previous observation is treated as a normal event.
        return self.reverse_only and self.previous is not None


def parse_event(student_id: int, score_type: ScoreType, week: Optional[int], data: Any) -> ObservationEvent:
    """Turn the raw `data` payload into typed observations for one event type."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValidationError("Observation data must be an object")

    reverse_only = optional_flag(data.get("reverseOnly"), default=False)
    with_degree: Optional[bool] = None

    if score_type == ScoreType.ATTENDANCE:
        current = _status(data.get("status"), "status")
        previous = _status(data.get("previousStatus"), "previousStatus")
    elif score_type == ScoreType.QUIZ:
        current = _percentage(data.get("percentage"), "percentage")
        previous = _percentage(data.get("previousPercentage"), "previousPercentage")
    else:
        with_degree = data.get("percentage") is not None or data.get("previousPercentage") is not None
        if with_degree:
            current = _percentage(data.get("percentage"), "percentage")
            previous = _percentage(data.get("previousPercentage"), "previousPercentage")
        else:
            current = _hw_done(data.get("hwDone"), "hwDone")
            previous = _hw_done(data.get("previousHwDone"), "previousHwDone")

    event = ObservationEvent(
        student_id=student_id,
        type=score_type,
        week=week,
        current=current,
        previous=previous,
        reverse_only=reverse_only,
        with_degree=with_degree,
        auto_reverse_homework=optional_flag(data.get("autoReverseHomework"), default=True),
        auto_reverse_quiz=optional_flag(data.get("autoReverseQuiz"), default=True),
        data=dict(data),
    )
    if event.current is None and not event.is_reversal:
        raise ValidationError(f"No {score_type.value} observation supplied")
    return event


def _status(value: Any, field_name: str) -> Optional[AttendanceObservation]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return AttendanceObservation(status=value.strip())


def _percentage(value: Any, field_name: str) -> Optional[PercentageObservation]:
    pct = optional_percentage(value, field_name)
    return None if pct is None else PercentageObservation(percentage=pct)


def _hw_done(value: Any, field_name: str) -> Optional[HomeworkDoneObservation]:
    hw_done = optional_hw_done(value, field_name)
    return None if hw_done is None else HomeworkDoneObservation(hw_done=hw_done)
