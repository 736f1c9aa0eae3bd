from __future__ import annotations

from enum import Enum


class ScoreType(str, Enum):
    """Kinds of events that move a student's score."""

    ATTENDANCE = "attendance"
    HOMEWORK = "homework"
    QUIZ = "quiz"


class HomeworkState(str, Enum):
    """The non-boolean member of the homework-done tri-state."""

    NOT_COMPLETED = "Not Completed"
