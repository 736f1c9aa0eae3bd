from __future__ import annotations

from typing import Optional

from ..common.validators import require_non_empty, require_student_id
from ..core.constants import DEFAULT_STUDENT_SCORE
from ..core.exceptions import ValidationError
from .model import Student
from .repository import StudentRepository


class StudentService:
    def __init__(
        self,
        students: StudentRepository,
        *,
        scoring_enabled: bool = True,
        default_score: int = DEFAULT_STUDENT_SCORE,
    ):
        self._students = students
        self._scoring_enabled = bool(scoring_enabled)
        self._default_score = int(default_score)

    def initial_score(self, requested: Optional[int] = None) -> int:
        if not self._scoring_enabled:
            return 0
        if requested is None:
            return self._default_score
        if int(requested) < 0:
            raise ValidationError("Score cannot be negative")
        return int(requested)

    def create_student(self, student_id, name: str, *, score: Optional[int] = None) -> Student:
        sid = require_student_id(student_id)
        clean_name = require_non_empty(name, "Name")
        if self._students.get_by_id(sid):
            raise ValidationError(f"Student {sid} already exists")

        initial = self.initial_score(score)
        self._students.create(student_id=sid, name=clean_name, score=initial)
        return Student(student_id=sid, name=clean_name, score=initial)
