from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a student and their running score."""

    student_id: int
    name: str
    score: int = 0
