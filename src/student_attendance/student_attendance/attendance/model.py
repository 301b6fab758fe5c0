from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class AttendanceRecord:
    """Per-date attendance of one student: one mark per pair slot."""

    student_id: str
    date: date
    marks: list[bool] = field(default_factory=list)

    @property
    def attended(self) -> int:
        return sum(1 for m in self.marks if m)


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model of one student's marks for the attendance sheet."""

    student_id: str
    student_name: str
    marks: tuple[bool, ...]


@dataclass(frozen=True)
class DaySheet:
    group_id: str
    date: date
    week_type: str
    required_pairs: int
    rows: list[AttendanceRow]
