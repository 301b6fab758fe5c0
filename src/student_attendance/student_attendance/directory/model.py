from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..schedules.model import ScheduleDay


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Group:
    """Study group with its two alternating weekly timetables."""

    name: str
    group_id: str = field(default_factory=new_id)
    schedule_numerator: list[ScheduleDay] = field(default_factory=list)
    schedule_denominator: list[ScheduleDay] = field(default_factory=list)


@dataclass
class Student:
    """Student of a group.

    ``group`` is a cached pointer re-derived from ``group_id`` by
    ``DirectoryService.relink``; ``group_id`` is what gets persisted.
    """

    name: str
    group_id: str
    student_id: str = field(default_factory=new_id)
    group: Optional[Group] = field(default=None, repr=False, compare=False)
    attendance_records: list[AttendanceRecord] = field(default_factory=list, repr=False)

    def find_record(self, day: date) -> Optional[AttendanceRecord]:
        for record in self.attendance_records:
            if record.date == day:
                return record
        return None


@dataclass
class EmailMapping:
    email: str
    student_id: str
    student: Optional[Student] = field(default=None, repr=False, compare=False)
