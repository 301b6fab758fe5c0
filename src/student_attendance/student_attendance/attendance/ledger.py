from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from ..core.exceptions import ValidationError
from ..directory.model import Group, Student
from ..schedules.calendar import ScheduleCalendar
from .model import AttendanceRecord

RecordListener = Callable[[Student, AttendanceRecord], None]


class AttendanceLedger:
    """Keeps each student's per-date mark vectors in step with the timetable.

    Records are created lazily and never removed. Shrinking a vector drops
    the tail marks for good; growing it again appends fresh ``False`` marks.
    """

    def __init__(self, calendar: ScheduleCalendar, *, listeners: Optional[list[RecordListener]] = None):
        self._calendar = calendar
        self._listeners: list[RecordListener] = list(listeners or [])

    def add_listener(self, listener: RecordListener) -> None:
        self._listeners.append(listener)

    def ensure_record(self, student: Student, day: date) -> AttendanceRecord:
        record = student.find_record(day)
        if record is not None:
            return record

        record = AttendanceRecord(student_id=student.student_id, date=day)
        student.attendance_records.append(record)
        for listener in self._listeners:
            listener(student, record)
        return record

    @staticmethod
    def sync_marks(record: AttendanceRecord, required_count: int) -> AttendanceRecord:
        required_count = max(int(required_count), 0)
        marks = record.marks
        if len(marks) < required_count:
            marks.extend([False] * (required_count - len(marks)))
        elif len(marks) > required_count:
            del marks[required_count:]
        return record

    def sync_student(self, student: Student, group: Group, day: date) -> AttendanceRecord:
        record = self.ensure_record(student, day)
        return self.sync_marks(record, self._calendar.required_pairs(group, day))

    @staticmethod
    def set_mark(record: AttendanceRecord, index: int, present: bool) -> AttendanceRecord:
        if index < 0 or index >= len(record.marks):
            raise ValidationError(f"Pair {index + 1} is not scheduled on {record.date.isoformat()}")
        record.marks[index] = bool(present)
        return record

    @staticmethod
    def attended_count(student: Student) -> int:
        return sum(r.attended for r in student.attendance_records)
