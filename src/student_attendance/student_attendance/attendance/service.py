from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.exceptions import ValidationError
from ..directory.model import Group, Student
from ..directory.repository import DirectoryRepository
from ..schedules.calendar import ScheduleCalendar
from .ledger import AttendanceLedger
from .model import AttendanceRecord, AttendanceRow, DaySheet


@dataclass(frozen=True)
class SummaryData:
    group_id: str
    rows: list[dict]


class AttendanceService:
    """Attendance sheet use cases for a selected group and date."""

    def __init__(self, directory: DirectoryRepository, calendar: ScheduleCalendar, ledger: AttendanceLedger):
        self._directory = directory
        self._calendar = calendar
        self._ledger = ledger

    def _get_group(self, group_id: str) -> Group:
        group = self._directory.get_group(group_id)
        if not group:
            raise ValidationError("Group does not exist")
        return group

    def _get_student(self, student_id: str) -> Student:
        student = self._directory.get_student(student_id)
        if not student:
            raise ValidationError("Student does not exist")
        return student

    def open_day(self, group_id: str, day: date) -> DaySheet:
        """Synchronize every student of the group for ``day`` and return the sheet."""
        group = self._get_group(group_id)
        required = self._calendar.required_pairs(group, day)

        rows = []
        with self._directory.lock:
            for student in self._directory.list_students(group.group_id):
                record = self._ledger.sync_marks(self._ledger.ensure_record(student, day), required)
                rows.append(
                    AttendanceRow(
                        student_id=student.student_id,
                        student_name=student.name,
                        marks=tuple(record.marks),
                    )
                )

        return DaySheet(
            group_id=group.group_id,
            date=day,
            week_type=self._calendar.week_type(day).value,
            required_pairs=required,
            rows=rows,
        )

    def set_mark(self, *, student_id: str, day: date, index: int, present: bool) -> AttendanceRecord:
        student = self._get_student(student_id)

        with self._directory.lock:
            record = student.find_record(day)
            if record is None:
                group = student.group or self._get_group(student.group_id)
                record = self._ledger.sync_student(student, group, day)
            return self._ledger.set_mark(record, int(index), present)

    def build_summary(self, group_id: str) -> SummaryData:
        group = self._get_group(group_id)

        rows: list[dict] = []
        for student in self._directory.list_students(group.group_id):
            scheduled = sum(len(r.marks) for r in student.attendance_records)
            rows.append(
                {
                    "student_id": student.student_id,
                    "name": student.name,
                    "attended_pairs": self._ledger.attended_count(student),
                    "scheduled_pairs": scheduled,
                    "submissions": len(self._directory.list_submissions(student.student_id)),
                }
            )

        rows.sort(key=lambda x: x["name"])
        return SummaryData(group_id=group.group_id, rows=rows)
