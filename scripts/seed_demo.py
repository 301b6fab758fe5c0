"""Create a demo group with a biweekly timetable and a few students."""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.student_attendance.student_attendance.core.enums import Weekday
from src.student_attendance.student_attendance.directory.model import Group, Student
from src.student_attendance.student_attendance.directory.service import DirectoryService
from src.student_attendance.student_attendance.schedules.model import ScheduleDay
from src.student_attendance.student_attendance.storage.json_store import JsonDocumentStore


def main() -> None:
    settings = load_settings()
    store = JsonDocumentStore(settings.DATA_FILE)
    directory = store.load()

    group = directory.add_group(
        Group(
            name="ИВТ-21",
            schedule_numerator=[
                ScheduleDay(Weekday.MONDAY, 3),
                ScheduleDay(Weekday.WEDNESDAY, 2),
                ScheduleDay(Weekday.FRIDAY, 2),
            ],
            schedule_denominator=[
                ScheduleDay(Weekday.TUESDAY, 3),
                ScheduleDay(Weekday.THURSDAY, 2),
            ],
        )
    )
    students = [
        directory.add_student(Student(name=name, group_id=group.group_id))
        for name in ("Иванов Иван", "Петрова Анна", "Сидоров Пётр")
    ]

    directory_service = DirectoryService(directory)
    for i, student in enumerate(students, start=1):
        directory_service.bind_email(student_id=student.student_id, email=f"student{i}@example.com")

    store.save(directory)
    print(f"OK: Seeded group {group.name} ({len(students)} students) -> {store.path}")


if __name__ == "__main__":
    main()
