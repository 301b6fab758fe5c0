from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from src.student_attendance.student_attendance.core.enums import Weekday
from src.student_attendance.student_attendance.directory.memory_repository import InMemoryDirectory
from src.student_attendance.student_attendance.directory.model import EmailMapping, Group, Student
from src.student_attendance.student_attendance.schedules.calendar import ScheduleCalendar
from src.student_attendance.student_attendance.schedules.model import ScheduleDay

EPOCH = date(2023, 9, 1)


@pytest.fixture
def fixed_now():
    return lambda: datetime(2023, 10, 2, 9, 30, 0)


@pytest.fixture
def calendar():
    return ScheduleCalendar(EPOCH)


@pytest.fixture
def group():
    # Monday: 3 pairs on numerator weeks, 2 on denominator weeks
    return Group(
        name="ИВТ-21",
        group_id="g1",
        schedule_numerator=[ScheduleDay(Weekday.MONDAY, 3), ScheduleDay(Weekday.WEDNESDAY, 1)],
        schedule_denominator=[ScheduleDay(Weekday.MONDAY, 2)],
    )


@pytest.fixture
def directory(group):
    d = InMemoryDirectory()
    d.add_group(group)
    ivan = d.add_student(Student(name="Иванов Иван", group_id=group.group_id, student_id="s1"))
    d.add_student(Student(name="Андреева Ольга", group_id=group.group_id, student_id="s2"))
    d.add_email_mapping(EmailMapping(email="Ivanov@Example.com", student_id=ivan.student_id, student=ivan))
    return d


@pytest.fixture
def make_settings(tmp_path):
    def factory(**overrides):
        return _settings(tmp_path, **overrides)

    return factory


def _settings(tmp_path, **overrides):
    values = dict(
        SECRET_KEY="test-secret",
        IMAP_CONFIG={"host": "imap.invalid", "port": 993, "username": "u", "password": "p", "timeout": 1},
        DATA_FILE=str(tmp_path / "data.json"),
        SUBMISSIONS_DIR=str(tmp_path / "LabWorks"),
        SCHEDULE_EPOCH="2023-09-01",
        MAIL_POLL_ENABLED=False,
        MAIL_POLL_SECONDS=600,
        DEBUG=False,
        TESTING=True,
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return SimpleNamespace(**values)
