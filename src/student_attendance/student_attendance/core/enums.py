from __future__ import annotations

from enum import Enum, IntEnum


class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


class WeekType(str, Enum):
    """Alternating week variant of the biweekly timetable."""

    NUMERATOR = "NUMERATOR"
    DENOMINATOR = "DENOMINATOR"


class WorkType(str, Enum):
    """Kinds of coursework recognised in attachment names."""

    LAB = "Лабораторная работа"
    PRACTICAL = "Практическая работа"


class IngestionStatus(str, Enum):
    """Outcome of one mailbox ingestion run."""

    OK = "OK"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"
