from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Weekday


@dataclass(frozen=True)
class ScheduleDay:
    """One weekday entry of a weekly timetable: how many pairs that day has."""

    day: Weekday
    pairs_count: int = 0
