from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.constants import DEFAULT_SCHEDULE_EPOCH
from ..core.enums import WeekType
from ..directory.model import Group
from .model import ScheduleDay


class ScheduleCalendar:
    """Biweekly calendar: numerator and denominator weeks alternate from an epoch.

    The week containing ``epoch`` (index 0) is a numerator week. Dates before
    the epoch get negative week indexes and keep the same alternation.
    """

    def __init__(self, epoch: date = DEFAULT_SCHEDULE_EPOCH):
        self._epoch = epoch

    @property
    def epoch(self) -> date:
        return self._epoch

    def week_index(self, day: date) -> int:
        return (day - self._epoch).days // 7

    def is_numerator_week(self, day: date) -> bool:
        return self.week_index(day) % 2 == 0

    def week_type(self, day: date) -> WeekType:
        return WeekType.NUMERATOR if self.is_numerator_week(day) else WeekType.DENOMINATOR

    def schedule_for(self, group: Group, day: date) -> Sequence[ScheduleDay]:
        if self.is_numerator_week(day):
            return group.schedule_numerator
        return group.schedule_denominator

    def required_pairs(self, group: Group, day: date) -> int:
        weekday = day.weekday()
        for entry in self.schedule_for(group, day):
            if entry.day == weekday:
                return max(int(entry.pairs_count), 0)
        return 0
