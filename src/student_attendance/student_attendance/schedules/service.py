from __future__ import annotations

from ..core.enums import WeekType, Weekday
from ..core.exceptions import ValidationError
from ..directory.model import Group
from ..directory.repository import DirectoryRepository
from .model import ScheduleDay


class ScheduleService:
    """Edits the numerator/denominator timetables of a group.

    Existing attendance records are not touched here; their mark vectors
    follow a changed timetable only when a date is synchronized again.
    """

    def __init__(self, directory: DirectoryRepository):
        self._directory = directory

    def _get_group(self, group_id: str) -> Group:
        group = self._directory.get_group(group_id)
        if not group:
            raise ValidationError("Group does not exist")
        return group

    @staticmethod
    def _days(group: Group, week_type: WeekType) -> list[ScheduleDay]:
        if week_type == WeekType.NUMERATOR:
            return group.schedule_numerator
        return group.schedule_denominator

    def set_pairs(self, *, group_id: str, week_type: WeekType, day: Weekday, pairs_count: int) -> ScheduleDay:
        if int(pairs_count) < 0:
            raise ValidationError("Pair count cannot be negative")

        group = self._get_group(group_id)
        entry = ScheduleDay(day=Weekday(day), pairs_count=int(pairs_count))
        with self._directory.lock:
            days = self._days(group, week_type)
            for i, existing in enumerate(days):
                if existing.day == entry.day:
                    days[i] = entry
                    break
            else:
                days.append(entry)
        return entry

    def remove_day(self, *, group_id: str, week_type: WeekType, day: Weekday) -> bool:
        group = self._get_group(group_id)
        with self._directory.lock:
            days = self._days(group, week_type)
            before = len(days)
            days[:] = [d for d in days if d.day != Weekday(day)]
            return len(days) != before
