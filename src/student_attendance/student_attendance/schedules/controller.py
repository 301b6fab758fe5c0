from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.enums import WeekType, Weekday
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _parse_week_type(value) -> WeekType:
        try:
            return WeekType(str(value).upper())
        except ValueError:
            raise ValidationError("Week type must be NUMERATOR or DENOMINATOR")

    def _parse_weekday(value) -> Weekday:
        try:
            return Weekday(int(value))
        except (TypeError, ValueError):
            raise ValidationError("Day must be 0 (Monday) .. 6 (Sunday)")

    @app.route("/calendar/week-type", methods=["GET"], endpoint="calendar_week_type")
    def calendar_week_type():
        value = request.args.get("date")
        try:
            day = parse_iso_date(value) if value else date.today()
        except ValueError:
            raise ValidationError("Invalid date (YYYY-MM-DD)")

        return jsonify(
            {
                "date": day.isoformat(),
                "week_type": container.calendar.week_type(day).value,
                "week_index": container.calendar.week_index(day),
            }
        )

    @app.route("/groups/<group_id>/schedule", methods=["PUT"], endpoint="group_schedule_set")
    def group_schedule_set(group_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            pairs_count = int(payload.get("pairs_count"))
        except (TypeError, ValueError):
            raise ValidationError("pairs_count is required")

        entry = container.schedule_service.set_pairs(
            group_id=group_id,
            week_type=_parse_week_type(payload.get("week_type")),
            day=_parse_weekday(payload.get("day")),
            pairs_count=pairs_count,
        )
        container.store.save(container.directory)
        return jsonify({"day": int(entry.day), "pairs_count": entry.pairs_count})

    @app.route(
        "/groups/<group_id>/schedule/<week_type>/<int:day>",
        methods=["DELETE"],
        endpoint="group_schedule_delete",
    )
    def group_schedule_delete(group_id: str, week_type: str, day: int):
        removed = container.schedule_service.remove_day(
            group_id=group_id,
            week_type=_parse_week_type(week_type),
            day=_parse_weekday(day),
        )
        if removed:
            container.store.save(container.directory)
        return jsonify({"removed": removed})
