from __future__ import annotations

from dataclasses import asdict
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _parse_date(value) -> date:
        if not value:
            return date.today()
        try:
            return parse_iso_date(str(value))
        except ValueError:
            raise ValidationError("Invalid date (YYYY-MM-DD)")

    @app.route("/groups/<group_id>/attendance", methods=["GET"], endpoint="group_attendance")
    def group_attendance(group_id: str):
        sheet = container.attendance_service.open_day(group_id, _parse_date(request.args.get("date")))
        container.store.save(container.directory)

        data = asdict(sheet)
        data["date"] = sheet.date.isoformat()
        return jsonify(data)

    @app.route("/students/<student_id>/attendance", methods=["POST"], endpoint="student_attendance_mark")
    def student_attendance_mark(student_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            index = int(payload.get("index"))
        except (TypeError, ValueError):
            raise ValidationError("Pair index is required")

        record = container.attendance_service.set_mark(
            student_id=student_id,
            day=_parse_date(payload.get("date")),
            index=index,
            present=bool(payload.get("present", True)),
        )
        container.store.save(container.directory)
        return jsonify({"student_id": record.student_id, "date": record.date.isoformat(), "marks": record.marks})

    @app.route("/groups/<group_id>/summary", methods=["GET"], endpoint="group_summary")
    def group_summary(group_id: str):
        summary = container.attendance_service.build_summary(group_id)
        return jsonify({"group_id": summary.group_id, "rows": summary.rows})
