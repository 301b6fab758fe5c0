"""JSON document persistence for the shared collections."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..core.enums import Weekday
from ..core.exceptions import StorageError
from ..attendance.model import AttendanceRecord
from ..directory.memory_repository import InMemoryDirectory
from ..directory.model import EmailMapping, Group, Student
from ..directory.service import DirectoryService
from ..schedules.model import ScheduleDay
from ..submissions.model import LabSubmission

logger = logging.getLogger(__name__)


def _schedule_to_dict(days: list[ScheduleDay]) -> list[dict]:
    return [{"day": int(d.day), "pairs_count": d.pairs_count} for d in days]


def _schedule_from_dict(items: list[dict]) -> list[ScheduleDay]:
    return [ScheduleDay(day=Weekday(int(i["day"])), pairs_count=int(i.get("pairs_count", 0))) for i in items or []]


def _group_to_dict(g: Group) -> dict:
    return {
        "id": g.group_id,
        "name": g.name,
        "schedule_numerator": _schedule_to_dict(g.schedule_numerator),
        "schedule_denominator": _schedule_to_dict(g.schedule_denominator),
    }


def _student_to_dict(s: Student) -> dict:
    return {
        "id": s.student_id,
        "name": s.name,
        "group_id": s.group_id,
        "attendance_records": [
            {"date": r.date.isoformat(), "marks": list(r.marks)} for r in s.attendance_records
        ],
    }


def _student_from_dict(d: dict) -> Student:
    student = Student(name=d["name"], group_id=d["group_id"], student_id=d["id"])
    seen: set[date] = set()
    for r in d.get("attendance_records", []):
        day = date.fromisoformat(r["date"])
        # one record per date; keep the first if the document has duplicates
        if day in seen:
            continue
        seen.add(day)
        student.attendance_records.append(
            AttendanceRecord(student_id=student.student_id, date=day, marks=[bool(m) for m in r.get("marks", [])])
        )
    return student


def _submission_to_dict(s: LabSubmission) -> dict:
    return {
        "id": s.submission_id,
        "student_id": s.student_id,
        "title": s.title,
        "content": s.content,
        "received_date": s.received_date.isoformat(timespec="seconds"),
        "file_path": s.file_path,
        "message_id": s.message_id,
    }


def _submission_from_dict(d: dict) -> LabSubmission:
    return LabSubmission(
        submission_id=d["id"],
        student_id=d["student_id"],
        title=d.get("title") or "",
        content=d.get("content"),
        received_date=datetime.fromisoformat(d["received_date"]),
        file_path=d.get("file_path"),
        message_id=d.get("message_id") or "",
    )


class JsonDocumentStore:
    """Loads and saves groups, students, e-mail bindings and submissions as one document.

    Attendance records are stored inside their student. Saving goes through a
    temporary file that replaces the document, so a crash mid-write leaves the
    previous version intact.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        # snapshot and write happen as one step, so saves land in order
        self._save_lock = threading.Lock()

    def load(self) -> InMemoryDirectory:
        directory = InMemoryDirectory()
        if not self.path.exists():
            logger.info("No data file at %s, starting empty", self.path)
            return directory

        try:
            with self.path.open("r", encoding="utf-8") as f:
                doc: dict[str, Any] = json.load(f)

            for g in doc.get("groups", []):
                directory.add_group(
                    Group(
                        group_id=g["id"],
                        name=g["name"],
                        schedule_numerator=_schedule_from_dict(g.get("schedule_numerator")),
                        schedule_denominator=_schedule_from_dict(g.get("schedule_denominator")),
                    )
                )
            for s in doc.get("students", []):
                directory.add_student(_student_from_dict(s))
            for m in doc.get("email_mappings", []):
                directory.add_email_mapping(EmailMapping(email=m["email"], student_id=m["student_id"]))
            for s in doc.get("submissions", []):
                directory.add_submission(_submission_from_dict(s))
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StorageError(f"Cannot load {self.path}: {e}") from e

        DirectoryService(directory).relink()
        return directory

    def save(self, directory: InMemoryDirectory) -> None:
        with self._save_lock:
            self._save(directory)

    def _save(self, directory: InMemoryDirectory) -> None:
        with directory.lock:
            doc = {
                "groups": [_group_to_dict(g) for g in directory.list_groups()],
                "students": [_student_to_dict(s) for s in directory.list_students()],
                "email_mappings": [
                    {"email": m.email, "student_id": m.student_id} for m in directory.list_email_mappings()
                ],
                "submissions": [_submission_to_dict(s) for s in directory.list_submissions()],
            }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".data-", suffix=".json", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(doc, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Cannot save {self.path}: {e}") from e
