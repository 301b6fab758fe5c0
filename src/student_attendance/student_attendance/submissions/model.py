from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import WorkType
from ..directory.model import new_id


@dataclass(frozen=True)
class LabSubmission:
    """Coursework received by mail and attributed to a student."""

    student_id: str
    title: str
    received_date: datetime
    message_id: str
    file_path: Optional[str] = None
    content: Optional[str] = None
    submission_id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class WorkMatch:
    work_type: WorkType
    number: int

    @property
    def label(self) -> str:
        return f"{self.work_type.value} {self.number}"


@dataclass(frozen=True)
class StoredFile:
    match: WorkMatch
    path: str
    suffixed: bool = False
