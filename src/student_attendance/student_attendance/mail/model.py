"""Data models for mailbox access."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import IngestionStatus


@dataclass(frozen=True)
class MessageSummary:
    """Lightweight inbox listing entry (envelope only, no body)."""

    uid: str
    sender: str
    subject: str = ""
    message_id: str = ""


@dataclass(frozen=True)
class MailAttachment:
    filename: str
    payload: bytes = field(repr=False)
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class MailMessage:
    """Full message with decoded body and attachments."""

    uid: str
    sender: str
    subject: str
    message_id: str
    text_body: Optional[str] = None
    attachments: list[MailAttachment] = field(default_factory=list)


@dataclass(frozen=True)
class IngestionResult:
    status: IngestionStatus
    started_at: datetime
    finished_at: Optional[datetime] = None
    created: int = 0
    skipped_unmapped: int = 0
    failed_messages: int = 0
    failed_attachments: int = 0
    relists: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "started_at": self.started_at.isoformat(timespec="seconds"),
            "finished_at": self.finished_at.isoformat(timespec="seconds") if self.finished_at else None,
            "created": self.created,
            "skipped_unmapped": self.skipped_unmapped,
            "failed_messages": self.failed_messages,
            "failed_attachments": self.failed_attachments,
            "relists": self.relists,
            "error": self.error,
        }
