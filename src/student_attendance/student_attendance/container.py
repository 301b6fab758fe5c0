from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.ledger import AttendanceLedger
from .attendance.service import AttendanceService
from .common.datetime_utils import parse_iso_date
from .core.constants import (
    DEFAULT_DATA_FILE,
    DEFAULT_IMAP_PORT,
    DEFAULT_IMAP_TIMEOUT,
    DEFAULT_POLL_SECONDS,
    DEFAULT_SCHEDULE_EPOCH,
    DEFAULT_SUBMISSIONS_DIR,
)
from .directory.memory_repository import InMemoryDirectory
from .directory.service import DirectoryService
from .mail.dispatch import Dispatcher, InlineDispatcher
from .mail.imap_mailbox import ImapMailbox
from .mail.poller import MailPoller
from .mail.service import MailIngestionService
from .schedules.calendar import ScheduleCalendar
from .schedules.service import ScheduleService
from .storage.json_store import JsonDocumentStore
from .submissions.classifier import AttachmentClassifier


@dataclass(frozen=True)
class Container:
    store: JsonDocumentStore
    directory: InMemoryDirectory

    calendar: ScheduleCalendar
    ledger: AttendanceLedger
    classifier: AttachmentClassifier

    directory_service: DirectoryService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    mail_service: MailIngestionService
    mail_poller: MailPoller


def build_container(*, settings, dispatcher: Optional[Dispatcher] = None) -> Container:
    store = JsonDocumentStore(getattr(settings, "DATA_FILE", DEFAULT_DATA_FILE))
    directory = store.load()

    epoch = parse_iso_date(getattr(settings, "SCHEDULE_EPOCH", DEFAULT_SCHEDULE_EPOCH.isoformat()))

    imap = dict(getattr(settings, "IMAP_CONFIG"))

    def mailbox_factory() -> ImapMailbox:
        return ImapMailbox(
            str(imap["host"]),
            str(imap["username"]),
            str(imap["password"]),
            port=int(imap.get("port", DEFAULT_IMAP_PORT)),
            timeout=float(imap.get("timeout", DEFAULT_IMAP_TIMEOUT)),
        )

    calendar = ScheduleCalendar(epoch)
    ledger = AttendanceLedger(calendar)
    classifier = AttachmentClassifier()

    directory_service = DirectoryService(directory)
    schedule_service = ScheduleService(directory)
    attendance_service = AttendanceService(directory, calendar, ledger)
    mail_service = MailIngestionService(
        directory,
        directory_service,
        mailbox_factory,
        classifier,
        submissions_dir=getattr(settings, "SUBMISSIONS_DIR", DEFAULT_SUBMISSIONS_DIR),
        dispatcher=dispatcher or InlineDispatcher(),
    )

    def save_after_run(result) -> None:
        if result.created:
            store.save(directory)

    mail_poller = MailPoller(
        mail_service,
        interval_seconds=int(getattr(settings, "MAIL_POLL_SECONDS", DEFAULT_POLL_SECONDS)),
        on_result=save_after_run,
    )

    return Container(
        store=store,
        directory=directory,
        calendar=calendar,
        ledger=ledger,
        classifier=classifier,
        directory_service=directory_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        mail_service=mail_service,
        mail_poller=mail_poller,
    )
