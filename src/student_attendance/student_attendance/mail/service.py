from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import MAX_RELISTS_PER_RUN
from ..core.enums import IngestionStatus
from ..core.exceptions import AttachmentWriteError, MailError, StaleMessageError
from ..directory.model import Student
from ..directory.repository import DirectoryRepository
from ..directory.service import DirectoryService
from ..submissions.classifier import AttachmentClassifier
from ..submissions.model import LabSubmission
from .dispatch import Dispatcher, InlineDispatcher
from .mailbox import MailboxClient
from .model import IngestionResult, MailMessage, MessageSummary

logger = logging.getLogger(__name__)


@dataclass
class _RunStats:
    created: int = 0
    skipped_unmapped: int = 0
    failed_messages: int = 0
    failed_attachments: int = 0
    relists: int = 0


class MailIngestionService:
    """Polls the mailbox and records coursework attachments as submissions.

    ``check_mail`` is single-flight: while a run is in progress further
    calls return a ``SKIPPED`` result at once, without touching the network.
    Messages are processed one at a time, in listing order.
    """

    def __init__(
        self,
        directory: DirectoryRepository,
        directory_service: DirectoryService,
        mailbox_factory: Callable[[], MailboxClient],
        classifier: AttachmentClassifier,
        *,
        submissions_dir: str | Path,
        dispatcher: Optional[Dispatcher] = None,
        clock: Callable[[], datetime] = now_local,
        max_relists: int = MAX_RELISTS_PER_RUN,
    ):
        self._directory = directory
        self._directory_service = directory_service
        self._mailbox_factory = mailbox_factory
        self._classifier = classifier
        self._submissions_dir = Path(submissions_dir)
        self._dispatcher = dispatcher or InlineDispatcher()
        self._clock = clock
        self._max_relists = int(max_relists)
        self._run_lock = threading.Lock()
        self._last_result: Optional[IngestionResult] = None

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    @property
    def last_result(self) -> Optional[IngestionResult]:
        return self._last_result

    def check_mail(self) -> IngestionResult:
        if not self._run_lock.acquire(blocking=False):
            logger.info("Mail check already in progress, trigger ignored")
            now = self._clock()
            return IngestionResult(status=IngestionStatus.SKIPPED, started_at=now, finished_at=now)

        try:
            result = self._run()
            self._last_result = result
            return result
        finally:
            self._run_lock.release()

    def _run(self) -> IngestionResult:
        started = self._clock()
        stats = _RunStats()
        logger.info("Mail check started")

        mailbox = self._mailbox_factory()
        try:
            mailbox.connect()
            mailbox.login()
            mailbox.open_inbox()
            self._process_inbox(mailbox, stats)
        except MailError as e:
            logger.error("Mail check failed: %s", e)
            return self._result(IngestionStatus.FAILED, started, stats, error=str(e))
        except Exception as e:
            logger.exception("Mail check aborted by an unexpected error")
            return self._result(IngestionStatus.FAILED, started, stats, error=f"Unexpected error: {e}")
        finally:
            mailbox.close()

        logger.info(
            "Mail check finished: %d created, %d unmapped, %d failed message(s), %d failed attachment(s)",
            stats.created,
            stats.skipped_unmapped,
            stats.failed_messages,
            stats.failed_attachments,
        )
        return self._result(IngestionStatus.OK, started, stats)

    def _result(self, status: IngestionStatus, started: datetime, stats: _RunStats, *, error: Optional[str] = None) -> IngestionResult:
        return IngestionResult(
            status=status,
            started_at=started,
            finished_at=self._clock(),
            created=stats.created,
            skipped_unmapped=stats.skipped_unmapped,
            failed_messages=stats.failed_messages,
            failed_attachments=stats.failed_attachments,
            relists=stats.relists,
            error=error,
        )

    def _process_inbox(self, mailbox: MailboxClient, stats: _RunStats) -> None:
        summaries = list(mailbox.list_summaries())
        done: set[str] = set()
        i = 0
        while i < len(summaries):
            summary = summaries[i]
            i += 1
            if summary.uid in done:
                continue

            try:
                self._process_message(mailbox, summary, stats)
            except StaleMessageError as e:
                if stats.relists >= self._max_relists:
                    logger.error("Giving up on message %s: %s", summary.uid, e)
                    done.add(summary.uid)
                    stats.failed_messages += 1
                    continue
                stats.relists += 1
                logger.warning("Stale message identifiers (%s), re-listing inbox", e)
                try:
                    mailbox.open_inbox()
                    summaries = list(mailbox.list_summaries())
                except MailError as relist_error:
                    # keep what was already recorded; the rest waits for the next run
                    logger.error("Re-listing inbox failed, ending run early: %s", relist_error)
                    stats.failed_messages += 1
                    return
                i = 0
                continue
            except Exception:
                logger.exception("Failed to process message %s", summary.uid)
                stats.failed_messages += 1
            done.add(summary.uid)

    def _process_message(self, mailbox: MailboxClient, summary: MessageSummary, stats: _RunStats) -> None:
        student = self._directory_service.resolve_sender(summary.sender)
        if student is None:
            logger.debug("Message %s: sender is not bound to a student", summary.uid)
            stats.skipped_unmapped += 1
            return

        message = mailbox.fetch_message(summary.uid)
        for attachment in message.attachments:
            try:
                stored = self._classifier.store(attachment.filename, attachment.payload, self._submissions_dir)
            except AttachmentWriteError as e:
                logger.warning("Message %s: %s", summary.uid, e)
                stats.failed_attachments += 1
                continue
            if stored is None:
                continue

            submission = self._build_submission(student, summary, message, stored.path)
            if self._dispatcher.invoke(lambda: self._record(submission)):
                stats.created += 1

    def _build_submission(self, student: Student, summary: MessageSummary, message: MailMessage, file_path: str) -> LabSubmission:
        return LabSubmission(
            student_id=student.student_id,
            title=message.subject or summary.subject,
            received_date=self._clock(),
            message_id=message.message_id or summary.message_id,
            file_path=file_path,
            content=message.text_body,
        )

    def _record(self, submission: LabSubmission) -> bool:
        with self._directory.lock:
            if submission.file_path and self._directory.has_submission_path(submission.file_path):
                return False
            self._directory.add_submission(submission)
            return True
