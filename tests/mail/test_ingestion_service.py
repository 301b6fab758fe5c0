from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from src.student_attendance.student_attendance.core.enums import IngestionStatus
from src.student_attendance.student_attendance.core.exceptions import (
    MailAuthenticationError,
    MailConnectionError,
    StaleMessageError,
)
from src.student_attendance.student_attendance.directory.service import DirectoryService
from src.student_attendance.student_attendance.mail.model import MailAttachment, MailMessage, MessageSummary
from src.student_attendance.student_attendance.mail.service import MailIngestionService
from src.student_attendance.student_attendance.submissions.classifier import AttachmentClassifier


def _message(uid: str, sender: str, *filenames: str, subject: str = "Сдача работ") -> MailMessage:
    return MailMessage(
        uid=uid,
        sender=sender,
        subject=subject,
        message_id=f"<{uid}@example.com>",
        text_body="Добрый день",
        attachments=[MailAttachment(filename=f, payload=f.encode("utf-8")) for f in filenames],
    )


class FakeMailbox:
    def __init__(self, messages: list[MailMessage], *, fail_on: Optional[str] = None, login_error=None, connect_error=None):
        self.messages = {m.uid: m for m in messages}
        self.fail_on = fail_on
        self.login_error = login_error
        self.connect_error = connect_error
        self.fetched: list[str] = []
        self.opened = 0
        self.closed = False

    def connect(self) -> None:
        if self.connect_error:
            raise self.connect_error

    def login(self) -> None:
        if self.login_error:
            raise self.login_error

    def open_inbox(self) -> None:
        self.opened += 1

    def list_summaries(self):
        return [MessageSummary(uid=m.uid, sender=m.sender, subject=m.subject, message_id=m.message_id) for m in self.messages.values()]

    def fetch_message(self, uid: str) -> MailMessage:
        self.fetched.append(uid)
        if uid == self.fail_on:
            raise RuntimeError("broken message")
        return self.messages[uid]

    def close(self) -> None:
        self.closed = True


def _service(directory, mailbox, tmp_path, fixed_now, **kwargs) -> MailIngestionService:
    return MailIngestionService(
        directory,
        DirectoryService(directory),
        lambda: mailbox,
        kwargs.pop("classifier", AttachmentClassifier()),
        submissions_dir=tmp_path / "LabWorks",
        clock=fixed_now,
        **kwargs,
    )


def test_unmapped_sender_is_never_fetched(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox([_message("1", "stranger@example.com", "Лабораторная работа 1.docx")])

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.created == 0
    assert result.skipped_unmapped == 1
    assert mailbox.fetched == []
    assert directory.list_submissions() == []
    assert mailbox.closed is True


def test_mapped_sender_creates_submission(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox([_message("1", "ivanov@example.com", "лабораторная работа 2.pdf", "photo.jpg")])

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.created == 1
    [submission] = directory.list_submissions()
    assert submission.student_id == "s1"
    assert submission.title == "Сдача работ"
    assert submission.message_id == "<1@example.com>"
    assert submission.content == "Добрый день"
    assert submission.received_date == fixed_now()
    assert Path(submission.file_path).name == "Лабораторная работа 2.pdf"
    assert Path(submission.file_path).exists()


def test_second_run_keeps_earlier_files(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox([_message("1", "IVANOV@example.com", "Лабораторная работа 1.docx", "Практическая работа 4.docx")])
    service = _service(directory, mailbox, tmp_path, fixed_now)

    first = service.check_mail()
    second = service.check_mail()

    assert first.created == 2
    assert second.created == 2
    files = sorted(p.name for p in (tmp_path / "LabWorks").iterdir())
    assert len(files) == 4
    assert "Лабораторная работа 1.docx" in files
    assert "Практическая работа 4.docx" in files
    assert len(directory.list_submissions()) == 4
    assert len({s.file_path for s in directory.list_submissions()}) == 4


def test_submission_for_known_path_is_not_duplicated(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox([_message("1", "ivanov@example.com", "Лабораторная работа 1.docx")])
    service = _service(directory, mailbox, tmp_path, fixed_now)
    service.check_mail()
    [existing] = directory.list_submissions()

    (tmp_path / "LabWorks" / "Лабораторная работа 1.docx").unlink()
    result = service.check_mail()

    assert result.created == 0
    assert directory.list_submissions() == [existing]


def test_login_failure_returns_failed(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox([], login_error=MailAuthenticationError("Login rejected"))
    service = _service(directory, mailbox, tmp_path, fixed_now)

    result = service.check_mail()

    assert result.status == IngestionStatus.FAILED
    assert "Login rejected" in result.error
    assert mailbox.closed is True
    assert service.last_result is result
    assert service.is_running is False


def test_connection_failure_returns_failed(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox([], connect_error=MailConnectionError("unreachable"))

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.FAILED
    assert directory.list_submissions() == []


def test_one_broken_message_does_not_stop_the_run(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox(
        [
            _message("1", "ivanov@example.com", "Лабораторная работа 1.docx"),
            _message("2", "ivanov@example.com", "Лабораторная работа 2.docx"),
        ],
        fail_on="1",
    )

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.failed_messages == 1
    assert result.created == 1


def test_attachment_write_failure_is_counted(directory, tmp_path, fixed_now):
    (tmp_path / "LabWorks").write_bytes(b"not a directory")
    mailbox = FakeMailbox([_message("1", "ivanov@example.com", "Лабораторная работа 1.docx")])

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.failed_attachments == 1
    assert result.created == 0


class StaleOnceMailbox(FakeMailbox):
    def __init__(self, messages, *, stale_times: int):
        super().__init__(messages)
        self.stale_times = stale_times

    def fetch_message(self, uid: str) -> MailMessage:
        if self.stale_times:
            self.stale_times -= 1
            self.fetched.append(uid)
            raise StaleMessageError("expunged")
        return super().fetch_message(uid)


def test_stale_identifiers_trigger_relist(directory, tmp_path, fixed_now):
    mailbox = StaleOnceMailbox([_message("7", "ivanov@example.com", "Лабораторная работа 1.docx")], stale_times=1)

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.relists == 1
    assert result.created == 1
    assert mailbox.opened == 2


def test_relists_are_bounded(directory, tmp_path, fixed_now):
    mailbox = StaleOnceMailbox([_message("7", "ivanov@example.com", "Лабораторная работа 1.docx")], stale_times=100)

    result = _service(directory, mailbox, tmp_path, fixed_now, max_relists=2).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.relists == 2
    assert result.failed_messages == 1
    assert result.created == 0


class BlockingMailbox(FakeMailbox):
    def __init__(self):
        super().__init__([])
        self.entered = threading.Event()
        self.release = threading.Event()

    def open_inbox(self) -> None:
        self.entered.set()
        self.release.wait(5)


def test_concurrent_trigger_is_skipped(directory, tmp_path, fixed_now):
    mailbox = BlockingMailbox()
    service = _service(directory, mailbox, tmp_path, fixed_now)
    results = []

    worker = threading.Thread(target=lambda: results.append(service.check_mail()))
    worker.start()
    assert mailbox.entered.wait(5)

    assert service.is_running is True
    skipped = service.check_mail()
    mailbox.release.set()
    worker.join(5)

    assert skipped.status == IngestionStatus.SKIPPED
    assert results[0].status == IngestionStatus.OK
    assert service.last_result is results[0]
    assert service.is_running is False


def test_unwritable_name_does_not_drop_sibling_attachments(directory, tmp_path, fixed_now):
    mailbox = FakeMailbox(
        [_message("1", "ivanov@example.com", "Лабораторная работа 1.docx\x00", "Лабораторная работа 2.docx")]
    )

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.created == 1
    assert result.failed_attachments == 1
    assert result.failed_messages == 0
    [submission] = directory.list_submissions()
    assert Path(submission.file_path).name == "Лабораторная работа 2.docx"


def test_removed_student_no_longer_receives_submissions(directory, tmp_path, fixed_now):
    DirectoryService(directory).remove_student("s1")
    mailbox = FakeMailbox([_message("1", "ivanov@example.com", "Лабораторная работа 1.docx")])

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.created == 0
    assert result.skipped_unmapped == 1
    assert mailbox.fetched == []
    assert directory.list_submissions() == []


class RelistFailsMailbox(StaleOnceMailbox):
    def open_inbox(self) -> None:
        super().open_inbox()
        if self.opened > 1:
            raise MailConnectionError("connection dropped")


def test_failed_relist_keeps_earlier_submissions(directory, tmp_path, fixed_now):
    mailbox = RelistFailsMailbox(
        [
            _message("1", "ivanov@example.com", "Лабораторная работа 1.docx"),
            _message("2", "ivanov@example.com", "Лабораторная работа 2.docx"),
        ],
        stale_times=0,
    )
    real_fetch = mailbox.fetch_message

    def fetch(uid: str) -> MailMessage:
        if uid == "2":
            raise StaleMessageError("expunged")
        return real_fetch(uid)

    mailbox.fetch_message = fetch

    result = _service(directory, mailbox, tmp_path, fixed_now).check_mail()

    assert result.status == IngestionStatus.OK
    assert result.created == 1
    assert result.relists == 1
    assert result.failed_messages == 1
    assert len(directory.list_submissions()) == 1
    assert mailbox.closed is True
