"""Run one mailbox check and save new submissions."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.student_attendance.student_attendance.container import build_container
from src.student_attendance.student_attendance.core.enums import IngestionStatus


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(settings=settings)
    result = container.mail_service.check_mail()
    if result.created:
        container.store.save(container.directory)

    if result.status == IngestionStatus.FAILED:
        raise SystemExit(f"Mail check failed: {result.error}")
    print(
        f"OK: {result.created} new submission(s), "
        f"{result.skipped_unmapped} message(s) from unknown senders, "
        f"{result.failed_messages + result.failed_attachments} failure(s)"
    )


if __name__ == "__main__":
    main()
