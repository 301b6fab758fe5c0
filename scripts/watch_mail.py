"""Poll the mailbox in the background until interrupted.

The main thread owns the collections: the poller hands its inserts over
through an ``OwnerThreadDispatcher`` and the main loop runs them.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.student_attendance.student_attendance.container import build_container
from src.student_attendance.student_attendance.mail.dispatch import OwnerThreadDispatcher


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    dispatcher = OwnerThreadDispatcher()
    container = build_container(settings=settings, dispatcher=dispatcher)
    poller = container.mail_poller
    poller.start()
    poller.trigger()

    try:
        while True:
            if dispatcher.run_pending():
                container.store.save(container.directory)
            time.sleep(0.2)
    except KeyboardInterrupt:
        print("Stopping...")
    finally:
        poller.stop()
        # serve inserts of a run that is still finishing
        dispatcher.run_pending()
        container.store.save(container.directory)


if __name__ == "__main__":
    main()
