from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import Callable, Optional

from ..core.constants import SUFFIX_LENGTH
from ..core.enums import WorkType
from ..core.exceptions import AttachmentWriteError
from .model import StoredFile, WorkMatch

_PATTERNS = (
    (WorkType.LAB, re.compile(r"Лабораторная работа (\d+)", re.IGNORECASE)),
    (WorkType.PRACTICAL, re.compile(r"Практическая работа (\d+)", re.IGNORECASE)),
)


def _random_suffix() -> str:
    return uuid.uuid4().hex[:SUFFIX_LENGTH]


class AttachmentClassifier:
    """Recognizes coursework attachments by name and saves them under a canonical name."""

    def __init__(self, *, suffix_factory: Callable[[], str] = _random_suffix):
        self._suffix_factory = suffix_factory

    @staticmethod
    def classify(filename: Optional[str]) -> Optional[WorkMatch]:
        if not filename:
            return None
        for work_type, pattern in _PATTERNS:
            m = pattern.search(filename)
            if m and int(m.group(1)) > 0:
                return WorkMatch(work_type=work_type, number=int(m.group(1)))
        return None

    @staticmethod
    def canonical_name(match: WorkMatch, extension: str) -> str:
        return f"{match.label}{extension}"

    def store(self, filename: Optional[str], payload: bytes, target_dir: str | Path) -> Optional[StoredFile]:
        """Classify ``filename`` and write ``payload`` under its canonical name.

        Returns None when the name is not a recognised coursework name. An
        occupied canonical path gets a short random suffix before the
        extension; existing files are never overwritten.

        Raises:
            AttachmentWriteError: If the file cannot be written
        """
        match = self.classify(filename)
        if match is None:
            return None

        extension = Path(filename).suffix
        directory = Path(target_dir)
        path = directory / self.canonical_name(match, extension)
        suffixed = False

        try:
            directory.mkdir(parents=True, exist_ok=True)
            while True:
                try:
                    with path.open("xb") as fh:
                        fh.write(payload)
                    break
                except FileExistsError:
                    path = directory / f"{match.label}_{self._suffix_factory()}{extension}"
                    suffixed = True
        except (OSError, ValueError) as e:
            # ValueError: names the OS cannot represent, e.g. an embedded NUL
            raise AttachmentWriteError(f"Failed to save {filename!r} as {path}: {e}") from e

        return StoredFile(match=match, path=str(path), suffixed=suffixed)
