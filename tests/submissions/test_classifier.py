from __future__ import annotations

from pathlib import Path

import pytest

from src.student_attendance.student_attendance.core.enums import WorkType
from src.student_attendance.student_attendance.core.exceptions import AttachmentWriteError
from src.student_attendance.student_attendance.submissions.classifier import AttachmentClassifier


@pytest.mark.parametrize(
    "filename, work_type, number",
    [
        ("Лабораторная работа 3.docx", WorkType.LAB, 3),
        ("Иванов ЛАБОРАТОРНАЯ РАБОТА 12 финал.pdf", WorkType.LAB, 12),
        ("практическая работа 1.zip", WorkType.PRACTICAL, 1),
        ("Практическая работа 2 и Лабораторная работа 5.rar", WorkType.LAB, 5),
    ],
)
def test_classify_recognises_names(filename, work_type, number):
    match = AttachmentClassifier.classify(filename)

    assert match is not None
    assert match.work_type == work_type
    assert match.number == number


@pytest.mark.parametrize(
    "filename",
    [None, "", "report.pdf", "Лабораторная работа.docx", "Лабораторная работа 0.docx", "Лабораторнаяработа 1.doc"],
)
def test_classify_misses(filename):
    assert AttachmentClassifier.classify(filename) is None


def test_store_writes_canonical_name(tmp_path):
    classifier = AttachmentClassifier()

    stored = classifier.store("лабораторная РАБОТА 03 Иванов.docx", b"payload", tmp_path / "LabWorks")

    assert stored is not None
    assert stored.suffixed is False
    assert Path(stored.path).name == "Лабораторная работа 3.docx"
    assert Path(stored.path).read_bytes() == b"payload"


def test_store_suffixes_occupied_name(tmp_path):
    suffixes = iter(["aaaa", "bbbb"])
    classifier = AttachmentClassifier(suffix_factory=lambda: next(suffixes))
    (tmp_path / "Практическая работа 2.pdf").write_bytes(b"old")
    (tmp_path / "Практическая работа 2_aaaa.pdf").write_bytes(b"older")

    stored = classifier.store("Практическая работа 2.pdf", b"new", tmp_path)

    assert stored.suffixed is True
    assert Path(stored.path).name == "Практическая работа 2_bbbb.pdf"
    assert (tmp_path / "Практическая работа 2.pdf").read_bytes() == b"old"
    assert (tmp_path / "Практическая работа 2_aaaa.pdf").read_bytes() == b"older"
    assert Path(stored.path).read_bytes() == b"new"


def test_store_without_extension(tmp_path):
    stored = AttachmentClassifier().store("Лабораторная работа 7", b"x", tmp_path)

    assert Path(stored.path).name == "Лабораторная работа 7"


def test_store_ignores_unrecognised_names(tmp_path):
    assert AttachmentClassifier().store("notes.txt", b"x", tmp_path) is None
    assert list(tmp_path.iterdir()) == []


def test_store_wraps_write_errors(tmp_path):
    blocker = tmp_path / "LabWorks"
    blocker.write_bytes(b"not a directory")

    with pytest.raises(AttachmentWriteError):
        AttachmentClassifier().store("Лабораторная работа 1.docx", b"x", blocker)


def test_store_wraps_names_with_embedded_nul(tmp_path):
    with pytest.raises(AttachmentWriteError):
        AttachmentClassifier().store("Лабораторная работа 1.docx\x00", b"x", tmp_path)
