from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import normalize_email, require_email
from ..core.exceptions import ValidationError
from .model import EmailMapping, Student
from .repository import DirectoryRepository

logger = logging.getLogger(__name__)


class DirectoryService:
    """Student directory use cases: e-mail bindings and reference upkeep."""

    def __init__(self, directory: DirectoryRepository):
        self._directory = directory

    def resolve_sender(self, address: Optional[str]) -> Optional[Student]:
        """Map a sender address to its student, or None when unbound."""
        if not normalize_email(address):
            return None

        mapping = self._directory.find_email_mapping(address)
        if not mapping:
            return None
        # the cached pointer may outlive a removed student
        return self._directory.get_student(mapping.student_id)

    def bind_email(self, *, student_id: str, email: str) -> EmailMapping:
        email = require_email(email)

        student = self._directory.get_student(student_id)
        if not student:
            raise ValidationError("Student does not exist")

        with self._directory.lock:
            if self._directory.find_email_mapping(email):
                raise ValidationError(f"E-mail {email} is already bound")
            mapping = EmailMapping(email=email, student_id=student.student_id, student=student)
            return self._directory.add_email_mapping(mapping)

    def unbind_email(self, email: str) -> bool:
        return self._directory.remove_email_mapping(email)

    def remove_student(self, student_id: str) -> bool:
        """Delete a student and their e-mail bindings.

        Submissions stay until ``purge_orphan_submissions`` runs.
        """
        removed = self._directory.remove_student(student_id)
        if removed:
            logger.info("Removed student %s", student_id)
        return removed

    def relink(self) -> int:
        """Rebuild cached references from ids.

        Returns the number of e-mail mappings purged because their student is
        gone.
        """
        purged = 0
        with self._directory.lock:
            for student in self._directory.list_students():
                student.group = self._directory.get_group(student.group_id)

            for mapping in self._directory.list_email_mappings():
                mapping.student = self._directory.get_student(mapping.student_id)
                if mapping.student is None:
                    self._directory.remove_email_mapping(mapping.email)
                    purged += 1

        if purged:
            logger.info("Purged %d e-mail mapping(s) without a student", purged)
        return purged

    def purge_orphan_submissions(self) -> int:
        """Drop submissions whose student was deleted."""
        removed = 0
        with self._directory.lock:
            for submission in self._directory.list_submissions():
                if self._directory.get_student(submission.student_id) is None:
                    self._directory.remove_submission(submission.submission_id)
                    removed += 1
        return removed
