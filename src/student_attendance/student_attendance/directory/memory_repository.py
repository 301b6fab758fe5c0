from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..common.validators import normalize_email
from ..submissions.model import LabSubmission
from .model import EmailMapping, Group, Student
from .repository import DirectoryRepository


class InMemoryDirectory(DirectoryRepository):
    """Id-indexed collections held in memory.

    Insertion order is preserved, so listings come back in the order the
    entities were added (or loaded).
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._groups: dict[str, Group] = {}
        self._students: dict[str, Student] = {}
        self._mappings: dict[str, EmailMapping] = {}
        self._submissions: dict[str, LabSubmission] = {}

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # groups
    def get_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def list_groups(self) -> Sequence[Group]:
        with self._lock:
            return list(self._groups.values())

    def add_group(self, group: Group) -> Group:
        with self._lock:
            self._groups[group.group_id] = group
        return group

    # students
    def get_student(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id)

    def list_students(self, group_id: Optional[str] = None) -> Sequence[Student]:
        with self._lock:
            if group_id is None:
                return list(self._students.values())
            return [s for s in self._students.values() if s.group_id == group_id]

    def add_student(self, student: Student) -> Student:
        with self._lock:
            if student.group is None:
                student.group = self._groups.get(student.group_id)
            self._students[student.student_id] = student
        return student

    def remove_student(self, student_id: str) -> bool:
        """Remove a student together with the e-mail bindings that point at them."""
        with self._lock:
            if self._students.pop(student_id, None) is None:
                return False
            for key, mapping in list(self._mappings.items()):
                if mapping.student_id == student_id:
                    del self._mappings[key]
            return True

    # email mappings
    def list_email_mappings(self) -> Sequence[EmailMapping]:
        with self._lock:
            return list(self._mappings.values())

    def find_email_mapping(self, email: str) -> Optional[EmailMapping]:
        return self._mappings.get(normalize_email(email))

    def add_email_mapping(self, mapping: EmailMapping) -> EmailMapping:
        with self._lock:
            self._mappings[normalize_email(mapping.email)] = mapping
        return mapping

    def remove_email_mapping(self, email: str) -> bool:
        with self._lock:
            return self._mappings.pop(normalize_email(email), None) is not None

    # submissions
    def list_submissions(self, student_id: Optional[str] = None) -> Sequence[LabSubmission]:
        with self._lock:
            if student_id is None:
                return list(self._submissions.values())
            return [s for s in self._submissions.values() if s.student_id == student_id]

    def has_submission_path(self, file_path: str) -> bool:
        with self._lock:
            return any(s.file_path == file_path for s in self._submissions.values())

    def add_submission(self, submission: LabSubmission) -> LabSubmission:
        with self._lock:
            self._submissions[submission.submission_id] = submission
        return submission

    def remove_submission(self, submission_id: str) -> bool:
        with self._lock:
            return self._submissions.pop(submission_id, None) is not None
