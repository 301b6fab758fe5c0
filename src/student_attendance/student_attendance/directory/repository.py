from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from ..submissions.model import LabSubmission
from .model import EmailMapping, Group, Student


class DirectoryRepository(Protocol):
    """Repository interface for the shared collections.

    Note (DIP): services depend on this interface, never on a concrete store.
    The repository keeps its own id indexes, so callers always get resolved
    entities back.
    """

    @property
    def lock(self) -> ContextManager:
        """Re-entrant lock guarding structural mutations of the collections."""

        raise NotImplementedError

    def get_group(self, group_id: str) -> Optional[Group]:
        raise NotImplementedError

    def list_groups(self) -> Sequence[Group]:
        raise NotImplementedError

    def add_group(self, group: Group) -> Group:
        raise NotImplementedError

    def get_student(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_students(self, group_id: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError

    def add_student(self, student: Student) -> Student:
        raise NotImplementedError

    def remove_student(self, student_id: str) -> bool:
        raise NotImplementedError

    def list_email_mappings(self) -> Sequence[EmailMapping]:
        raise NotImplementedError

    def find_email_mapping(self, email: str) -> Optional[EmailMapping]:
        """Case-insensitive exact lookup."""

        raise NotImplementedError

    def add_email_mapping(self, mapping: EmailMapping) -> EmailMapping:
        raise NotImplementedError

    def remove_email_mapping(self, email: str) -> bool:
        raise NotImplementedError

    def list_submissions(self, student_id: Optional[str] = None) -> Sequence[LabSubmission]:
        raise NotImplementedError

    def has_submission_path(self, file_path: str) -> bool:
        raise NotImplementedError

    def add_submission(self, submission: LabSubmission) -> LabSubmission:
        raise NotImplementedError

    def remove_submission(self, submission_id: str) -> bool:
        raise NotImplementedError
