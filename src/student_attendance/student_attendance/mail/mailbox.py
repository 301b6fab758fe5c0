from __future__ import annotations

from typing import Protocol, Sequence

from .model import MailMessage, MessageSummary


class MailboxClient(Protocol):
    """One mailbox session: connect, authenticate, read the inbox.

    Implementations raise ``MailConnectionError`` / ``MailAuthenticationError``
    from ``connect``/``login`` and ``StaleMessageError`` when a listed uid can
    no longer be fetched.
    """

    def connect(self) -> None:
        raise NotImplementedError

    def login(self) -> None:
        raise NotImplementedError

    def open_inbox(self) -> None:
        """Select the inbox read-only."""

        raise NotImplementedError

    def list_summaries(self) -> Sequence[MessageSummary]:
        raise NotImplementedError

    def fetch_message(self, uid: str) -> MailMessage:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError
