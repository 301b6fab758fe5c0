"""IMAP mailbox client (implicit TLS, read-only inbox)."""

from __future__ import annotations

import imaplib
import logging
import re
import ssl
from typing import Callable, Iterator, Optional, Sequence

from ..core.constants import DEFAULT_IMAP_PORT, DEFAULT_IMAP_TIMEOUT
from ..core.exceptions import MailAuthenticationError, MailConnectionError, MailError, StaleMessageError
from .mailbox import MailboxClient
from .model import MailMessage, MessageSummary
from .parsers import parse_message, parse_summary

logger = logging.getLogger(__name__)

SUMMARY_ITEMS = "(UID BODY.PEEK[HEADER.FIELDS (FROM SUBJECT MESSAGE-ID)])"
MESSAGE_ITEMS = "(BODY.PEEK[])"

_UID_RE = re.compile(rb"UID (\d+)")


def _iter_literals(data: Sequence) -> Iterator[tuple[Optional[str], bytes]]:
    """Yield ``(uid, literal)`` pairs from an imaplib FETCH response.

    Servers may put ``UID n`` before or after the literal, so the closing
    chunk that follows a literal is checked too.
    """
    items = list(data or [])
    for i, item in enumerate(items):
        if not isinstance(item, tuple) or len(item) < 2:
            continue
        m = _UID_RE.search(item[0])
        if m is None and i + 1 < len(items) and isinstance(items[i + 1], bytes):
            m = _UID_RE.search(items[i + 1])
        yield (m.group(1).decode("ascii") if m else None), item[1]


class ImapMailbox(MailboxClient):
    """Mailbox session over ``imaplib.IMAP4_SSL``.

    Listing fetches only the From/Subject/Message-ID headers; full bodies are
    fetched per message. Nothing is marked as seen.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        port: int = DEFAULT_IMAP_PORT,
        timeout: float = DEFAULT_IMAP_TIMEOUT,
        ssl_context: Optional[ssl.SSLContext] = None,
        imap_factory: Callable[..., imaplib.IMAP4] = imaplib.IMAP4_SSL,
    ):
        """Initialize the mailbox client.

        Args:
            host: IMAP server host name (e.g., imap.yandex.ru)
            username: Mailbox login
            password: Mailbox password or app password
            port: Implicit-TLS port, 993 by default
            timeout: Socket timeout in seconds
            ssl_context: Custom TLS context (defaults to system trust store)
            imap_factory: Connection constructor, replaceable in tests
        """
        self.host = host
        self.port = int(port)
        self.username = username
        self._password = password
        self._timeout = timeout
        self._ssl_context = ssl_context or ssl.create_default_context()
        self._imap_factory = imap_factory
        self._imap: Optional[imaplib.IMAP4] = None
        self._exists = 0

    def _conn(self) -> imaplib.IMAP4:
        if self._imap is None:
            raise MailConnectionError("Not connected")
        return self._imap

    def connect(self) -> None:
        try:
            self._imap = self._imap_factory(
                self.host,
                self.port,
                ssl_context=self._ssl_context,
                timeout=self._timeout,
            )
        except (OSError, imaplib.IMAP4.error) as e:
            raise MailConnectionError(f"Cannot connect to {self.host}:{self.port}: {e}") from e

    def login(self) -> None:
        conn = self._conn()
        try:
            conn.login(self.username, self._password)
        except imaplib.IMAP4.abort as e:
            raise MailConnectionError(f"Connection lost during login: {e}") from e
        except imaplib.IMAP4.error as e:
            raise MailAuthenticationError(f"Login rejected for {self.username}") from e
        except OSError as e:
            raise MailConnectionError(f"Connection lost during login: {e}") from e

    def open_inbox(self) -> None:
        conn = self._conn()
        try:
            if conn.state == "SELECTED":
                conn.close()
            typ, data = conn.select("INBOX", readonly=True)
        except (imaplib.IMAP4.error, OSError) as e:
            raise MailError(f"Cannot open INBOX: {e}") from e
        if typ != "OK":
            raise MailError(f"Cannot open INBOX: {data!r}")
        try:
            self._exists = int(data[0] or 0)
        except (TypeError, ValueError, IndexError):
            self._exists = 0

    def list_summaries(self) -> Sequence[MessageSummary]:
        if self._exists == 0:
            return []

        conn = self._conn()
        try:
            typ, data = conn.uid("FETCH", "1:*", SUMMARY_ITEMS)
        except (imaplib.IMAP4.error, OSError) as e:
            raise MailError(f"Cannot list INBOX: {e}") from e
        if typ != "OK":
            raise MailError(f"Cannot list INBOX: {data!r}")

        summaries = []
        for uid, header_bytes in _iter_literals(data):
            if uid is None:
                logger.debug("Skipping listing entry without UID")
                continue
            summaries.append(parse_summary(uid, header_bytes))
        return summaries

    def fetch_message(self, uid: str) -> MailMessage:
        conn = self._conn()
        try:
            typ, data = conn.uid("FETCH", uid, MESSAGE_ITEMS)
        except imaplib.IMAP4.abort:
            raise
        except imaplib.IMAP4.error as e:
            if "uid" in str(e).lower():
                raise StaleMessageError(f"Message UID {uid} is stale: {e}") from e
            raise

        if typ != "OK":
            raise StaleMessageError(f"Message UID {uid} cannot be fetched: {data!r}")
        for _, raw in _iter_literals(data):
            return parse_message(uid, raw)
        raise StaleMessageError(f"Message UID {uid} no longer exists")

    def close(self) -> None:
        if self._imap is None:
            return
        try:
            if self._imap.state == "SELECTED":
                self._imap.close()
            self._imap.logout()
        except (imaplib.IMAP4.error, OSError) as e:
            logger.debug("Ignoring error while closing IMAP session: %s", e)
        finally:
            self._imap = None
            self._exists = 0
