"""Parsers for raw RFC 5322 messages."""

from __future__ import annotations

from email import policy
from email.message import EmailMessage
from email.parser import BytesHeaderParser, BytesParser
from email.utils import getaddresses
from typing import Optional

from bs4 import BeautifulSoup

from .model import MailAttachment, MailMessage, MessageSummary


def _first_address(msg: EmailMessage) -> str:
    pairs = getaddresses([str(v) for v in msg.get_all("From", [])])
    for _, addr in pairs:
        if addr:
            return addr.strip()
    return ""


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    return soup.get_text(separator="\n", strip=True)


def _text_body(msg: EmailMessage) -> Optional[str]:
    body = msg.get_body(preferencelist=("plain", "html"))
    if body is None:
        return None
    try:
        content = body.get_content()
    except (LookupError, UnicodeError):
        # Unknown or broken charset: fall back to a lossy decode.
        raw = body.get_payload(decode=True) or b""
        content = raw.decode("utf-8", errors="replace")
    if body.get_content_type() == "text/html":
        content = html_to_text(content)
    return content.strip() or None


def parse_summary(uid: str, header_bytes: bytes) -> MessageSummary:
    """Parse the header block fetched for an inbox listing."""
    msg = BytesHeaderParser(policy=policy.default).parsebytes(header_bytes)
    return MessageSummary(
        uid=uid,
        sender=_first_address(msg),
        subject=str(msg.get("Subject", "") or ""),
        message_id=str(msg.get("Message-ID", "") or "").strip(),
    )


def parse_message(uid: str, raw: bytes) -> MailMessage:
    """Parse a full message: sender, subject, text body and named attachments.

    Any part carrying a file name counts as an attachment, including parts
    nested in forwarded multiparts.
    """
    msg = BytesParser(policy=policy.default).parsebytes(raw)

    attachments = []
    for part in msg.walk():
        if part.is_multipart():
            continue
        filename = part.get_filename()
        if not filename:
            continue
        attachments.append(
            MailAttachment(
                filename=filename,
                payload=part.get_payload(decode=True) or b"",
                content_type=part.get_content_type(),
            )
        )

    return MailMessage(
        uid=uid,
        sender=_first_address(msg),
        subject=str(msg.get("Subject", "") or ""),
        message_id=str(msg.get("Message-ID", "") or "").strip(),
        text_body=_text_body(msg),
        attachments=attachments,
    )
