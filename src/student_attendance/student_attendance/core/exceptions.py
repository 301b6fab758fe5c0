class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AttachmentWriteError(DomainError):
    """Raised when a classified attachment cannot be written to disk."""


class MailError(Exception):
    """Base exception for mailbox failures."""


class MailConnectionError(MailError):
    """Raised when the mail server cannot be reached."""


class MailAuthenticationError(MailError):
    """Raised when the mail server rejects the credentials."""


class StaleMessageError(MailError):
    """Raised when message identifiers no longer match the mailbox state."""


class StorageError(DomainError):
    """Raised when the data document cannot be read or written."""
