"""Domain errors raised by repositories and the session lifecycle manager.

Routers do not catch these; ``labstudy.main`` maps every ``LabStudyError``
to a JSON body of the form ``{"detail": message, "code": code}``.
"""
from __future__ import annotations


class LabStudyError(Exception):
    status_code: int = 500
    code: str = "ERROR"
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LabStudyError):
    """Malformed input (bad date, missing required field). Nothing was written."""
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class NotFoundError(LabStudyError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class NoChangeError(LabStudyError):
    """The proposed update matches the stored state."""
    status_code = 400
    code = "NO_CHANGES"
    default_message = "No changes"


class StorageError(LabStudyError):
    """The database was unreachable or returned something unexpected."""
    status_code = 500
    code = "STORAGE_ERROR"
    default_message = "Storage failure"
