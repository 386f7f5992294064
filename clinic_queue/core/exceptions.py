"""
Domain exceptions raised by the service layer.

Each carries the message that is safe to show to API clients; the handlers
in ``main.py`` turn them into structured JSON error responses.
"""
from typing import Optional


class ClinicQueueError(Exception):
    """Base class for service-layer failures."""

    message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationError(ClinicQueueError):
    """Missing or malformed input (reported as a client error)."""

    message = "Invalid request"


class NotFoundError(ClinicQueueError):
    message = "The requested resource was not found"


class PersistenceError(ClinicQueueError):
    """The store could not complete a read or write."""

    message = "A storage error occurred"


class PartialAdmissionError(PersistenceError):
    """A doctor's counter advanced but the matching queue entry was not written.

    The issued token is now an orphaned gap in that doctor's sequence. It is
    kept on the exception for logging and reconciliation, never returned to
    the caller.
    """

    message = "Failed to join queue"

    def __init__(self, doctor_id: str, token: int, message: Optional[str] = None):
        self.doctor_id = doctor_id
        self.token = token
        super().__init__(message)
