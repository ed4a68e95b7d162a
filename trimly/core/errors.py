"""Typed failures raised by the availability engine and the appointment lifecycle.

Every error has a stable ``code`` the HTTP layer renders next to the message,
and a ``retryable`` flag telling callers whether re-issuing the same request
can succeed.
"""

from typing import Optional


class BookingError(Exception):
    """Base class for all booking domain failures."""

    code = "booking_error"
    status_code = 400
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BookingError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidTransitionError(BookingError):
    code = "invalid_transition"
    status_code = 409

    def __init__(self, appointment_id, current: str, requested: str):
        super().__init__(
            f"Appointment {appointment_id} cannot move from '{current}' to '{requested}'"
        )
        self.current = current
        self.requested = requested


class SlotUnavailableError(BookingError):
    code = "slot_unavailable"
    status_code = 409


class InvalidInputError(BookingError):
    code = "invalid_input"
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class BackendError(BookingError):
    """The persistence layer failed or timed out; safe to retry."""

    code = "backend_unavailable"
    status_code = 503
    retryable = True
