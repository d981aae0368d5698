from typing import Any, Sequence


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class ApiError(CustomBaseError):
    """
    Failure reported by (or while reaching) the booking backend.

    status_code is 0 for transport failures and 408 for timeouts, otherwise the
    HTTP status. code is the backend error code (e.g. SEATS_UNAVAILABLE).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        code: str = 'UNKNOWN_ERROR',
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.details = details or {}
        super().__init__(message, status_code)


class HoldConflictError(ConflictError):
    """Requested seats are no longer available. Surfaced to the user, never retried."""

    def __init__(self, message: str, *, unavailable_seats: Sequence[str] = ()) -> None:
        self.code = 'SEAT_CONFLICT'
        self.unavailable_seats = tuple(unavailable_seats)
        super().__init__(message)


class ReleaseIgnorableError(CustomBaseError):
    """Release rejected because the hold is already gone server-side. Treated as success."""

    def __init__(self, message: str, *, hold_id: str) -> None:
        self.hold_id = hold_id
        super().__init__(message, 410)


class PaymentInitiationError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message, status_code)


class InvalidPaymentResponseError(CustomBaseError):
    """Payment backend answered without a usable redirect target."""

    def __init__(self, message: str = 'Invalid payment response') -> None:
        super().__init__(message, 502)
