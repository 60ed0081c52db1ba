from __future__ import annotations


class BookingApiError(RuntimeError):
    """Base class for failed calls against the booking backend."""

    def __init__(self, message: str, status_code: int | None = None, server_message: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class ApiTransportError(BookingApiError):
    """Raised when no response was received (connection failure, timeout)."""
    pass


class ApiUnauthorizedError(BookingApiError):
    """Raised on 401. The stored auth token has already been cleared."""
    pass


class ApiRequestError(BookingApiError):
    """Raised on 4xx responses other than 401; carries the server message verbatim."""
    pass


class ApiServerError(BookingApiError):
    """Raised on 5xx responses."""
    pass


class ApiContractError(BookingApiError):
    """Raised when a response does not match the expected envelope or payload shape."""
    pass


GENERIC_FAILURE = "Something went wrong. Please try again."


def user_message(exc: BaseException, fallback: str = GENERIC_FAILURE) -> str:
    """Short human-readable text for a failure: the server message when present, else the fallback."""
    if isinstance(exc, ApiServerError):
        return fallback
    if isinstance(exc, BookingApiError) and exc.server_message:
        return exc.server_message
    return fallback
