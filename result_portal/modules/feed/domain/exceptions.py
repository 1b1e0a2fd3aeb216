"""Feed domain exceptions."""

from fastapi import status

from result_portal.core.domain.exceptions import DomainException


class FeedError(DomainException):
    """Base error for a failed feed load attempt."""

    http_status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "FEED_ERROR"


class NetworkError(FeedError):
    """Raised when the feed request could not complete."""

    error_code = "FEED_NETWORK_ERROR"

    def __init__(self, detail: str):
        super().__init__(f"Network error: {detail}")


class ProtocolError(FeedError):
    """Raised on an HTTP error status or a payload shape violation."""

    error_code = "FEED_PROTOCOL_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_status(cls, status_code: int) -> "ProtocolError":
        return cls(f"HTTP error! Status: {status_code}", status_code=status_code)
