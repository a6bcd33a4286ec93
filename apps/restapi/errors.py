"""
=============================================================================
REST API ERRORS
=============================================================================

Exception hierarchy raised by the remote API client:

- ApiError          - Base class, carries a human readable reason
- ApiTransportError - Network failure (connection refused, timeout, DNS...)
- ApiStatusError    - The API answered with a non-success HTTP status
- ApiPayloadError   - The body could not be decoded into the expected shape

Callers that want a value instead of an exception use fetch() or the
staff()/shifts()/staff_shifts() shortcuts on the client, which return a
FetchResult.
=============================================================================
"""
from __future__ import annotations


class ApiError(Exception):
    """Base class for every failure talking to the remote API."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ApiTransportError(ApiError):
    pass


class ApiStatusError(ApiError):
    def __init__(self, reason: str, *, status_code: int, message: str = "") -> None:
        super().__init__(reason)
        self.status_code = status_code
        # Server supplied "message" field, if the error body had one.
        self.message = message


class ApiPayloadError(ApiError):
    pass
