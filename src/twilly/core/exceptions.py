#%% Custom Exceptions
"""
Custom exception classes for Twilly.

This module defines specific exception types for the different failure
scenarios of talking to Twilio: bad arguments, transport problems, errors
returned by Twilio itself and bodies that cannot be parsed.
"""

from __future__ import annotations

from typing import Any, Dict


class TwillyError(Exception):
    """Base exception class for all Twilly errors."""
    pass


class ValidationError(TwillyError):
    """Raised when provided arguments fail validation before a request is sent."""

    def __init__(self, message: str):
        super().__init__(f"Validation error for provided arguments: {message}")
        self.detail = message


class NetworkError(TwillyError):
    """Raised when Twilio cannot be reached."""

    def __init__(self, error: Exception):
        super().__init__(f"Network error reaching Twilio: {error}")
        self.error = error


class ParsingError(TwillyError):
    """Raised when a request or response body cannot be parsed."""

    def __init__(self, error: Any):
        super().__init__(f"Unable to parse response: {error}")
        self.error = error


class TwilioApiError(TwillyError):
    """Raised when Twilio answers with an error payload.

    Twilio error bodies look like::

        {"code": 20404, "message": "The requested resource ... was not found",
         "more_info": "https://www.twilio.com/docs/errors/20404", "status": 404}
    """

    def __init__(self, code: int, message: str, more_info: str, status: int):
        self.code = code
        self.message = message
        self.more_info = more_info
        self.status = status
        super().__init__(
            f"{status} from Twilio. ({code}) {message}. For more info see: {more_info}"
        )

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TwilioApiError":
        """Build from a decoded error body. Raises KeyError/TypeError/ValueError on bad shapes."""
        return cls(
            code=int(payload["code"]),
            message=str(payload["message"]),
            more_info=str(payload.get("more_info") or ""),
            status=int(payload["status"]),
        )

    @property
    def not_found(self) -> bool:
        return self.status == 404


class ConfigurationError(TwillyError):
    """Raised when configuration or stored profiles are invalid or missing."""
    pass
