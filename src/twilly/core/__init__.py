"""
Core client module for Twilly.

Exports:
- Client: asynchronous Twilio REST client
- TwilioConfig: validated account SID & auth token pair
- ApiCallLogger: JSONL logger for API calls
- Exception hierarchy rooted at TwillyError
"""

from .client import Client
from .config import TwilioConfig
from .exceptions import (
    TwillyError,
    ValidationError,
    NetworkError,
    ParsingError,
    TwilioApiError,
    ConfigurationError,
)
from .logging import ApiCallLogger

__all__ = [
    "Client",
    "TwilioConfig",
    "ApiCallLogger",
    "TwillyError",
    "ValidationError",
    "NetworkError",
    "ParsingError",
    "TwilioApiError",
    "ConfigurationError",
]
