"""
Twilly - a Twilio API client and interactive terminal CLI.
"""

__version__ = "0.1.0"

from .core import (
    Client,
    TwilioConfig,
    TwillyError,
    ValidationError,
    NetworkError,
    ParsingError,
    TwilioApiError,
    ConfigurationError,
)

__all__ = [
    "Client",
    "TwilioConfig",
    "TwillyError",
    "ValidationError",
    "NetworkError",
    "ParsingError",
    "TwilioApiError",
    "ConfigurationError",
]
