"""Credentials and settings for Twilly (pydantic models, YAML-backed settings)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ConfigurationError, ValidationError

SID_LENGTH = 34
AUTH_TOKEN_LENGTH = 32


def check_account_sid(account_sid: str) -> Optional[str]:
    """Return a problem description for an invalid account SID, otherwise None."""
    if not account_sid.startswith("AC"):
        return "Account SID must start with AC"
    if len(account_sid) != SID_LENGTH:
        return f"Account SID should be {SID_LENGTH} characters in length. Was {len(account_sid)}"
    return None


def check_auth_token(auth_token: str) -> Optional[str]:
    """Return a problem description for an invalid auth token, otherwise None."""
    if len(auth_token) != AUTH_TOKEN_LENGTH:
        return f"Auth token should be {AUTH_TOKEN_LENGTH} characters in length. Was {len(auth_token)}"
    return None


class TwilioConfig(BaseModel):
    """Account SID & auth token pair required for authenticating requests to Twilio."""

    model_config = ConfigDict(frozen=True)

    # Twilio account SID, begins with AC...
    account_sid: str
    auth_token: str = Field(repr=False)

    @classmethod
    def build(cls, account_sid: str, auth_token: str) -> "TwilioConfig":
        """Validate and build a config.

        Raises:
            ValidationError: When the SID or token has the wrong shape
        """
        problem = check_account_sid(account_sid) or check_auth_token(auth_token)
        if problem:
            raise ValidationError(problem)
        return cls(account_sid=account_sid, auth_token=auth_token)

    @classmethod
    def from_env(cls) -> Optional["TwilioConfig"]:
        """Build from TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN (a local .env is honoured)."""
        load_dotenv()
        account_sid = os.environ.get("TWILIO_ACCOUNT_SID", "").strip()
        auth_token = os.environ.get("TWILIO_AUTH_TOKEN", "").strip()
        if not account_sid or not auth_token:
            return None
        return cls.build(account_sid, auth_token)

    @property
    def masked_token(self) -> str:
        return f"{self.auth_token[:4]}{'*' * (len(self.auth_token) - 4)}"


class CliSettings(BaseModel):
    """Optional CLI settings loaded from settings.yaml next to the profiles file."""

    # Directory for JSONL API call logs; disabled when unset
    log_dir: Optional[Path] = None
    request_timeout: float = 30.0
    # Seconds between calls when closing/deleting conversations in bulk
    bulk_action_delay: float = 1.0

    @field_validator("log_dir", mode="before")
    @classmethod
    def _coerce_path(cls, v):
        if v is None or isinstance(v, Path):
            return v
        return Path(str(v)).expanduser()

    @field_validator("request_timeout", "bulk_action_delay")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must not be negative")
        return v


def load_settings(config_path: Path) -> CliSettings:
    """Load CliSettings from a YAML file. A missing file yields the defaults."""
    p = Path(config_path)
    if not p.exists():
        return CliSettings()
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("top level must be a mapping")
        return CliSettings(**data)
    except Exception as e:
        raise ConfigurationError(f"Failed to load settings from {p}: {e}")
