"""
Named credential profiles persisted between CLI invocations.

Profiles live in ``profiles.yaml`` inside the config directory:

    active: default
    profiles:
      default:
        account_sid: AC...
        auth_token: ...
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from ..core.config import TwilioConfig, check_account_sid, check_auth_token
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PROFILES_FILE = "profiles.yaml"
SETTINGS_FILE = "settings.yaml"
PROFILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,50}$")
DEFAULT_PROFILE_NAME = "default"


def default_config_dir() -> Path:
    """$TWILLY_CONFIG_DIR, else $XDG_CONFIG_HOME/twilly, else ~/.config/twilly."""
    configured = os.environ.get("TWILLY_CONFIG_DIR")
    if configured:
        return Path(configured).expanduser()
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home).expanduser() / "twilly"
    return Path.home() / ".config" / "twilly"


def check_profile_name(name: str) -> Optional[str]:
    if not PROFILE_NAME_PATTERN.match(name):
        return "Profile names are 1-50 characters of letters, numbers, '-' and '_'"
    return None


class Profile(BaseModel):
    """A named account SID & auth token pair."""

    name: str
    account_sid: str
    auth_token: str = Field(repr=False)

    @field_validator("name")
    @classmethod
    def _valid_name(cls, v: str) -> str:
        problem = check_profile_name(v)
        if problem:
            raise ValueError(problem)
        return v

    @field_validator("account_sid")
    @classmethod
    def _valid_account_sid(cls, v: str) -> str:
        problem = check_account_sid(v)
        if problem:
            raise ValueError(problem)
        return v

    @field_validator("auth_token")
    @classmethod
    def _valid_auth_token(cls, v: str) -> str:
        problem = check_auth_token(v)
        if problem:
            raise ValueError(problem)
        return v

    @classmethod
    def from_config(cls, name: str, config: TwilioConfig) -> "Profile":
        return cls(name=name, account_sid=config.account_sid, auth_token=config.auth_token)

    def to_config(self) -> TwilioConfig:
        return TwilioConfig.build(self.account_sid, self.auth_token)


class ProfileStore:
    """YAML backed collection of profiles with one optionally active."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._profiles: Dict[str, Profile] = {}
        self._active: Optional[str] = None

    @classmethod
    def in_dir(cls, config_dir: Optional[Path] = None) -> "ProfileStore":
        return cls(Path(config_dir or default_config_dir()) / PROFILES_FILE)

    def load(self) -> "ProfileStore":
        """
        Read profiles from disk. A missing file leaves the store empty.

        Raises:
            ConfigurationError: The file is not valid YAML or holds invalid profiles
        """
        self._profiles = {}
        self._active = None
        if not self.path.exists():
            return self
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("top level must be a mapping")
            entries = data.get("profiles") or {}
            if not isinstance(entries, dict):
                raise ValueError("'profiles' must be a mapping")
            profiles = {
                str(name): Profile(name=str(name), **(entry or {}))
                for name, entry in entries.items()
            }
            active = data.get("active")
        except Exception as e:
            raise ConfigurationError(f"Failed to load profiles from {self.path}: {e}")

        if active is not None and str(active) not in profiles:
            logger.warning("Active profile '%s' does not exist in %s; ignoring", active, self.path)
            active = None
        self._profiles = profiles
        self._active = str(active) if active is not None else None
        return self

    def save(self) -> None:
        """Write profiles to disk, readable by the current user only."""
        data = {
            "active": self._active,
            "profiles": {
                name: {"account_sid": p.account_sid, "auth_token": p.auth_token}
                for name, p in self._profiles.items()
            },
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False)
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise ConfigurationError(f"Failed to save profiles to {self.path}: {e}")

    def get(self, name: str) -> Optional[Profile]:
        return self._profiles.get(name)

    def add(self, profile: Profile, *, activate: bool = True) -> None:
        """Add a profile, replacing any profile of the same name."""
        self._profiles[profile.name] = profile
        if activate:
            self._active = profile.name

    def remove(self, name: str) -> Profile:
        if name not in self._profiles:
            raise ConfigurationError(f"Profile '{name}' not found")
        if self._active == name:
            self._active = None
        return self._profiles.pop(name)

    def names(self) -> List[str]:
        return list(self._profiles)

    @property
    def active(self) -> Optional[str]:
        """Name of the active profile, if any."""
        return self._active

    def active_profile(self) -> Optional[Profile]:
        return self._profiles.get(self._active) if self._active else None

    def set_active(self, name: str) -> None:
        if name not in self._profiles:
            raise ConfigurationError(f"Profile '{name}' not found")
        self._active = name

    def __len__(self) -> int:
        return len(self._profiles)
