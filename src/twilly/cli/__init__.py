"""
Interactive terminal CLI for Twilly.

Exports:
- app: the typer application (``twilly`` console script)
- Profile, ProfileStore: stored credential profiles
"""

from .app import app
from .profiles import Profile, ProfileStore

__all__ = ["app", "Profile", "ProfileStore"]
