"""
Twilly command line entry point.

Usage:
    twilly                      # interactive session
    twilly --profile staging    # interactive session with a stored profile
    twilly profile list|add|remove|use
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import typer
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Annotated

from ..core.client import Client
from ..core.config import CliSettings, TwilioConfig, load_settings
from ..core.exceptions import ConfigurationError, TwillyError, ValidationError
from ..core.logging import ApiCallLogger, configure_logging
from .accounts import choose_account_action
from .conversations import choose_conversation_action
from .profiles import (
    DEFAULT_PROFILE_NAME,
    SETTINGS_FILE,
    Profile,
    ProfileStore,
    check_profile_name,
    default_config_dir,
)
from .prompts import INTERRUPTED_MESSAGE, confirm, prompt_text, request_credentials, select
from .serverless import choose_serverless_resource
from .sync import choose_sync_resource

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="twilly",
    help="Interact with Twilio from your terminal",
    add_completion=False,
)
profile_app = typer.Typer(help="Manage stored credential profiles")
app.add_typer(profile_app, name="profile")

ENV_PROFILE_NAME = "env"
MAIN_MENU = ["Account", "Conversations", "Sync", "Serverless", "Exit"]

BANNER = r"""
___________       .__.__  .__
\__    ___/_  _  _|__|  | |  | ___.__.
  |    |  \ \/ \/ /  |  | |  |<   |  |
  |    |   \     /|  |  |_|  |_\___  |
  |____|    \/\_/ |__|____/____/ ____|
                               \/
"""


@dataclass
class CliState:
    config_dir: Path
    profile: Optional[str] = None
    api_log_dir: Optional[Path] = None

    @property
    def store(self) -> ProfileStore:
        return ProfileStore.in_dir(self.config_dir)


def print_welcome_message() -> None:
    typer.echo("\n\n")
    typer.echo(BANNER)
    typer.echo("Welcome to Twilly! I'm here to help you interact with Twilio!")
    typer.echo()


def fail(message: str) -> typer.Exit:
    typer.echo(f"❌ {message}", err=True)
    return typer.Exit(1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_dir: Annotated[
        Optional[Path], typer.Option("--config-dir", help="Directory holding profiles.yaml and settings.yaml")
    ] = None,
    log_level: Annotated[str, typer.Option("--log-level", help="Log level")] = "WARNING",
    profile: Annotated[Optional[str], typer.Option("--profile", "-p", help="Stored profile to use")] = None,
    api_log_dir: Annotated[
        Optional[Path], typer.Option("--api-log-dir", help="Write a JSONL record of every API call here")
    ] = None,
):
    """Start an interactive session when no command is given."""
    configure_logging(log_level)
    state = CliState(config_dir=config_dir or default_config_dir(), profile=profile, api_log_dir=api_log_dir)
    ctx.obj = state
    if ctx.invoked_subcommand is None:
        run_interactive(state)


def run_interactive(state: CliState) -> None:
    try:
        settings = load_settings(state.config_dir / SETTINGS_FILE)
        asyncio.run(interactive_session(state, settings))
    except KeyboardInterrupt:
        typer.echo(INTERRUPTED_MESSAGE, err=True)
        raise typer.Exit(130)
    except TwillyError as e:
        logger.debug("Interactive session failed", exc_info=True)
        raise fail(str(e))


async def interactive_session(state: CliState, settings: CliSettings) -> None:
    print_welcome_message()
    store = state.store.load()
    config, fresh = select_credentials(store, state.profile)
    if config is None:
        typer.echo("No credentials provided. Closing program.")
        return

    log_dir = state.api_log_dir or settings.log_dir
    api_logger = ApiCallLogger(log_dir) if log_dir else None
    async with Client(config, timeout=settings.request_timeout, api_logger=api_logger) as twilio:
        if fresh:
            typer.echo("Checking account...")
            account = await twilio.accounts.get()
            typer.echo(
                f"✅ Account details good! {account.friendly_name} ({account.type} - {account.status.label})"
            )
            remember_profile(store, config)
        await main_menu(twilio, settings)


def select_credentials(store: ProfileStore, requested: Optional[str]) -> Tuple[Optional[TwilioConfig], bool]:
    """
    Pick the credentials for this session.

    Returns the config and whether it was freshly entered (and so still
    needs verifying and storing).
    """
    if requested:
        stored = store.get(requested)
        if stored is None:
            typer.echo(f"Profile '{requested}' not found.")
    else:
        stored = store.active_profile() or env_profile(store)

    if stored is not None and confirm(
        f"Account ({stored.account_sid}) found in memory. Use this profile?", default=True
    ):
        return stored.to_config(), False
    return request_credentials(), True


def env_profile(store: ProfileStore) -> Optional[Profile]:
    """Credentials from TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN when nothing is stored."""
    if len(store):
        return None
    try:
        config = TwilioConfig.from_env()
    except ValidationError as e:
        logger.warning("Ignoring environment credentials: %s", e)
        return None
    return Profile.from_config(ENV_PROFILE_NAME, config) if config else None


def remember_profile(store: ProfileStore, config: TwilioConfig) -> None:
    name = prompt_text(
        "Save this profile as:", validate=check_profile_name, allow_empty=True, placeholder=DEFAULT_PROFILE_NAME
    )
    try:
        store.add(Profile.from_config(name or DEFAULT_PROFILE_NAME, config))
        store.save()
    except ConfigurationError as e:
        typer.echo(f"Unable to store profile configuration: {e}", err=True)


async def main_menu(twilio: Client, settings: CliSettings) -> None:
    while True:
        choice = select("Select a resource:", MAIN_MENU)
        if choice is None or choice == "Exit":
            return
        if choice == "Account":
            await choose_account_action(twilio)
        elif choice == "Conversations":
            await choose_conversation_action(twilio, settings)
        elif choice == "Sync":
            await choose_sync_resource(twilio)
        elif choice == "Serverless":
            await choose_serverless_resource(twilio)


# Profile management


def _load_store(ctx: typer.Context) -> ProfileStore:
    try:
        return ctx.obj.store.load()
    except ConfigurationError as e:
        raise fail(str(e))


def _save_store(store: ProfileStore) -> None:
    try:
        store.save()
    except ConfigurationError as e:
        raise fail(str(e))


@profile_app.command("list")
def list_profiles(ctx: typer.Context):
    """List stored profiles; the active one is marked with *."""
    store = _load_store(ctx)
    if not store.names():
        typer.echo("No profiles stored.")
        return
    for name in store.names():
        marker = "*" if name == store.active else " "
        config = store.get(name).to_config()
        typer.echo(f"{marker} {name} ({config.account_sid}, token {config.masked_token})")


@profile_app.command("add")
def add_profile(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
    account_sid: Annotated[str, typer.Option("--account-sid", prompt="Account SID", help="Account SID (AC...)")],
    auth_token: Annotated[
        str, typer.Option("--auth-token", prompt="Auth token", hide_input=True, help="Auth token")
    ],
    activate: Annotated[bool, typer.Option("--activate/--no-activate", help="Make this the active profile")] = True,
):
    """Store (or replace) a profile."""
    try:
        profile = Profile(name=name, account_sid=account_sid.strip(), auth_token=auth_token.strip())
    except PydanticValidationError as e:
        raise fail("; ".join(str(error["msg"]) for error in e.errors()))
    store = _load_store(ctx)
    store.add(profile, activate=activate)
    _save_store(store)
    typer.echo(f"✅ Profile '{name}' saved")


@profile_app.command("remove")
def remove_profile(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
):
    """Delete a stored profile."""
    store = _load_store(ctx)
    try:
        store.remove(name)
    except ConfigurationError as e:
        raise fail(str(e))
    _save_store(store)
    typer.echo(f"Profile '{name}' removed")


@profile_app.command("use")
def use_profile(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
):
    """Make a stored profile the active one."""
    store = _load_store(ctx)
    try:
        store.set_active(name)
    except ConfigurationError as e:
        raise fail(str(e))
    _save_store(store)
    typer.echo(f"Active profile: {name}")


if __name__ == "__main__":
    app()
