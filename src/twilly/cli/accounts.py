"""Account menu: get, list, create and change the state of sub-accounts."""

from __future__ import annotations

import logging
from typing import List, Optional

import typer

from ..core.client import Client
from ..core.exceptions import TwilioApiError
from ..resources.accounts import Account, Status
from .menus import CANCELED_MESSAGE
from .output import print_details
from .prompts import ANY, choose_action, choose_filter, confirm, prompt_text, validate_sid

logger = logging.getLogger(__name__)

GET_ACCOUNT = "Get account"
LIST_ACCOUNTS = "List accounts"
CREATE_ACCOUNT = "Create account"
ACTIONS = [GET_ACCOUNT, LIST_ACCOUNTS, CREATE_ACCOUNT]

CHANGE_NAME = "Change name"
SUSPEND = "Suspend"
CLOSE = "Close"
ACTIVATE = "Activate"
ACCOUNT_ACTIONS = {
    Status.ACTIVE: [CHANGE_NAME, SUSPEND, CLOSE],
    Status.SUSPENDED: [CHANGE_NAME, ACTIVATE],
}


def account_label(account: Account) -> str:
    return f"({account.sid}) {account.friendly_name} - {account.status.label}"


async def choose_account_action(twilio: Client) -> None:
    while True:
        action = choose_action(ACTIONS)
        if action is None:
            return
        if action == GET_ACCOUNT:
            await get_account(twilio)
        elif action == LIST_ACCOUNTS:
            await list_accounts(twilio)
        elif action == CREATE_ACCOUNT:
            await create_account(twilio)


async def get_account(twilio: Client) -> None:
    sid = prompt_text("Please provide an account SID:", validate=validate_sid("AC"), placeholder="AC...")
    if sid is None:
        return
    try:
        account = await twilio.accounts.get(sid)
    except TwilioApiError as e:
        if e.not_found:
            typer.echo(f"An Account with SID '{sid}' was not found.")
            return
        raise
    print_details(account)


async def create_account(twilio: Client) -> None:
    friendly_name = prompt_text("Enter a friendly name (empty for default):", allow_empty=True)
    typer.echo("Creating account...")
    account = await twilio.accounts.create(friendly_name or None)
    typer.echo(f"Account created: {account.friendly_name} ({account.sid})")


async def list_accounts(twilio: Client) -> None:
    friendly_name = prompt_text("Search by friendly name? (empty for none):", allow_empty=True)
    status = choose_filter(list(Status), "Filter by status:")
    if status is None:
        return

    typer.echo("Retrieving accounts...")
    accounts = await twilio.accounts.list(friendly_name or None, None if status is ANY else status)
    # Only limited actions are possible on the account in use
    accounts = [a for a in accounts if a.sid != twilio.config.account_sid]
    if not accounts:
        typer.echo("No accounts found.")
        return
    typer.echo(f"Found {len(accounts)} accounts.")

    while True:
        selected = choose_action(accounts, "Accounts:", render=account_label)
        if selected is None:
            return
        await manage_account(twilio, accounts, accounts.index(selected))


async def manage_account(twilio: Client, accounts: List[Account], position: int) -> None:
    """Act on ``accounts[position]``, replacing it with the updated account after each change."""
    while True:
        account = accounts[position]
        if account.status == Status.CLOSED:
            typer.echo(f"{account.sid} is a closed account and can no longer be used.")
            return

        action = choose_action(ACCOUNT_ACTIONS[account.status])
        if action is None:
            return
        if action == CHANGE_NAME:
            updated = await change_account_name(twilio, account.sid)
        elif action == SUSPEND:
            updated = await suspend_account(twilio, account.sid)
        elif action == CLOSE:
            updated = await close_account(twilio, account.sid)
        else:
            updated = await activate_account(twilio, account.sid)
        if updated is not None:
            accounts[position] = updated


async def change_account_name(twilio: Client, sid: str) -> Optional[Account]:
    friendly_name = prompt_text("Provide a name:")
    if friendly_name is None:
        typer.echo(CANCELED_MESSAGE)
        return None
    typer.echo("Updating account...")
    account = await twilio.accounts.update(sid, friendly_name=friendly_name)
    print_details(account)
    return account


async def activate_account(twilio: Client, sid: str) -> Optional[Account]:
    if not confirm("Are you sure you wish to activate this account?"):
        typer.echo(CANCELED_MESSAGE)
        return None
    typer.echo("Activating account...")
    account = await twilio.accounts.update(sid, status=Status.ACTIVE)
    typer.echo("Account activated.")
    return account


async def suspend_account(twilio: Client, sid: str) -> Optional[Account]:
    if not confirm(
        "Are you sure you wish to suspend this account? "
        "Any activity will be disabled until the account is re-activated."
    ):
        typer.echo(CANCELED_MESSAGE)
        return None
    typer.echo("Suspending account...")
    account = await twilio.accounts.update(sid, status=Status.SUSPENDED)
    typer.echo("Account suspended.")
    return account


async def close_account(twilio: Client, sid: str) -> Optional[Account]:
    if not confirm(
        "Are you sure you wish to Close this account? "
        "Activity will be disabled and this action cannot be reversed."
    ):
        typer.echo(CANCELED_MESSAGE)
        return None
    typer.echo("Closing account...")
    account = await twilio.accounts.update(sid, status=Status.CLOSED)
    logger.info("Closed account %s", sid)
    typer.echo("Account closed. This account will still be visible in the console for 30 days.")
    return account
