"""Conversations menu: inspect, close and delete conversations, singly or in bulk."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import typer

from ..core.client import Client
from ..core.config import CliSettings
from ..core.exceptions import TwilioApiError
from ..resources.conversations import Conversation, ConversationUpdate, State
from .menus import CANCELED_MESSAGE
from .output import print_details
from .prompts import (
    ANY,
    choose_action,
    choose_filter,
    confirm,
    prompt_date,
    prompt_text,
    select,
    validate_sid,
)

logger = logging.getLogger(__name__)

GET_CONVERSATION = "Get conversation"
LIST_CONVERSATIONS = "List Conversations"
LIST_BY_IDENTIFIER = "List Conversations by identifier"
CLOSE_CONVERSATION = "Close Conversation"
CLOSE_ALL = "Close all Conversations"
DELETE_CONVERSATION = "Delete Conversation"
DELETE_ALL = "Delete all Conversations"
ACTIONS = [
    GET_CONVERSATION,
    LIST_CONVERSATIONS,
    LIST_BY_IDENTIFIER,
    CLOSE_CONVERSATION,
    CLOSE_ALL,
    DELETE_CONVERSATION,
    DELETE_ALL,
]

LIST_DETAILS = "List details"
DEACTIVATE = "De-activate"
REACTIVATE = "Re-activate"
DELETE = "Delete"
CONVERSATION_ACTIONS = {
    State.ACTIVE: [LIST_DETAILS, DEACTIVATE, DELETE],
    State.INACTIVE: [LIST_DETAILS, REACTIVATE, DELETE],
    State.CLOSED: [LIST_DETAILS, DELETE],
}

IDENTITY = "Identity"
ADDRESS = "Address"


def conversation_label(conversation: Conversation) -> str:
    if conversation.unique_name:
        return f"({conversation.sid}) {conversation.unique_name} - {conversation.state.label}"
    return str(conversation)


def prompt_conversation_sid() -> Optional[str]:
    return prompt_text(
        "Please provide a conversation SID, or unique name:",
        validate=validate_sid("CH"),
        placeholder="CH...",
    )


async def choose_conversation_action(twilio: Client, settings: CliSettings) -> None:
    while True:
        action = choose_action(ACTIONS)
        if action is None:
            return
        if action == GET_CONVERSATION:
            await get_conversation(twilio)
        elif action == LIST_CONVERSATIONS:
            await list_conversations(twilio)
        elif action == LIST_BY_IDENTIFIER:
            await list_conversations_by_identifier(twilio)
        elif action == CLOSE_CONVERSATION:
            sid = prompt_conversation_sid()
            if sid is None:
                typer.echo(CANCELED_MESSAGE)
            else:
                await close_conversation(twilio, sid)
        elif action == CLOSE_ALL:
            await close_all_conversations(twilio, settings.bulk_action_delay)
        elif action == DELETE_CONVERSATION:
            sid = prompt_conversation_sid()
            if sid is None:
                typer.echo(CANCELED_MESSAGE)
            else:
                await delete_conversation(twilio, sid)
        elif action == DELETE_ALL:
            await delete_all_conversations(twilio, settings.bulk_action_delay)


async def get_conversation(twilio: Client) -> None:
    sid = prompt_conversation_sid()
    if sid is None:
        return
    try:
        conversation = await twilio.conversations.get(sid)
    except TwilioApiError as e:
        if e.not_found:
            typer.echo(f"A Conversation with SID '{sid}' was not found.")
            typer.echo()
            return
        raise

    typer.echo("Conversation found.")
    typer.echo()
    action = choose_action([LIST_DETAILS, DELETE])
    if action == LIST_DETAILS:
        print_details(conversation)
    elif action == DELETE:
        await delete_conversation(twilio, conversation.sid)


async def list_conversations(twilio: Client) -> None:
    start_date = end_date = None
    if confirm("Would you like to filter between specified dates?", default=False):
        today = datetime.now(timezone.utc).date()
        start_date = prompt_date("Choose a start date:", minimum=today - timedelta(days=365), maximum=today)
        if start_date is None:
            return
        end_date = prompt_date("Choose an end date:", minimum=start_date, maximum=today)
        if end_date is None:
            return

    state = choose_filter(list(State), "Filter by state?")
    if state is None:
        return

    typer.echo("Fetching conversations...")
    conversations = await twilio.conversations.list(
        start_date, end_date, None if state is ANY else state
    )
    if not conversations:
        typer.echo("No conversations found.")
        typer.echo()
        return
    typer.echo(f"Found {len(conversations)} conversations.")

    while conversations:
        selected = choose_action(conversations, "Conversations:", render=conversation_label)
        if selected is None:
            return
        await manage_conversation(twilio, conversations, conversations.index(selected))


async def manage_conversation(twilio: Client, conversations: List[Conversation], position: int) -> None:
    """
    Act on ``conversations[position]``.

    State changes replace the entry with the updated conversation and stay
    on it; deletes remove it and return to the conversation list.
    """
    while True:
        conversation = conversations[position]
        action = choose_action(CONVERSATION_ACTIONS[conversation.state])
        if action is None:
            return
        if action == LIST_DETAILS:
            print_details(conversation)
        elif action in (DEACTIVATE, REACTIVATE):
            state = State.INACTIVE if action == DEACTIVATE else State.ACTIVE
            conversations[position] = await update_conversation(
                twilio, conversation.sid, ConversationUpdate(state=state)
            )
        elif action == DELETE:
            if await delete_conversation(twilio, conversation.sid):
                conversations.pop(position)
                return


async def list_conversations_by_identifier(twilio: Client) -> None:
    typer.echo("Identity for chat-based users otherwise Address.")
    identifier = select("Select an identifier:", [IDENTITY, ADDRESS])
    if identifier is None:
        return
    value = prompt_text(f"Please provide the {identifier.lower()} to search for:")
    if value is None:
        return
    state = choose_filter(list(State), "Filter by state?")
    if state is None:
        return

    typer.echo("Fetching conversations...")
    participant_conversations = await twilio.conversations.participant_conversations.list(
        identity=value if identifier == IDENTITY else None,
        address=value if identifier == ADDRESS else None,
    )
    # The endpoint has no state filter
    if state is not ANY:
        participant_conversations = [
            pc for pc in participant_conversations if pc.conversation_state == state
        ]

    if not participant_conversations:
        typer.echo("No conversations found with the provided identifier.")
        typer.echo()
        return
    typer.echo(f"Found {len(participant_conversations)} conversations.")
    typer.echo()
    for pc in participant_conversations:
        typer.echo(f"{pc.conversation_sid} - {pc.conversation_date_created}")
    typer.echo()


async def update_conversation(twilio: Client, sid: str, update: ConversationUpdate) -> Conversation:
    conversation = await twilio.conversations.update(sid, update)
    typer.echo("Conversation updated.")
    typer.echo()
    return conversation


async def close_conversation(twilio: Client, sid: str) -> None:
    await twilio.conversations.update(sid, ConversationUpdate(state=State.CLOSED))
    typer.echo("Conversation closed.")
    typer.echo()


async def delete_conversation(twilio: Client, sid: str) -> bool:
    """Confirm then delete. Returns True when the conversation is gone."""
    if not confirm("Are you sure you wish to delete the Conversation?", default=False):
        typer.echo(CANCELED_MESSAGE)
        return False
    try:
        await twilio.conversations.delete(sid)
    except TwilioApiError as e:
        if e.not_found:
            typer.echo(f"A Conversation with SID '{sid}' was not found.")
            typer.echo()
            return True
        raise
    typer.echo("Conversation deleted.")
    typer.echo()
    return True


async def close_all_conversations(twilio: Client, delay: float) -> None:
    if not confirm("Are you sure to wish to close **all** conversations?", default=False):
        return
    conversations = await twilio.conversations.list(state=State.ACTIVE)
    typer.echo(f"We've found {len(conversations)} active conversations to close.")
    if not confirm("Continue?", default=False):
        return

    typer.echo("Proceeding with closing. Please wait...")
    for conversation in conversations:
        await close_conversation(twilio, conversation.sid)
        # One call per interval to avoid overwhelming Twilio
        await asyncio.sleep(delay)
    logger.info("Closed %d conversations", len(conversations))
    typer.echo("All active conversations closed.")
    typer.echo()


async def delete_all_conversations(twilio: Client, delay: float) -> None:
    if not (
        confirm("Are you sure you wish to delete **all** Conversations?", default=False)
        and confirm("Are you double sure? There is no going back.", default=False)
    ):
        typer.echo(CANCELED_MESSAGE)
        typer.echo()
        return

    typer.echo("Proceeding with deletion. Please wait...")
    conversations = await twilio.conversations.list()
    for conversation in conversations:
        await twilio.conversations.delete(conversation.sid)
        await asyncio.sleep(delay)
    logger.info("Deleted %d conversations", len(conversations))
    typer.echo("All conversations deleted.")
    typer.echo()
