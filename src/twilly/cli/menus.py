"""Menu building blocks shared by the resource menus."""

from __future__ import annotations

from typing import Awaitable, Callable, List, TypeVar

import typer

from ..core.exceptions import TwilioApiError
from .prompts import choose_action, confirm

T = TypeVar("T")

LIST_DETAILS = "List Details"
DELETE = "Delete"
CANCELED_MESSAGE = "Operation canceled. No changes were made."


async def browse(
    items: List[T],
    message: str,
    manage: Callable[[T], Awaitable[bool]],
    render: Callable[[T], str] = str,
) -> None:
    """
    Let the user pick from ``items`` until they go back.

    ``manage`` acts on the chosen item and returns True when the item no
    longer exists, in which case it is dropped from ``items``.
    """
    while items:
        selected = choose_action(items, message, render=render)
        if selected is None:
            return
        if await manage(selected):
            items.remove(selected)


async def confirm_and_delete(
    question: str,
    resource_name: str,
    delete: Callable[[], Awaitable[None]],
) -> bool:
    """Ask ``question`` then run ``delete``. Returns True when the resource is gone."""
    if not confirm(question, default=False):
        typer.echo(CANCELED_MESSAGE)
        return False
    typer.echo(f"Deleting {resource_name}...")
    try:
        await delete()
    except TwilioApiError as e:
        if e.not_found:
            typer.echo(f"The {resource_name} was not found.")
            typer.echo()
            return True
        raise
    typer.echo(f"{resource_name} deleted.")
    typer.echo()
    return True
