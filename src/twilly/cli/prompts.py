"""
Terminal input helpers for the interactive CLI.

All prompts follow the same conventions:
- an empty answer cancels and returns ``None`` (the caller goes back a step)
- Ctrl-C closes the program with exit code 130
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, TypeVar, Union

import typer

from ..core.config import TwilioConfig, check_account_sid, check_auth_token

T = TypeVar("T")
Validator = Callable[[str], Optional[str]]

INTERRUPTED_MESSAGE = "Operation interrupted. Closing program."
BACK = "Back"
EXIT = "Exit"
SID_LENGTH = 34


class _AnyChoice:
    """Filter choice meaning 'do not filter'."""

    def __str__(self) -> str:
        return "Any"

    def __repr__(self) -> str:
        return "ANY"


ANY = _AnyChoice()


def interrupted() -> typer.Exit:
    typer.echo(INTERRUPTED_MESSAGE, err=True)
    return typer.Exit(130)


def _ask(message: str, *, hide_input: bool = False) -> str:
    try:
        answer = typer.prompt(message, default="", show_default=False, hide_input=hide_input)
    except typer.Abort:
        raise interrupted()
    return str(answer).strip()


def _prompt(
    message: str,
    *,
    validate: Optional[Validator],
    allow_empty: bool,
    placeholder: Optional[str],
    hide_input: bool,
) -> Optional[str]:
    label = f"{message} ({placeholder})" if placeholder else message
    while True:
        value = _ask(label, hide_input=hide_input)
        if not value:
            return "" if allow_empty else None
        problem = validate(value) if validate else None
        if problem:
            typer.echo(f"  {problem}")
            continue
        return value


def prompt_text(
    message: str,
    *,
    validate: Optional[Validator] = None,
    allow_empty: bool = False,
    placeholder: Optional[str] = None,
) -> Optional[str]:
    """Ask for a line of text, re-asking until ``validate`` returns no problem."""
    return _prompt(
        message, validate=validate, allow_empty=allow_empty, placeholder=placeholder, hide_input=False
    )


def prompt_secret(
    message: str,
    *,
    validate: Optional[Validator] = None,
    allow_empty: bool = False,
) -> Optional[str]:
    """Like prompt_text but the input is hidden."""
    return _prompt(message, validate=validate, allow_empty=allow_empty, placeholder=None, hide_input=True)


def confirm(message: str, default: bool = False) -> bool:
    try:
        return typer.confirm(message, default=default)
    except typer.Abort:
        raise interrupted()


def select(message: str, options: Sequence[T], render: Callable[[T], str] = str) -> Optional[T]:
    """
    Show ``options`` as a numbered list and return the chosen one.

    The answer may be the option number or its exact text. Returns None when
    cancelled or when there is nothing to choose from.
    """
    if not options:
        return None
    typer.echo(message)
    for number, option in enumerate(options, start=1):
        typer.echo(f"  {number}) {render(option)}")
    while True:
        answer = _ask("Choose an option")
        if not answer:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        for option in options:
            if render(option).lower() == answer.lower():
                return option
        typer.echo(f"  Enter a number between 1 and {len(options)}")


def multi_select(
    message: str,
    options: Sequence[T],
    defaults: Optional[Sequence[T]] = None,
) -> List[T]:
    """
    Choose several options by comma separated numbers.

    An empty answer keeps ``defaults`` (every option when not given).
    """
    selected = list(options if defaults is None else defaults)
    typer.echo(message)
    for number, option in enumerate(options, start=1):
        mark = "x" if option in selected else " "
        typer.echo(f"  [{mark}] {number}) {option}")
    while True:
        answer = _ask("Choose options (comma separated)")
        if not answer:
            return selected
        try:
            numbers = [int(part) for part in answer.split(",") if part.strip()]
        except ValueError:
            numbers = []
        if numbers and all(1 <= n <= len(options) for n in numbers):
            return [option for n, option in enumerate(options, start=1) if n in numbers]
        typer.echo(f"  Enter numbers between 1 and {len(options)}, e.g. 1,3")


def choose_action(
    options: Sequence[T],
    message: str = "Select an action:",
    render: Callable[[T], str] = str,
) -> Optional[T]:
    """
    Select one of ``options`` with Back and Exit appended.

    Exit leaves the program; Back or cancelling returns None.
    """

    def _render(option) -> str:
        return option if option in (BACK, EXIT) else render(option)

    choice = select(message, [*options, BACK, EXIT], _render)
    if choice is None or choice == BACK:
        return None
    if choice == EXIT:
        raise typer.Exit(0)
    return choice


def choose_filter(options: Sequence[T], message: str) -> Optional[Union[T, _AnyChoice]]:
    """Select a filter value with Any prepended. Returns ANY, the option, or None on cancel."""
    return select(message, [ANY, *options])


def validate_sid(prefix: str) -> Validator:
    """Build a validator for SIDs of the given two letter prefix."""

    def _validate(value: str) -> Optional[str]:
        if not value.startswith(prefix):
            return f"SID must start with {prefix}"
        if len(value) != SID_LENGTH:
            return f"SID should be {SID_LENGTH} characters in length"
        return None

    return _validate


def prompt_date(
    message: str,
    minimum: Optional[date] = None,
    maximum: Optional[date] = None,
) -> Optional[date]:
    """Ask for a YYYY-MM-DD date within [minimum, maximum]."""

    def _validate(value: str) -> Optional[str]:
        try:
            chosen = datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            return "Enter a date as YYYY-MM-DD"
        if minimum and chosen < minimum:
            return f"Date must be on or after {minimum.isoformat()}"
        if maximum and chosen > maximum:
            return f"Date must be on or before {maximum.isoformat()}"
        return None

    value = prompt_text(message, validate=_validate, placeholder="YYYY-MM-DD")
    if value is None:
        return None
    return datetime.strptime(value, "%Y-%m-%d").date()


def request_credentials() -> Optional[TwilioConfig]:
    """Ask for an account SID & auth token pair. Returns None when cancelled."""
    account_sid = prompt_text(
        "Please provide an account SID:", validate=check_account_sid, placeholder="AC..."
    )
    if account_sid is None:
        return None
    auth_token = prompt_secret("Provide the auth token (input hidden):", validate=check_auth_token)
    if auth_token is None:
        return None
    return TwilioConfig.build(account_sid, auth_token)
