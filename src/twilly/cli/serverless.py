"""Serverless menu: services, environments and environment logs."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from ..core.client import Client
from ..core.exceptions import TwilioApiError
from ..resources.serverless import (
    Environment,
    Level,
    ServerlessEnvironment,
    ServerlessLog,
    ServerlessService,
    Service,
)
from .menus import DELETE, LIST_DETAILS, browse, confirm_and_delete
from .output import print_details, write_json
from .prompts import (
    choose_action,
    confirm,
    multi_select,
    prompt_date,
    prompt_text,
    select,
    validate_sid,
)

logger = logging.getLogger(__name__)

CREATE_SERVICE = "Create Serverless Service"
ENVIRONMENTS = "Environments"
LOGS = "Logs"
GET_LOG = "Get Log"
LIST_LOGS = "List Logs"
WRITE_TO_FILE = "Write to file"
VIEW = "View"

LAST_30_MINUTES = "Last 30 minutes"
LAST_HOUR = "Last hour"
LAST_6_HOURS = "Last 6 hours"
TODAY = "Today"
CUSTOM = "Custom"
TIME_RANGES = [LAST_30_MINUTES, LAST_HOUR, LAST_6_HOURS, TODAY, CUSTOM]
QUICK_RANGES = {
    LAST_30_MINUTES: timedelta(minutes=30),
    LAST_HOUR: timedelta(hours=1),
    LAST_6_HOURS: timedelta(hours=6),
}
CUSTOM_RANGE_DAYS = 30

UNIQUE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9-_]+$")
UNIQUE_NAME_MAX_LENGTH = 50


def check_unique_name(value: str) -> Optional[str]:
    if len(value) > UNIQUE_NAME_MAX_LENGTH:
        return "Unique name must be less than 50 characters"
    if not UNIQUE_NAME_PATTERN.match(value):
        return "Name doesn't match required filter '^[a-zA-Z0-9-_]+$'"
    return None


def named_label(resource) -> str:
    return f"({resource.sid}) {resource.unique_name}"


def log_label(log: ServerlessLog) -> str:
    return f"({log.sid}) {log.date_created} - {log.message}"


def resolve_time_range(
    option: str,
    now: datetime,
    start_day: Optional[date] = None,
    end_day: Optional[date] = None,
) -> Tuple[datetime, datetime]:
    """
    Turn a time range choice into a UTC (start, end) pair.

    Custom ranges run from midnight of ``start_day``; an ``end_day`` of today
    ends now, any earlier day ends at 23:59:59.
    """
    now = now.astimezone(timezone.utc)
    if option in QUICK_RANGES:
        return now - QUICK_RANGES[option], now
    if option == TODAY:
        return datetime.combine(now.date(), time.min, tzinfo=timezone.utc), now
    if option == CUSTOM:
        if start_day is None or end_day is None:
            raise ValueError("Custom time ranges need a start and end day")
        start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
        if end_day == now.date():
            return start, now
        return start, datetime.combine(end_day, time(23, 59, 59), tzinfo=timezone.utc)
    raise ValueError(f"Unknown time range '{option}'")


def filter_logs(logs: List[ServerlessLog], levels: List[Level]) -> List[ServerlessLog]:
    return [log for log in logs if log.level in levels]


# Services


async def choose_serverless_resource(twilio: Client) -> None:
    typer.echo("Fetching Serverless Services...")
    services = await twilio.serverless.services.list()
    if services:
        typer.echo(f"Found {len(services)} Serverless Services.")
    else:
        typer.echo("No Serverless Services found.")

    def render(option) -> str:
        return option if isinstance(option, str) else named_label(option)

    while True:
        selected = choose_action([*services, CREATE_SERVICE], "Choose a Serverless Service:", render=render)
        if selected is None:
            return
        if selected == CREATE_SERVICE:
            selected = await create_serverless_service(twilio)
            if selected is None:
                continue
            services.append(selected)
        if await manage_serverless_service(twilio.serverless.service(selected.sid), selected):
            services.remove(selected)


async def create_serverless_service(twilio: Client) -> Optional[ServerlessService]:
    unique_name = prompt_text("Enter a unique name:", validate=check_unique_name)
    if unique_name is None:
        return None
    friendly_name = prompt_text("Enter a friendly name (empty to use the unique name):", allow_empty=True)
    include_credentials = confirm(
        "Would you like to include Twilio credentials for function invocations?", default=True
    )
    ui_editable = confirm("Would you like the service to be editable via the Console?", default=False)

    typer.echo("Creating Serverless Service...")
    service = await twilio.serverless.services.create(
        unique_name,
        friendly_name or unique_name,
        include_credentials=include_credentials,
        ui_editable=ui_editable,
    )
    typer.echo(f"Serverless Service created: {service.sid}")
    return service


async def manage_serverless_service(resource: Service, service: ServerlessService) -> bool:
    while True:
        action = choose_action([LIST_DETAILS, ENVIRONMENTS, DELETE])
        if action is None:
            return False
        if action == LIST_DETAILS:
            print_details(service)
        elif action == ENVIRONMENTS:
            await choose_environment(resource)
        elif await confirm_and_delete(
            "Are you sure you wish to delete the Serverless Service?",
            "Serverless Service",
            resource.delete,
        ):
            return True


# Environments


async def choose_environment(resource: Service) -> None:
    typer.echo("Fetching Serverless Environments...")
    environments = await resource.environments.list()
    if not environments:
        typer.echo("No Serverless Environments found.")
        return
    typer.echo(f"Found {len(environments)} Serverless Environments.")

    async def manage(environment: ServerlessEnvironment) -> bool:
        return await manage_environment(resource.environment(environment.sid), environment)

    await browse(environments, "Choose a Serverless Environment:", manage, render=named_label)


async def manage_environment(resource: Environment, environment: ServerlessEnvironment) -> bool:
    while True:
        action = choose_action([LIST_DETAILS, LOGS, DELETE])
        if action is None:
            return False
        if action == LIST_DETAILS:
            print_details(environment)
        elif action == LOGS:
            await choose_log_action(resource, environment)
        elif await confirm_and_delete(
            "Are you sure you wish to delete the Serverless Environment?",
            "Serverless Environment",
            resource.delete,
        ):
            return True


# Logs


async def choose_log_action(resource: Environment, environment: ServerlessEnvironment) -> None:
    while True:
        action = choose_action([GET_LOG, LIST_LOGS])
        if action is None:
            return
        if action == GET_LOG:
            await get_log(resource)
        else:
            await list_logs(resource, environment)


async def get_log(resource: Environment) -> None:
    sid = prompt_text("Please provide a Log SID:", validate=validate_sid("NO"), placeholder="NO...")
    if sid is None:
        return
    try:
        log = await resource.log(sid).get()
    except TwilioApiError as e:
        if e.not_found:
            typer.echo(f"A Log with SID '{sid}' was not found.")
            typer.echo()
            return
        raise
    typer.echo("Log found.")
    typer.echo()
    if choose_action([LIST_DETAILS]) == LIST_DETAILS:
        print_details(log)


def choose_time_range(now: datetime) -> Optional[Tuple[Optional[datetime], Optional[datetime]]]:
    """
    Ask for an optional time range. Returns (None, None) for Twilio's default
    of the last 24 hours, or None when cancelled.
    """
    typer.echo("Will retrieve the last 24 hours by default.")
    if not confirm("Would you like to select a time range?", default=False):
        return None, None
    option = select("Select a time range:", TIME_RANGES)
    if option is None:
        return None
    if option != CUSTOM:
        return resolve_time_range(option, now)

    today = now.astimezone(timezone.utc).date()
    start_day = prompt_date(
        "Choose a start date:", minimum=today - timedelta(days=CUSTOM_RANGE_DAYS), maximum=today
    )
    if start_day is None:
        return None
    end_day = prompt_date("Choose an end date:", minimum=start_day, maximum=today)
    if end_day is None:
        return None
    return resolve_time_range(CUSTOM, now, start_day, end_day)


async def list_logs(resource: Environment, environment: ServerlessEnvironment) -> None:
    time_range = choose_time_range(datetime.now(timezone.utc))
    if time_range is None:
        return
    start_date, end_date = time_range

    function_sid = None
    if confirm("Would you like to filter by a specific function?", default=False):
        function_sid = prompt_text(
            "Please provide a function SID:", validate=validate_sid("ZH"), placeholder="ZH..."
        )
    levels = multi_select("Select the log levels you would like to view:", list(Level))

    typer.echo("Fetching logs...")
    logs = await resource.logs.list(function_sid, start_date, end_date)
    typer.echo("Filtering...")
    logs = filter_logs(logs, levels)
    if not logs:
        typer.echo("No logs found.")
        typer.echo()
        return
    typer.echo(f"Found {len(logs)} logs.")

    output = choose_action([WRITE_TO_FILE, VIEW], "Select an output:")
    if output == WRITE_TO_FILE:
        await write_logs(Path(f"{environment.sid}.json"), logs)
    elif output == VIEW:
        await view_logs(logs)


async def write_logs(path: Path, logs: List[ServerlessLog]) -> None:
    try:
        await write_json(path, logs)
    except OSError as e:
        typer.echo(f"Unable to create log file. Action aborted: {e}", err=True)
        return
    logger.info("Wrote %d logs to %s", len(logs), path)
    typer.echo(f"Log file created: {path}")


async def view_logs(logs: List[ServerlessLog]) -> None:
    # Latest first
    ordered = sorted(logs, key=lambda log: log.date_created or "", reverse=True)

    async def manage(log: ServerlessLog) -> bool:
        while True:
            if choose_action([LIST_DETAILS]) is None:
                return False
            print_details(log)

    await browse(ordered, "Choose a Serverless Log:", manage, render=log_label)
