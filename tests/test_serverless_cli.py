import json
from datetime import date, datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from twilly.cli import serverless
from twilly.cli.serverless import (
    CUSTOM,
    LAST_30_MINUTES,
    LAST_6_HOURS,
    TODAY,
    check_unique_name,
    filter_logs,
    resolve_time_range,
    write_logs,
)
from twilly.resources.serverless import Level, ServerlessEnvironment, ServerlessLog, ServerlessService

NOW = datetime(2024, 5, 20, 15, 45, 10, tzinfo=timezone.utc)


def make_log(sid, level, created="2024-05-20T10:00:00Z"):
    return ServerlessLog(sid=sid, level=level, message=f"message {sid}", date_created=created)


def test_quick_ranges_end_now():
    assert resolve_time_range(LAST_30_MINUTES, NOW) == (datetime(2024, 5, 20, 15, 15, 10, tzinfo=timezone.utc), NOW)
    start, end = resolve_time_range(LAST_6_HOURS, NOW)
    assert start == datetime(2024, 5, 20, 9, 45, 10, tzinfo=timezone.utc)
    assert end == NOW


def test_today_starts_at_midnight():
    assert resolve_time_range(TODAY, NOW) == (datetime(2024, 5, 20, tzinfo=timezone.utc), NOW)


def test_custom_range_in_the_past_ends_at_end_of_day():
    start, end = resolve_time_range(CUSTOM, NOW, date(2024, 5, 1), date(2024, 5, 3))
    assert start == datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert end == datetime(2024, 5, 3, 23, 59, 59, tzinfo=timezone.utc)


def test_custom_range_ending_today_ends_now():
    _, end = resolve_time_range(CUSTOM, NOW, date(2024, 5, 1), date(2024, 5, 20))
    assert end == NOW


def test_bad_time_ranges():
    with pytest.raises(ValueError):
        resolve_time_range(CUSTOM, NOW)
    with pytest.raises(ValueError):
        resolve_time_range("Last week", NOW)


def test_filter_logs_by_level():
    logs = [make_log("NO1", Level.INFO), make_log("NO2", Level.ERROR), make_log("NO3", Level.WARN)]
    assert [log.sid for log in filter_logs(logs, [Level.ERROR, Level.WARN])] == ["NO2", "NO3"]
    assert filter_logs(logs, []) == []


def test_unique_name_checks():
    assert check_unique_name("my-service_1") is None
    assert check_unique_name("has space") == "Name doesn't match required filter '^[a-zA-Z0-9-_]+$'"
    assert check_unique_name("a" * 51) == "Unique name must be less than 50 characters"


async def test_write_logs(tmp_path, capsys):
    path = tmp_path / "ZE1.json"
    await write_logs(path, [make_log("NO1", Level.INFO)])

    written = json.loads(path.read_text())
    assert written[0]["sid"] == "NO1"
    assert written[0]["level"] == "INFO"
    assert f"Log file created: {path}" in capsys.readouterr().out


async def test_list_logs_writes_filtered_file(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(serverless, "choose_time_range", lambda now: (None, None))
    monkeypatch.setattr(serverless, "confirm", lambda message, default=False: False)
    monkeypatch.setattr(serverless, "multi_select", lambda message, options: [Level.ERROR])
    monkeypatch.setattr(serverless, "choose_action", lambda options, message="": serverless.WRITE_TO_FILE)

    resource = SimpleNamespace(
        logs=SimpleNamespace(
            list=AsyncMock(return_value=[make_log("NO1", Level.INFO), make_log("NO2", Level.ERROR)])
        )
    )
    environment = ServerlessEnvironment(sid="ZE1", unique_name="dev")
    await serverless.list_logs(resource, environment)

    resource.logs.list.assert_awaited_once_with(None, None, None)
    written = json.loads((tmp_path / "ZE1.json").read_text())
    assert [log["sid"] for log in written] == ["NO2"]
    assert "Found 1 logs." in capsys.readouterr().out


async def test_list_logs_nothing_found(monkeypatch, capsys):
    monkeypatch.setattr(serverless, "choose_time_range", lambda now: (None, None))
    monkeypatch.setattr(serverless, "confirm", lambda message, default=False: False)
    monkeypatch.setattr(serverless, "multi_select", lambda message, options: [Level.WARN])

    resource = SimpleNamespace(logs=SimpleNamespace(list=AsyncMock(return_value=[make_log("NO1", Level.INFO)])))
    await serverless.list_logs(resource, ServerlessEnvironment(sid="ZE1"))

    assert "No logs found." in capsys.readouterr().out


async def test_view_logs_latest_first(monkeypatch):
    shown = []

    def fake_choose_action(options, message="", render=str):
        if message == "Choose a Serverless Log:":
            shown.extend(render(option) for option in options)
        return None

    monkeypatch.setattr("twilly.cli.menus.choose_action", fake_choose_action)

    await serverless.view_logs(
        [make_log("NO1", Level.INFO, "2024-05-20T09:00:00Z"), make_log("NO2", Level.INFO, "2024-05-20T11:00:00Z")]
    )
    assert shown[0].startswith("(NO2)")
    assert shown[1].startswith("(NO1)")


async def test_create_service_defaults(monkeypatch, capsys):
    answers = iter(["my-service", ""])
    defaults = []
    monkeypatch.setattr(serverless, "prompt_text", lambda message, **kwargs: next(answers))
    monkeypatch.setattr(serverless, "confirm", lambda message, default=False: defaults.append(default) or default)
    created = ServerlessService(sid="ZS1", unique_name="my-service", friendly_name="my-service")
    services = SimpleNamespace(create=AsyncMock(return_value=created))
    twilio = SimpleNamespace(serverless=SimpleNamespace(services=services))

    assert await serverless.create_serverless_service(twilio) == created

    # Credentials are included and console editing is off unless changed
    assert defaults == [True, False]
    services.create.assert_awaited_once_with(
        "my-service", "my-service", include_credentials=True, ui_editable=False
    )
    assert "Serverless Service created: ZS1" in capsys.readouterr().out


async def test_create_service_cancelled(monkeypatch):
    monkeypatch.setattr(serverless, "prompt_text", lambda message, **kwargs: None)
    services = SimpleNamespace(create=AsyncMock())
    twilio = SimpleNamespace(serverless=SimpleNamespace(services=services))

    assert await serverless.create_serverless_service(twilio) is None
    services.create.assert_not_awaited()


async def test_no_services_still_offers_create(monkeypatch, capsys):
    created = ServerlessService(sid="ZS1", unique_name="fresh")
    offered = []

    def fake_choose_action(options, message="", render=str):
        offered.append([render(option) for option in options])
        return [serverless.CREATE_SERVICE, None][len(offered) - 1]

    manage = AsyncMock(return_value=False)
    monkeypatch.setattr(serverless, "choose_action", fake_choose_action)
    monkeypatch.setattr(serverless, "create_serverless_service", AsyncMock(return_value=created))
    monkeypatch.setattr(serverless, "manage_serverless_service", manage)
    twilio = SimpleNamespace(
        serverless=SimpleNamespace(
            services=SimpleNamespace(list=AsyncMock(return_value=[])),
            service=MagicMock(),
        )
    )

    await serverless.choose_serverless_resource(twilio)

    assert "No Serverless Services found." in capsys.readouterr().out
    assert offered[0] == [serverless.CREATE_SERVICE]
    assert offered[1] == ["(ZS1) fresh", serverless.CREATE_SERVICE]
    twilio.serverless.service.assert_called_once_with("ZS1")
    manage.assert_awaited_once_with(twilio.serverless.service.return_value, created)


async def test_deleted_service_leaves_the_list(monkeypatch):
    existing = ServerlessService(sid="ZS1", unique_name="old")
    offered = []

    def fake_choose_action(options, message="", render=str):
        offered.append(list(options))
        return [existing, None][len(offered) - 1]

    monkeypatch.setattr(serverless, "choose_action", fake_choose_action)
    monkeypatch.setattr(serverless, "manage_serverless_service", AsyncMock(return_value=True))
    twilio = SimpleNamespace(
        serverless=SimpleNamespace(
            services=SimpleNamespace(list=AsyncMock(return_value=[existing])),
            service=MagicMock(),
        )
    )

    await serverless.choose_serverless_resource(twilio)

    assert offered[1] == [serverless.CREATE_SERVICE]


async def test_no_environments_found(capsys):
    resource = SimpleNamespace(environments=SimpleNamespace(list=AsyncMock(return_value=[])))

    await serverless.choose_environment(resource)
    assert "No Serverless Environments found." in capsys.readouterr().out


async def test_choose_environment_manages_selection(monkeypatch, capsys):
    dev = ServerlessEnvironment(sid="ZE1", unique_name="dev")
    prod = ServerlessEnvironment(sid="ZE2", unique_name="prod")
    rendered = []

    def fake_choose_action(options, message="", render=str):
        rendered.append((message, [render(option) for option in options]))
        return [prod, None][len(rendered) - 1]

    manage = AsyncMock(return_value=True)
    monkeypatch.setattr("twilly.cli.menus.choose_action", fake_choose_action)
    monkeypatch.setattr(serverless, "manage_environment", manage)
    resource = SimpleNamespace(
        environments=SimpleNamespace(list=AsyncMock(return_value=[dev, prod])),
        environment=MagicMock(),
    )

    await serverless.choose_environment(resource)

    assert rendered[0] == ("Choose a Serverless Environment:", ["(ZE1) dev", "(ZE2) prod"])
    # The deleted environment is no longer offered
    assert rendered[1][1] == ["(ZE1) dev"]
    resource.environment.assert_called_once_with("ZE2")
    manage.assert_awaited_once_with(resource.environment.return_value, prod)
    assert "Found 2 Serverless Environments." in capsys.readouterr().out
