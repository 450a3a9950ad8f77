from datetime import date

import pytest
import typer

from conftest import ACCOUNT_SID, AUTH_TOKEN
from twilly.cli import prompts
from twilly.cli.prompts import (
    ANY,
    choose_action,
    choose_filter,
    confirm,
    multi_select,
    prompt_date,
    prompt_text,
    request_credentials,
    select,
    validate_sid,
)
from twilly.resources.conversations import State


@pytest.fixture
def answers(monkeypatch):
    """Feed answers to typer.prompt in order; records the questions asked."""
    queue = []
    asked = []

    def fake_prompt(text, **kwargs):
        asked.append((text, kwargs))
        answer = queue.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    monkeypatch.setattr(typer, "prompt", fake_prompt)
    fake_prompt.queue = queue
    fake_prompt.asked = asked
    return fake_prompt


def test_select_by_number_or_text(answers):
    answers.queue.extend(["2", "gamma"])
    assert select("Pick:", ["alpha", "beta", "gamma"]) == "beta"
    assert select("Pick:", ["alpha", "beta", "gamma"]) == "gamma"


def test_select_reasks_until_valid(answers, capsys):
    answers.queue.extend(["9", "nope", "1"])
    assert select("Pick:", ["alpha", "beta"]) == "alpha"
    assert "Enter a number between 1 and 2" in capsys.readouterr().out


def test_select_empty_cancels(answers):
    answers.queue.append("")
    assert select("Pick:", ["alpha"]) is None
    assert select("Pick:", []) is None


def test_choose_action_back_and_exit(answers):
    answers.queue.extend(["Back", "3"])
    assert choose_action(["List Details"]) is None
    with pytest.raises(typer.Exit) as exc:
        choose_action(["List Details"])
    assert exc.value.exit_code == 0


def test_choose_action_renders_objects(answers, capsys):
    answers.queue.append("1")
    choice = choose_action([State.CLOSED], render=lambda s: f"state {s.value}")
    assert choice is State.CLOSED
    output = capsys.readouterr().out
    assert "1) state closed" in output
    assert "2) Back" in output
    assert "3) Exit" in output


def test_choose_filter_any(answers):
    answers.queue.extend(["1", "Inactive"])
    assert choose_filter(list(State), "Filter by state?") is ANY
    assert choose_filter(list(State), "Filter by state?") is State.INACTIVE


def test_multi_select(answers):
    answers.queue.extend(["", "1,3", "0,7", "2"])
    assert multi_select("Levels:", ["a", "b", "c"]) == ["a", "b", "c"]
    assert multi_select("Levels:", ["a", "b", "c"]) == ["a", "c"]
    assert multi_select("Levels:", ["a", "b", "c"]) == ["b"]


def test_prompt_text_validation(answers, capsys):
    answers.queue.extend(["XX" + "1" * 32, "CH1", "CH" + "1" * 32])
    value = prompt_text("SID:", validate=validate_sid("CH"))
    assert value == "CH" + "1" * 32
    output = capsys.readouterr().out
    assert "SID must start with CH" in output
    assert "SID should be 34 characters in length" in output


def test_prompt_text_empty(answers):
    answers.queue.extend(["", "  "])
    assert prompt_text("Name:") is None
    assert prompt_text("Name:", allow_empty=True) == ""


def test_ctrl_c_exits_with_130(answers, capsys):
    answers.queue.append(typer.Abort())
    with pytest.raises(typer.Exit) as exc:
        prompt_text("Name:")
    assert exc.value.exit_code == 130
    assert prompts.INTERRUPTED_MESSAGE in capsys.readouterr().err


def test_confirm_ctrl_c(monkeypatch):
    def abort(*args, **kwargs):
        raise typer.Abort()

    monkeypatch.setattr(typer, "confirm", abort)
    with pytest.raises(typer.Exit) as exc:
        confirm("Sure?")
    assert exc.value.exit_code == 130


def test_prompt_date_range(answers, capsys):
    answers.queue.extend(["yesterday", "2023-12-31", "2024-02-01", "2024-01-15"])
    chosen = prompt_date("Start:", minimum=date(2024, 1, 1), maximum=date(2024, 1, 31))
    assert chosen == date(2024, 1, 15)
    output = capsys.readouterr().out
    assert "Enter a date as YYYY-MM-DD" in output
    assert "Date must be on or after 2024-01-01" in output
    assert "Date must be on or before 2024-01-31" in output


def test_request_credentials(answers):
    answers.queue.extend([ACCOUNT_SID, AUTH_TOKEN])
    config = request_credentials()
    assert config.account_sid == ACCOUNT_SID
    assert config.auth_token == AUTH_TOKEN
    # Token input is hidden
    assert answers.asked[1][1]["hide_input"] is True


def test_request_credentials_cancelled(answers):
    answers.queue.append("")
    assert request_credentials() is None
