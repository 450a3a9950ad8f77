"""Shared fixtures: a valid config and Twilio clients backed by httpx.MockTransport."""

import sys
from pathlib import Path
from types import SimpleNamespace
from urllib.parse import parse_qs

import httpx
import pytest

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from twilly.core.client import Client
from twilly.core.config import TwilioConfig

ACCOUNT_SID = "AC" + "a" * 32
AUTH_TOKEN = "b" * 32


def json_response(payload, status_code=200):
    return httpx.Response(status_code, json=payload)


def form_data(request: httpx.Request) -> dict:
    """Decode an x-www-form-urlencoded body into a flat dict."""
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def error_payload(status=404, code=20404, message="The requested resource was not found"):
    return {
        "code": code,
        "message": message,
        "more_info": f"https://www.twilio.com/docs/errors/{code}",
        "status": status,
    }


@pytest.fixture
def config() -> TwilioConfig:
    return TwilioConfig.build(ACCOUNT_SID, AUTH_TOKEN)


@pytest.fixture
async def make_client(config):
    """
    Build a Client whose HTTP calls go to ``handler``.

    Returns a namespace with the client and the list of requests it sent.
    ``handler`` may be a callable, a single payload dict or a list of
    payloads answered in order.
    """
    http_clients = []

    def _make(handler, **kwargs):
        requests = []
        if isinstance(handler, list):
            responses = iter(handler)
            respond = lambda request: json_response(next(responses))
        elif isinstance(handler, dict):
            respond = lambda request: json_response(handler)
        else:
            respond = handler

        def _handle(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return respond(request)

        http = httpx.AsyncClient(transport=httpx.MockTransport(_handle))
        http_clients.append(http)
        return SimpleNamespace(client=Client(config, http_client=http, **kwargs), requests=requests)

    yield _make

    for http in http_clients:
        await http.aclose()


@pytest.fixture
def config_dir(tmp_path, monkeypatch) -> Path:
    """An isolated config directory; credentials from the environment are cleared."""
    monkeypatch.delenv("TWILIO_ACCOUNT_SID", raising=False)
    monkeypatch.delenv("TWILIO_AUTH_TOKEN", raising=False)
    monkeypatch.setenv("TWILLY_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
    return tmp_path / "config"