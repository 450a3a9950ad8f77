import base64
import json
from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from conftest import ACCOUNT_SID, AUTH_TOKEN, error_payload, form_data, json_response
from twilly.core.client import encode_params, encode_value, to_pascal_case
from twilly.core.exceptions import NetworkError, ParsingError, TwilioApiError
from twilly.core.logging import ApiCallLogger, strip_query
from twilly.resources.accounts import Account, Status


def test_pascal_case_keys():
    assert to_pascal_case("friendly_name") == "FriendlyName"
    assert to_pascal_case("page_size") == "PageSize"
    assert to_pascal_case("from") == "From"
    assert to_pascal_case("Timers.Inactive") == "Timers.Inactive"


def test_encode_values():
    assert encode_value(True) == "true"
    assert encode_value(False) == "false"
    assert encode_value(Status.SUSPENDED) == "suspended"
    assert encode_value(date(2024, 3, 9)) == "2024-03-09"
    plus_two = timezone(timedelta(hours=2))
    assert encode_value(datetime(2024, 3, 9, 12, 30, tzinfo=plus_two)) == "2024-03-09T10:30:00Z"
    assert encode_value({"a": 1}) == '{"a": 1}'
    assert encode_value(5) == "5"


def test_encode_params_drops_none():
    assert encode_params({"friendly_name": "Main", "status": None, "page_size": 5}) == {
        "FriendlyName": "Main",
        "PageSize": "5",
    }
    assert encode_params(None) == {}


async def test_get_sends_query_and_basic_auth(make_client):
    mock = make_client({"sid": ACCOUNT_SID, "status": "active"})
    await mock.client.request(
        "GET", "https://api.twilio.com/2010-04-01/Accounts.json", {"status": Status.ACTIVE}, Account
    )

    request = mock.requests[0]
    assert request.method == "GET"
    assert request.url.params["Status"] == "active"
    assert request.content == b""
    expected = base64.b64encode(f"{ACCOUNT_SID}:{AUTH_TOKEN}".encode()).decode()
    assert request.headers["Authorization"] == f"Basic {expected}"


async def test_post_sends_form_body(make_client):
    mock = make_client({"sid": ACCOUNT_SID, "friendly_name": "New", "status": "active"})
    account = await mock.client.request(
        "POST",
        "https://api.twilio.com/2010-04-01/Accounts.json",
        {"friendly_name": "New", "status": None},
        Account,
    )

    request = mock.requests[0]
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert form_data(request) == {"FriendlyName": "New"}
    assert not request.url.params
    assert account.friendly_name == "New"


async def test_error_payload_becomes_api_error(make_client):
    mock = make_client(lambda request: json_response(error_payload(), 404))
    with pytest.raises(TwilioApiError) as exc:
        await mock.client.request("GET", "https://conversations.twilio.com/v1/Conversations/CH1")

    error = exc.value
    assert error.code == 20404
    assert error.not_found
    assert str(error) == (
        "404 from Twilio. (20404) The requested resource was not found. "
        "For more info see: https://www.twilio.com/docs/errors/20404"
    )


async def test_unparseable_error_body(make_client):
    mock = make_client(lambda request: httpx.Response(500, text="<html>oops</html>"))
    with pytest.raises(ParsingError):
        await mock.client.request("GET", "https://sync.twilio.com/v1/Services")


async def test_unparseable_success_body(make_client):
    mock = make_client(lambda request: httpx.Response(200, text="not json"))
    with pytest.raises(ParsingError):
        await mock.client.request("GET", "https://sync.twilio.com/v1/Services")


async def test_body_not_matching_model(make_client):
    mock = make_client({"friendly_name": "missing sid"})
    with pytest.raises(ParsingError):
        await mock.client.request("GET", "https://api.twilio.com/2010-04-01/Accounts/AC1.json", model=Account)


async def test_transport_failure_becomes_network_error(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    mock = make_client(handler)
    with pytest.raises(NetworkError):
        await mock.client.request("GET", "https://sync.twilio.com/v1/Services")


async def test_delete_ignores_empty_body(make_client):
    mock = make_client(lambda request: httpx.Response(204))
    assert await mock.client.request_no_content("DELETE", "https://sync.twilio.com/v1/Services/IS1") is None
    assert mock.requests[0].method == "DELETE"


async def test_paginate_follows_meta_links(make_client):
    next_url = "https://sync.twilio.com/v1/Services?PageSize=1&Page=1&PageToken=PT1"
    mock = make_client(
        [
            {"services": [{"sid": "IS1"}], "meta": {"page": 0, "page_size": 1, "next_page_url": next_url}},
            {"services": [{"sid": "IS2"}], "meta": {"page": 1, "page_size": 1, "next_page_url": None}},
        ]
    )
    from twilly.resources.sync import SyncService

    services = await mock.client.paginate(
        "https://sync.twilio.com/v1/Services", "services", SyncService, {"page_size": 1}
    )

    assert [s.sid for s in services] == ["IS1", "IS2"]
    assert mock.requests[0].url.params["PageSize"] == "1"
    assert str(mock.requests[1].url) == next_url


async def test_paginate_follows_next_page_uri(make_client):
    mock = make_client(
        [
            {
                "accounts": [{"sid": "AC1", "status": "active"}],
                "next_page_uri": "/2010-04-01/Accounts.json?PageSize=1&Page=1&PageToken=PA1",
            },
            {"accounts": [{"sid": "AC2", "status": "closed"}], "next_page_uri": None},
        ]
    )
    accounts = await mock.client.paginate(
        "https://api.twilio.com/2010-04-01/Accounts.json", "accounts", Account, {"page_size": 1}
    )

    assert [(a.sid, a.status) for a in accounts] == [("AC1", Status.ACTIVE), ("AC2", Status.CLOSED)]
    assert str(mock.requests[1].url) == (
        "https://api.twilio.com/2010-04-01/Accounts.json?PageSize=1&Page=1&PageToken=PA1"
    )


async def test_paginate_missing_key(make_client):
    mock = make_client({"meta": {"next_page_url": None}})
    with pytest.raises(ParsingError):
        await mock.client.paginate("https://sync.twilio.com/v1/Services", "services", Account)


async def test_api_calls_are_logged_without_query_or_credentials(make_client, tmp_path):
    api_logger = ApiCallLogger(tmp_path)
    mock = make_client(
        lambda request: json_response(error_payload(), 404), api_logger=api_logger
    )
    with pytest.raises(TwilioApiError):
        await mock.client.request(
            "GET", "https://conversations.twilio.com/v1/ParticipantConversations", {"address": "+15555550100"}
        )

    log_file = api_logger.log_file_for(datetime.now())
    content = log_file.read_text()
    assert "+15555550100" not in content
    assert AUTH_TOKEN not in content
    entry = json.loads(content.splitlines()[0])
    assert entry["method"] == "GET"
    assert entry["url"] == "https://conversations.twilio.com/v1/ParticipantConversations"
    assert entry["status"] == 404
    assert "20404" in entry["error"]


def test_strip_query():
    assert strip_query("https://sync.twilio.com/v1/Services?PageSize=20") == "https://sync.twilio.com/v1/Services"


async def test_client_closes_only_its_own_http_client(config):
    from twilly.core.client import Client

    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    async with Client(config, http_client=http):
        pass
    assert not http.is_closed
    await http.aclose()

    async with Client(config) as owned:
        pass
    assert owned._http.is_closed
