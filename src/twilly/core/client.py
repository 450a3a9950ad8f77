"""
Asynchronous Twilio REST client.

Holds an account SID & auth token pair and dispatches authenticated requests.
GET parameters travel as a query string, every other method sends them as
x-www-form-urlencoded form data. Typed resource helpers hang off the client:

    async with Client(config) as twilio:
        accounts = await twilio.accounts.list(status=Status.ACTIVE)
        await twilio.conversations.delete("CH...")
"""

from __future__ import annotations

import json
import logging
import time
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from .config import TwilioConfig
from .exceptions import NetworkError, ParsingError, TwilioApiError
from .logging import ApiCallLogger
from .models import PageMeta

logger = logging.getLogger(__name__)

API_HOST = "https://api.twilio.com"

ModelT = TypeVar("ModelT", bound=BaseModel)


def to_pascal_case(key: str) -> str:
    """friendly_name -> FriendlyName. Keys already in Twilio form pass through."""
    if "_" not in key:
        return key[:1].upper() + key[1:]
    return "".join(part[:1].upper() + part[1:] for part in key.split("_") if part)


def encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def encode_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Encode parameters the way Twilio expects them. ``None`` values are dropped."""
    if not params:
        return {}
    return {
        to_pascal_case(key): encode_value(value)
        for key, value in params.items()
        if value is not None
    }


class Client:
    """The Twilio client used for interaction with Twilio's API."""

    def __init__(
        self,
        config: TwilioConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        api_logger: Optional[ApiCallLogger] = None,
    ):
        self.config = config
        self.api_logger = api_logger
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    # Resource accessors

    @property
    def accounts(self):
        from ..resources.accounts import Accounts
        return Accounts(self)

    @property
    def conversations(self):
        from ..resources.conversations import Conversations
        return Conversations(self)

    @property
    def sync(self):
        from ..resources.sync import Sync
        return Sync(self)

    @property
    def serverless(self):
        from ..resources.serverless import Serverless
        return Serverless(self)

    # Request dispatch

    async def _send(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        method = method.upper()
        encoded = encode_params(params)
        kwargs: Dict[str, Any] = {
            "auth": (self.config.account_sid, self.config.auth_token),
            "headers": dict(headers) if headers else None,
        }
        if method == "GET":
            kwargs["params"] = encoded or None
        elif encoded:
            kwargs["data"] = encoded

        started = time.perf_counter()
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug("%s %s failed after %.0fms: %s", method, url, elapsed_ms, e)
            await self._log_call(method, url, None, elapsed_ms, str(e))
            raise NetworkError(e) from e

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("%s %s -> %s (%.0fms)", method, url, response.status_code, elapsed_ms)
        await self._log_call(
            method,
            url,
            response.status_code,
            elapsed_ms,
            None if response.is_success else response.text[:500],
        )
        return response

    async def _log_call(self, method, url, status, elapsed_ms, error) -> None:
        if self.api_logger:
            await self.api_logger.log_call(method, url, status, elapsed_ms, error)

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            error = TwilioApiError.from_payload(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise ParsingError(e) from e
        raise error

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ParsingError(e) from e

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        model: Optional[Type[ModelT]] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> ModelT:
        """
        Dispatch a request and parse the response body into ``model``.

        Raises:
            NetworkError: Twilio could not be reached
            TwilioApiError: Twilio returned an error payload
            ParsingError: A body could not be parsed
        """
        response = await self._send(method, url, params, headers)
        self._raise_for_error(response)
        body = self._json(response)
        if model is None:
            return body
        try:
            return model.model_validate(body)
        except ValueError as e:
            raise ParsingError(e) from e

    async def request_no_content(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Dispatch a request ignoring any successful response body (deletes)."""
        response = await self._send(method, url, params, headers)
        self._raise_for_error(response)

    async def paginate(
        self,
        url: str,
        key: str,
        model: Type[ModelT],
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[ModelT]:
        """
        Eagerly page through a list endpoint and return every record.

        The first page is requested with ``params``; following pages use the
        next page link as-is. v1 APIs link via ``meta.next_page_url``, the
        2010-04-01 API via a host-relative ``next_page_uri``.
        """
        results: List[ModelT] = []
        next_url: Optional[str] = url
        page_params = params
        while next_url:
            response = await self._send("GET", next_url, page_params)
            self._raise_for_error(response)
            body = self._json(response)
            try:
                results.extend(model.model_validate(record) for record in body[key])
                next_url = self._next_page(body)
            except (ValueError, KeyError, TypeError) as e:
                raise ParsingError(e) from e
            page_params = None
        logger.debug("Fetched %d %s from %s", len(results), key, url)
        return results

    @staticmethod
    def _next_page(body: Dict[str, Any]) -> Optional[str]:
        if "meta" in body:
            return PageMeta.model_validate(body["meta"]).next_page_url
        next_page_uri = body.get("next_page_uri")
        if next_page_uri:
            return f"{API_HOST}{next_page_uri}"
        return None
