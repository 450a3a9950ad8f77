"""
Twilio Sync: services, documents, lists, maps and their items.

Navigation mirrors Twilio's URL structure:

    await twilio.sync.service("IS...").list("ES...").item(3).get()
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union
from urllib.parse import quote

from ..core.exceptions import ValidationError
from ..core.models import LabelledEnum, TwilioModel

if TYPE_CHECKING:
    from ..core.client import Client

BASE_URL = "https://sync.twilio.com/v1"

MIN_DEBOUNCING_WINDOW_MS = 1000
MAX_DEBOUNCING_WINDOW_MS = 30000


class Order(LabelledEnum):
    ASC = "asc"
    DESC = "desc"


class Bounds(LabelledEnum):
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class SyncService(TwilioModel):
    sid: str
    unique_name: Optional[str] = None
    account_sid: Optional[str] = None
    friendly_name: Optional[str] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None
    url: Optional[str] = None
    webhook_url: Optional[str] = None
    webhooks_from_rest_enabled: bool = False
    reachability_webhooks_enabled: bool = False
    acl_enabled: bool = False
    reachability_debouncing_enabled: bool = False
    reachability_debouncing_window: int = 5000
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        name = self.friendly_name or self.unique_name
        return f"{self.sid} - {name}" if name else self.sid


class SyncServiceParams(TwilioModel):
    """Create/update arguments for a Sync Service."""
    friendly_name: Optional[str] = None
    webhook_url: Optional[str] = None
    reachability_webhooks_enabled: Optional[bool] = None
    acl_enabled: Optional[bool] = None
    reachability_debouncing_enabled: Optional[bool] = None
    reachability_debouncing_window: Optional[int] = None
    webhooks_from_rest_enabled: Optional[bool] = None


def validate_debouncing_window(window: Optional[int]) -> None:
    if window is None:
        return
    if window < MIN_DEBOUNCING_WINDOW_MS:
        raise ValidationError("Reachability debouncing window must be greater than 1000 milliseconds")
    if window > MAX_DEBOUNCING_WINDOW_MS:
        raise ValidationError("Reachability debouncing window must be less than 30,000 milliseconds")


class _SyncObject(TwilioModel):
    account_sid: Optional[str] = None
    service_sid: Optional[str] = None
    url: Optional[str] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None
    date_expires: Optional[str] = None
    created_by: Optional[str] = None
    revision: Optional[str] = None


class SyncDocument(_SyncObject):
    sid: str
    unique_name: Optional[str] = None
    data: Any = None
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        return f"{self.sid} - {self.unique_name}" if self.unique_name else self.sid


class SyncList(_SyncObject):
    sid: str
    unique_name: Optional[str] = None
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        return f"{self.sid} - {self.unique_name}" if self.unique_name else self.sid


class SyncMap(_SyncObject):
    sid: str
    unique_name: Optional[str] = None
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        return f"{self.sid} - {self.unique_name}" if self.unique_name else self.sid


class SyncListItem(_SyncObject):
    index: int
    list_sid: Optional[str] = None
    data: Any = None

    def __str__(self) -> str:
        return f"Item {self.index}"


class SyncMapItem(_SyncObject):
    key: str
    map_sid: Optional[str] = None
    data: Any = None

    def __str__(self) -> str:
        return f"Item {self.key}"


def _if_match_header(if_match: Optional[str]) -> Optional[Dict[str, str]]:
    return {"If-Match": if_match} if if_match else None


def _encode_data(data: Any) -> Optional[str]:
    return None if data is None else json.dumps(data)


def _item_list_params(order, from_, bounds) -> Dict[str, Any]:
    return {"page_size": 50, "order": order, "from": from_, "bounds": bounds}


# Services


class Services:
    def __init__(self, client: "Client"):
        self.client = client

    async def create(self, params: Optional[SyncServiceParams] = None) -> SyncService:
        params = params or SyncServiceParams()
        validate_debouncing_window(params.reachability_debouncing_window)
        return await self.client.request(
            "POST", f"{BASE_URL}/Services", params.model_dump(), SyncService
        )

    async def list(self) -> List[SyncService]:
        return await self.client.paginate(
            f"{BASE_URL}/Services", "services", SyncService, {"page_size": 20}
        )


class Service:
    def __init__(self, client: "Client", sid: str):
        self.client = client
        self.sid = sid
        self.url = f"{BASE_URL}/Services/{sid}"

    async def get(self) -> SyncService:
        return await self.client.request("GET", self.url, model=SyncService)

    async def update(self, params: SyncServiceParams) -> SyncService:
        validate_debouncing_window(params.reachability_debouncing_window)
        return await self.client.request("POST", self.url, params.model_dump(), SyncService)

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)

    @property
    def documents(self) -> "Documents":
        return Documents(self.client, self.url)

    def document(self, sid: str) -> "Document":
        return Document(self.client, f"{self.url}/Documents/{quote(sid, safe='')}")

    @property
    def lists(self) -> "Lists":
        return Lists(self.client, self.url)

    def list(self, sid: str) -> "SyncListResource":
        return SyncListResource(self.client, f"{self.url}/Lists/{sid}")

    @property
    def maps(self) -> "Maps":
        return Maps(self.client, self.url)

    def map(self, sid: str) -> "SyncMapResource":
        return SyncMapResource(self.client, f"{self.url}/Maps/{sid}")


class Sync:
    def __init__(self, client: "Client"):
        self.client = client

    @property
    def services(self) -> Services:
        return Services(self.client)

    def service(self, sid: str) -> Service:
        return Service(self.client, sid)


# Documents


class Documents:
    def __init__(self, client: "Client", service_url: str):
        self.client = client
        self.url = f"{service_url}/Documents"

    async def create(
        self,
        unique_name: Optional[str] = None,
        data: Any = None,
        ttl: Optional[int] = None,
    ) -> SyncDocument:
        params = {"unique_name": unique_name, "data": _encode_data(data), "ttl": ttl}
        return await self.client.request("POST", self.url, params, SyncDocument)

    async def list(self) -> List[SyncDocument]:
        return await self.client.paginate(self.url, "documents", SyncDocument, {"page_size": 50})


class Document:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def get(self) -> SyncDocument:
        return await self.client.request("GET", self.url, model=SyncDocument)

    async def update(
        self,
        data: Any,
        ttl: Optional[int] = None,
        if_match: Optional[str] = None,
    ) -> SyncDocument:
        return await self.client.request(
            "POST",
            self.url,
            {"data": _encode_data(data), "ttl": ttl},
            SyncDocument,
            headers=_if_match_header(if_match),
        )

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)


# Lists


class Lists:
    def __init__(self, client: "Client", service_url: str):
        self.client = client
        self.url = f"{service_url}/Lists"

    async def create(self, unique_name: Optional[str] = None, ttl: Optional[int] = None) -> SyncList:
        return await self.client.request(
            "POST", self.url, {"unique_name": unique_name, "ttl": ttl}, SyncList
        )

    async def list(self) -> List[SyncList]:
        return await self.client.paginate(self.url, "lists", SyncList, {"page_size": 50})


class SyncListResource:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def get(self) -> SyncList:
        return await self.client.request("GET", self.url, model=SyncList)

    async def update(self, ttl: Optional[int]) -> SyncList:
        return await self.client.request("POST", self.url, {"ttl": ttl}, SyncList)

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)

    @property
    def items(self) -> "ListItems":
        return ListItems(self.client, f"{self.url}/Items")

    def item(self, index: int) -> "ListItem":
        return ListItem(self.client, f"{self.url}/Items/{index}")


class ListItems:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def create(
        self,
        data: Any,
        ttl: Optional[int] = None,
        collection_ttl: Optional[int] = None,
    ) -> SyncListItem:
        params = {"data": _encode_data(data), "ttl": ttl, "collection_ttl": collection_ttl}
        return await self.client.request("POST", self.url, params, SyncListItem)

    async def list(
        self,
        order: Optional[Order] = None,
        from_: Optional[Union[int, str]] = None,
        bounds: Optional[Bounds] = None,
    ) -> List[SyncListItem]:
        return await self.client.paginate(
            self.url, "items", SyncListItem, _item_list_params(order, from_, bounds)
        )


class ListItem:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def get(self) -> SyncListItem:
        return await self.client.request("GET", self.url, model=SyncListItem)

    async def update(
        self,
        data: Any = None,
        ttl: Optional[int] = None,
        collection_ttl: Optional[int] = None,
        if_match: Optional[str] = None,
    ) -> SyncListItem:
        params = {"data": _encode_data(data), "ttl": ttl, "collection_ttl": collection_ttl}
        return await self.client.request(
            "POST", self.url, params, SyncListItem, headers=_if_match_header(if_match)
        )

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)


# Maps


class Maps:
    def __init__(self, client: "Client", service_url: str):
        self.client = client
        self.url = f"{service_url}/Maps"

    async def create(self, unique_name: Optional[str] = None, ttl: Optional[int] = None) -> SyncMap:
        return await self.client.request(
            "POST", self.url, {"unique_name": unique_name, "ttl": ttl}, SyncMap
        )

    async def list(self) -> List[SyncMap]:
        return await self.client.paginate(self.url, "maps", SyncMap, {"page_size": 20})


class SyncMapResource:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def get(self) -> SyncMap:
        return await self.client.request("GET", self.url, model=SyncMap)

    async def update(self, ttl: Optional[int]) -> SyncMap:
        return await self.client.request("POST", self.url, {"ttl": ttl}, SyncMap)

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)

    @property
    def items(self) -> "MapItems":
        return MapItems(self.client, f"{self.url}/Items")

    def item(self, key: str) -> "MapItem":
        return MapItem(self.client, f"{self.url}/Items/{quote(key, safe='')}")


class MapItems:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def create(
        self,
        key: str,
        data: Any,
        ttl: Optional[int] = None,
        collection_ttl: Optional[int] = None,
    ) -> SyncMapItem:
        params = {
            "key": key,
            "data": _encode_data(data),
            "ttl": ttl,
            "collection_ttl": collection_ttl,
        }
        return await self.client.request("POST", self.url, params, SyncMapItem)

    async def list(
        self,
        order: Optional[Order] = None,
        from_: Optional[str] = None,
        bounds: Optional[Bounds] = None,
    ) -> List[SyncMapItem]:
        return await self.client.paginate(
            self.url, "items", SyncMapItem, _item_list_params(order, from_, bounds)
        )


class MapItem:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def get(self) -> SyncMapItem:
        return await self.client.request("GET", self.url, model=SyncMapItem)

    async def update(
        self,
        data: Any = None,
        ttl: Optional[int] = None,
        collection_ttl: Optional[int] = None,
        if_match: Optional[str] = None,
    ) -> SyncMapItem:
        params = {"data": _encode_data(data), "ttl": ttl, "collection_ttl": collection_ttl}
        return await self.client.request(
            "POST", self.url, params, SyncMapItem, headers=_if_match_header(if_match)
        )

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)
