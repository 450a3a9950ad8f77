"""Twilio Serverless: services, environments and environment logs."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..core.models import LabelledEnum, TwilioModel

if TYPE_CHECKING:
    from ..core.client import Client

BASE_URL = "https://serverless.twilio.com/v1"


class Level(LabelledEnum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class ServerlessService(TwilioModel):
    sid: str
    account_sid: Optional[str] = None
    unique_name: str = ""
    friendly_name: str = ""
    include_credentials: bool = True
    ui_editable: bool = False
    domain_base: Optional[str] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None
    url: Optional[str] = None
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        return f"{self.sid} - {self.friendly_name or self.unique_name}"


class ServerlessEnvironment(TwilioModel):
    sid: str
    account_sid: Optional[str] = None
    service_sid: Optional[str] = None
    build_sid: Optional[str] = None
    unique_name: str = ""
    domain_suffix: Optional[str] = None
    domain_name: Optional[str] = None
    url: Optional[str] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        return f"{self.sid} - {self.unique_name}"


class ServerlessLog(TwilioModel):
    sid: str
    account_sid: Optional[str] = None
    service_sid: Optional[str] = None
    environment_sid: Optional[str] = None
    build_sid: Optional[str] = None
    deployment_sid: Optional[str] = None
    function_sid: Optional[str] = None
    request_sid: Optional[str] = None
    level: Level = Level.INFO
    message: str = ""
    date_created: Optional[str] = None
    url: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.date_created} [{self.level.value}] {self.message}"


class Services:
    def __init__(self, client: "Client"):
        self.client = client

    async def create(
        self,
        unique_name: str,
        friendly_name: str,
        include_credentials: Optional[bool] = None,
        ui_editable: Optional[bool] = None,
    ) -> ServerlessService:
        params = {
            "unique_name": unique_name,
            "friendly_name": friendly_name,
            "include_credentials": include_credentials,
            "ui_editable": ui_editable,
        }
        return await self.client.request("POST", f"{BASE_URL}/Services", params, ServerlessService)

    async def list(self) -> List[ServerlessService]:
        return await self.client.paginate(
            f"{BASE_URL}/Services", "services", ServerlessService, {"page_size": 20}
        )


class Service:
    def __init__(self, client: "Client", sid: str):
        self.client = client
        self.sid = sid
        self.url = f"{BASE_URL}/Services/{sid}"

    async def get(self) -> ServerlessService:
        return await self.client.request("GET", self.url, model=ServerlessService)

    async def update(
        self,
        friendly_name: Optional[str] = None,
        include_credentials: Optional[bool] = None,
        ui_editable: Optional[bool] = None,
    ) -> ServerlessService:
        params = {
            "friendly_name": friendly_name,
            "include_credentials": include_credentials,
            "ui_editable": ui_editable,
        }
        return await self.client.request("POST", self.url, params, ServerlessService)

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)

    @property
    def environments(self) -> "Environments":
        return Environments(self.client, self.url)

    def environment(self, sid: str) -> "Environment":
        return Environment(self.client, f"{self.url}/Environments/{sid}")


class Serverless:
    def __init__(self, client: "Client"):
        self.client = client

    @property
    def services(self) -> Services:
        return Services(self.client)

    def service(self, sid: str) -> Service:
        return Service(self.client, sid)


class Environments:
    def __init__(self, client: "Client", service_url: str):
        self.client = client
        self.url = f"{service_url}/Environments"

    async def create(self, unique_name: str, domain_suffix: Optional[str] = None) -> ServerlessEnvironment:
        return await self.client.request(
            "POST",
            self.url,
            {"unique_name": unique_name, "domain_suffix": domain_suffix},
            ServerlessEnvironment,
        )

    async def list(self) -> List[ServerlessEnvironment]:
        return await self.client.paginate(
            self.url, "environments", ServerlessEnvironment, {"page_size": 50}
        )


class Environment:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def get(self) -> ServerlessEnvironment:
        return await self.client.request("GET", self.url, model=ServerlessEnvironment)

    async def delete(self) -> None:
        await self.client.request_no_content("DELETE", self.url)

    @property
    def logs(self) -> "Logs":
        return Logs(self.client, f"{self.url}/Logs")

    def log(self, sid: str) -> "Log":
        return Log(self.client, f"{self.url}/Logs/{sid}")


class Logs:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def list(
        self,
        function_sid: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[ServerlessLog]:
        """
        List the logs of an environment, eagerly paged.

        Without ``start_date`` Twilio returns the last 24 hours; without
        ``end_date`` it returns up to now.
        """
        params = {
            "page_size": 500,
            "function_sid": function_sid,
            "start_date": start_date,
            "end_date": end_date,
        }
        return await self.client.paginate(self.url, "logs", ServerlessLog, params)


class Log:
    def __init__(self, client: "Client", url: str):
        self.client = client
        self.url = url

    async def get(self) -> ServerlessLog:
        return await self.client.request("GET", self.url, model=ServerlessLog)
