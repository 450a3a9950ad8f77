"""Twilio account related functionality (2010-04-01 API)."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from ..core.models import LabelledEnum, TwilioModel

if TYPE_CHECKING:
    from ..core.client import Client

BASE_URL = "https://api.twilio.com/2010-04-01"


class Status(LabelledEnum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CLOSED = "closed"


class Account(TwilioModel):
    sid: str
    friendly_name: str = ""
    status: Status = Status.ACTIVE
    type: str = ""
    owner_account_sid: Optional[str] = None
    uri: Optional[str] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.sid} - {self.status.label}"


class Accounts:
    def __init__(self, client: "Client"):
        self.client = client

    async def get(self, sid: Optional[str] = None) -> Account:
        """Fetch an account, defaulting to the one the client authenticates as."""
        sid = sid or self.client.config.account_sid
        return await self.client.request("GET", f"{BASE_URL}/Accounts/{sid}.json", model=Account)

    async def list(
        self,
        friendly_name: Optional[str] = None,
        status: Optional[Status] = None,
    ) -> List[Account]:
        """
        List accounts matching the filters, eagerly paged.

        The requesting account is included when it matches.
        """
        params = {"page_size": 5, "friendly_name": friendly_name, "status": status}
        return await self.client.paginate(f"{BASE_URL}/Accounts.json", "accounts", Account, params)

    async def create(self, friendly_name: Optional[str] = None) -> Account:
        """Create a sub-account."""
        return await self.client.request(
            "POST", f"{BASE_URL}/Accounts.json", {"friendly_name": friendly_name}, Account
        )

    async def update(
        self,
        sid: str,
        friendly_name: Optional[str] = None,
        status: Optional[Status] = None,
    ) -> Account:
        return await self.client.request(
            "POST",
            f"{BASE_URL}/Accounts/{sid}.json",
            {"friendly_name": friendly_name, "status": status},
            Account,
        )
