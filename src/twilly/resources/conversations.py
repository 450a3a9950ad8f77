"""Twilio Conversations and Participant Conversations."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..core.models import LabelledEnum, TwilioModel

if TYPE_CHECKING:
    from ..core.client import Client

BASE_URL = "https://conversations.twilio.com/v1"


class State(LabelledEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    CLOSED = "closed"


class Timers(TwilioModel):
    date_inactive: Optional[str] = None
    date_closed: Optional[str] = None


class Conversation(TwilioModel):
    sid: str
    account_sid: Optional[str] = None
    chat_service_sid: Optional[str] = None
    messaging_service_sid: Optional[str] = None
    unique_name: Optional[str] = None
    friendly_name: Optional[str] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None
    state: State = State.ACTIVE
    url: Optional[str] = None
    attributes: Optional[str] = None
    timers: Timers = Timers()
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        return f"{self.sid} - {self.state.label}"


class ConversationUpdate(TwilioModel):
    """Fields to change on a conversation; unset fields are left untouched."""
    unique_name: Optional[str] = None
    friendly_name: Optional[str] = None
    state: Optional[State] = None
    attributes: Optional[str] = None
    # ISO 8601 durations, e.g. PT10M
    date_inactive: Optional[str] = None
    date_closed: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        return {
            "unique_name": self.unique_name,
            "friendly_name": self.friendly_name,
            "state": self.state,
            "attributes": self.attributes,
            "Timers.Inactive": self.date_inactive,
            "Timers.Closed": self.date_closed,
        }


class ParticipantMessagingBinding(TwilioModel):
    address: Optional[str] = None
    proxy_address: Optional[str] = None
    type: Optional[str] = None
    level: Optional[str] = None
    name: Optional[str] = None
    projected_address: Optional[str] = None


class ParticipantConversation(TwilioModel):
    account_sid: Optional[str] = None
    chat_service_sid: Optional[str] = None
    participant_sid: Optional[str] = None
    participant_user_sid: Optional[str] = None
    participant_identity: Optional[str] = None
    participant_messaging_binding: Optional[ParticipantMessagingBinding] = None
    conversation_sid: str
    conversation_unique_name: Optional[str] = None
    conversation_friendly_name: Optional[str] = None
    conversation_attributes: Optional[str] = None
    conversation_date_created: Optional[str] = None
    conversation_date_updated: Optional[str] = None
    conversation_created_by: Optional[str] = None
    conversation_state: State = State.ACTIVE
    conversation_timers: Timers = Timers()
    links: Dict[str, Any] = {}

    def __str__(self) -> str:
        return f"{self.conversation_sid} - {self.conversation_state.label}"


class ParticipantConversations:
    def __init__(self, client: "Client"):
        self.client = client

    async def list(
        self,
        identity: Optional[str] = None,
        address: Optional[str] = None,
    ) -> List[ParticipantConversation]:
        """
        List the conversations a participant is part of, eagerly paged.

        The endpoint cannot filter by state; callers filter the result.
        """
        return await self.client.paginate(
            f"{BASE_URL}/ParticipantConversations",
            "conversations",
            ParticipantConversation,
            {"identity": identity, "address": address},
        )


class Conversations:
    def __init__(self, client: "Client"):
        self.client = client

    async def get(self, sid: str) -> Conversation:
        """Fetch a conversation by SID or unique name."""
        return await self.client.request("GET", f"{BASE_URL}/Conversations/{sid}", model=Conversation)

    async def list(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        state: Optional[State] = None,
    ) -> List[Conversation]:
        params = {"start_date": start_date, "end_date": end_date, "state": state}
        return await self.client.paginate(
            f"{BASE_URL}/Conversations", "conversations", Conversation, params
        )

    async def update(self, sid: str, update: ConversationUpdate) -> Conversation:
        return await self.client.request(
            "POST", f"{BASE_URL}/Conversations/{sid}", update.to_params(), Conversation
        )

    async def delete(self, sid: str) -> None:
        await self.client.request_no_content("DELETE", f"{BASE_URL}/Conversations/{sid}")

    @property
    def participant_conversations(self) -> ParticipantConversations:
        return ParticipantConversations(self.client)
