"""Typed helpers for the Twilio resources Twilly covers."""

from .accounts import Account, Accounts, Status
from .conversations import (
    Conversation,
    ConversationUpdate,
    Conversations,
    ParticipantConversation,
    State,
)
from .serverless import Level, ServerlessEnvironment, ServerlessLog, ServerlessService
from .sync import Bounds, Order, SyncDocument, SyncList, SyncListItem, SyncMap, SyncMapItem, SyncService

__all__ = [
    "Account",
    "Accounts",
    "Status",
    "Conversation",
    "ConversationUpdate",
    "Conversations",
    "ParticipantConversation",
    "State",
    "Level",
    "ServerlessEnvironment",
    "ServerlessLog",
    "ServerlessService",
    "Bounds",
    "Order",
    "SyncDocument",
    "SyncList",
    "SyncListItem",
    "SyncMap",
    "SyncMapItem",
    "SyncService",
]
