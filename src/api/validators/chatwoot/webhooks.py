"""Modelos dos eventos de webhook do Chatwoot.

Campos desconhecidos são ignorados: o Chatwoot adiciona atributos entre
versões e isso não deve derrubar a ingestão.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from api.validators.chatwoot.base import WEBHOOK_VALIDATION_MESSAGE, validate_model

MAX_MESSAGE_CONTENT_LENGTH = 10000

ConversationStatus = Literal["open", "resolved", "pending", "snoozed"]
MessageType = Literal["incoming", "outgoing", "activity"]
ContentType = Literal["text", "image", "video", "audio", "file", "location", "fallback"]
SenderType = Literal["contact", "agent", "bot"]
Label = Annotated[str, Field(max_length=100)]


class _ChatwootModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Sender(_ChatwootModel):
    id: int
    name: str = Field(..., max_length=255)
    type: SenderType
    email: str | None = Field(None, max_length=255)
    avatar_url: str | None = None


class Contact(_ChatwootModel):
    id: int
    name: str = Field(..., max_length=255)
    email: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, max_length=50)
    identifier: str | None = None
    custom_attributes: dict[str, Any] = Field(default_factory=dict)


class Assignee(_ChatwootModel):
    id: int
    name: str | None = None
    email: str | None = None


class Team(_ChatwootModel):
    id: int
    name: str | None = None


class MessageCreatedEvent(_ChatwootModel):
    """Evento `message_created`."""

    event: Literal["message_created"]
    id: int
    conversation_id: int
    account_id: int
    content: str | None = Field(None, max_length=MAX_MESSAGE_CONTENT_LENGTH)
    message_type: MessageType
    content_type: ContentType = "text"
    created_at: str | int
    sender: Sender
    attachments: list[dict[str, Any]] = Field(default_factory=list)
    private: bool = False
    read: bool = False


class ConversationCreatedEvent(_ChatwootModel):
    """Evento `conversation_created`."""

    event: Literal["conversation_created"]
    id: int
    account_id: int
    inbox_id: int
    contact_id: int
    status: ConversationStatus
    created_at: str | int
    contact: Contact
    assignee: Assignee | None = None
    team: Team | None = None
    labels: list[Label] = Field(default_factory=list)
    custom_attributes: dict[str, Any] = Field(default_factory=dict)


class ConversationStatusChangedEvent(_ChatwootModel):
    """Evento `conversation_status_changed`."""

    event: Literal["conversation_status_changed"]
    id: int
    account_id: int
    status: ConversationStatus
    previous_status: ConversationStatus | None = None
    changed_at: str | int
    assignee: Assignee | None = None
    team: Team | None = None
    labels: list[Label] = Field(default_factory=list)


def validate_message_created(data: Any) -> dict[str, Any]:
    return validate_model(MessageCreatedEvent, data, WEBHOOK_VALIDATION_MESSAGE)


def validate_conversation_created(data: Any) -> dict[str, Any]:
    return validate_model(ConversationCreatedEvent, data, WEBHOOK_VALIDATION_MESSAGE)


def validate_conversation_status_changed(data: Any) -> dict[str, Any]:
    return validate_model(ConversationStatusChangedEvent, data, WEBHOOK_VALIDATION_MESSAGE)
