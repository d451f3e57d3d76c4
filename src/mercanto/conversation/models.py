"""Data models for the conversation.

Hides the message representation and its persisted JSON format:
an array of {role, content, isTyping?} records.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class MessageRole(str, Enum):
    """Who authored a message."""

    USER = "user"
    MODEL = "model"


class Message(BaseModel):
    """A single chat message.

    Messages are immutable. A typing placeholder is replaced by the final
    reply, never edited in place.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: MessageRole = Field(description="Author of the message")
    content: str = Field(description="Message text, possibly with a json-chart block")
    is_typing: bool = Field(
        default=False,
        alias="isTyping",
        description="True for the transient placeholder shown while a turn is in flight",
    )

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def model(cls, content: str) -> "Message":
        return cls(role=MessageRole.MODEL, content=content)

    @classmethod
    def placeholder(cls, hint: str = "") -> "Message":
        return cls(role=MessageRole.MODEL, content=hint, is_typing=True)


_CONVERSATION_ADAPTER = TypeAdapter(list[Message])


def serialize_conversation(messages: list[Message]) -> str:
    """Serialize a conversation snapshot to JSON.

    `isTyping` is only written for placeholders.
    """
    return _CONVERSATION_ADAPTER.dump_json(
        messages, by_alias=True, exclude_defaults=True
    ).decode("utf-8")


def deserialize_conversation(data: str) -> list[Message]:
    """Parse a conversation snapshot.

    Raises:
        ValueError: If data is not JSON or records have the wrong shape
    """
    return _CONVERSATION_ADAPTER.validate_json(data)
