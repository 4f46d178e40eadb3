"""Data models for chats and the store's change notices.

Chats and messages are immutable values; the store replaces a whole Chat
whenever anything about it changes.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CHAT_TITLE = "New Chat"


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One turn in a conversation."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    role: Role
    content: str
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_user(self) -> bool:
        return self.role == Role.USER

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)


class Chat(BaseModel):
    """A titled, ordered conversation."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    title: str = DEFAULT_CHAT_TITLE
    messages: tuple[Message, ...] = ()
    name_suggestion: str | None = Field(
        default=None,
        description="Last title proposed by the naming assistant"
    )
    error: str | None = Field(
        default=None,
        description="Why the last send failed, cleared by the next send"
    )

    def with_message(self, message: Message) -> "Chat":
        """Return a copy with ``message`` appended.

        Raises:
            ValueError: If a message with the same id is already present
        """
        if any(existing.id == message.id for existing in self.messages):
            raise ValueError(f"Message {message.id} already in chat {self.id}")
        return self.model_copy(update={"messages": (*self.messages, message)})


class ChangeKind(str, Enum):
    """What a store mutation touched."""

    CHAT_CREATED = "chat_created"
    CHAT_UPDATED = "chat_updated"
    CHAT_DELETED = "chat_deleted"
    SELECTION_CHANGED = "selection_changed"
    MODELS_CHANGED = "models_changed"
    MODEL_SELECTED = "model_selected"
    LOADING_CHANGED = "loading_changed"


@dataclass(frozen=True)
class ChangeNotice:
    """Emitted to subscribers after a mutation has been fully applied."""

    kind: ChangeKind
    chat_id: UUID | None = None
