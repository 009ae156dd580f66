"""Domain models for the household chat."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class ChangeKind(Enum):
    """Row change carried by a chat event."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChatMessage:
    """A chat message with text, an image, or both."""

    id: UUID
    author_id: UUID
    text: str | None
    image_ref: str | None
    created_at: datetime
    edited_at: datetime | None = None

    @property
    def edited(self) -> bool:
        """Return True when the text was changed after posting."""
        return self.edited_at is not None


@dataclass(frozen=True)
class ChatEvent:
    """A committed change to a chat message.

    For deletions the message carries its last known field values.
    """

    kind: ChangeKind
    message: ChatMessage
