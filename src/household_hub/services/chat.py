"""Household chat with change fan-out to subscribers."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from household_hub.domain.chat import ChangeKind, ChatEvent, ChatMessage
from household_hub.domain.members import Member
from household_hub.errors import NotAuthorError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ChatEventHandler = Callable[[ChatEvent], None]


class ChatRepository(Protocol):
    """Persistence interface for chat messages."""

    def list_messages(self) -> list[ChatMessage]:
        """Return all messages oldest first."""

    def get_message(self, message_id: UUID) -> ChatMessage | None:
        """Return a message by id, if present."""

    def create_message(
        self, author_id: UUID, text: str | None, image_ref: str | None
    ) -> ChatMessage:
        """Insert a message and return it."""

    def update_text(
        self, message_id: UUID, text: str, edited_at: datetime
    ) -> ChatMessage:
        """Replace a message's text and return the updated message."""

    def delete_message(self, message_id: UUID) -> None:
        """Delete a message."""


@dataclass
class ChatBroadcaster:
    """Deliver chat events to subscribers in the order they are published.

    Nothing is buffered: a subscriber only sees events published while it is
    registered.
    """

    _handlers: dict[int, ChatEventHandler] = field(default_factory=dict)
    _next_token: int = 0

    def subscribe(self, handler: ChatEventHandler) -> Callable[[], None]:
        """Register a handler and return a callable that removes it."""
        token = self._next_token
        self._next_token += 1
        self._handlers[token] = handler

        def unsubscribe() -> None:
            self._handlers.pop(token, None)

        return unsubscribe

    def publish(self, event: ChatEvent) -> None:
        """Invoke every registered handler with the event."""
        for handler in list(self._handlers.values()):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Chat subscriber failed",
                    extra={"message_id": str(event.message.id)},
                )

    @property
    def subscriber_count(self) -> int:
        """Return the number of registered handlers."""
        return len(self._handlers)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ChatService:
    """Post, edit and delete messages and fan the commits out.

    When ``publish_commits`` is False, events are expected to arrive from an
    external change feed wired to the same broadcaster.
    """

    repository: ChatRepository
    broadcaster: ChatBroadcaster = field(default_factory=ChatBroadcaster)
    publish_commits: bool = True
    now: Callable[[], datetime] = field(default=_utcnow)

    def history(self) -> list[ChatMessage]:
        """Return the full message history for resynchronisation."""
        return self.repository.list_messages()

    def subscribe(self, handler: ChatEventHandler) -> Callable[[], None]:
        """Register a handler for chat events."""
        return self.broadcaster.subscribe(handler)

    def post(
        self, author: Member, text: str | None = None, image_ref: str | None = None
    ) -> ChatMessage:
        """Post a message with text, an image, or both."""
        cleaned = text.strip() if text else ""
        if not cleaned and not image_ref:
            raise ValidationError("A message needs text or an image")
        message = self.repository.create_message(
            author.id, cleaned or None, image_ref or None
        )
        self._commit(ChangeKind.INSERT, message)
        return message

    def edit(self, message_id: UUID, author: Member, new_text: str) -> ChatMessage:
        """Replace the text of the author's own message."""
        cleaned = new_text.strip()
        if not cleaned:
            raise ValidationError("Edited text cannot be empty")
        self._require_own(message_id, author)
        message = self.repository.update_text(message_id, cleaned, self.now())
        self._commit(ChangeKind.UPDATE, message)
        return message

    def delete(self, message_id: UUID, author: Member) -> ChatMessage:
        """Delete the author's own message and return its last known state."""
        message = self._require_own(message_id, author)
        self.repository.delete_message(message_id)
        self._commit(ChangeKind.DELETE, message)
        return message

    def _require_own(self, message_id: UUID, author: Member) -> ChatMessage:
        message = self.repository.get_message(message_id)
        if message is None:
            raise NotFoundError(f"Message {message_id} not found")
        if message.author_id != author.id:
            raise NotAuthorError("Only the author can change this message")
        return message

    def _commit(self, kind: ChangeKind, message: ChatMessage) -> None:
        if self.publish_commits:
            self.broadcaster.publish(ChatEvent(kind=kind, message=message))
