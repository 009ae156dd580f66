"""Supabase-backed chat message repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from household_hub.adapters.supabase_queries import parse_timestamp, run
from household_hub.domain.chat import ChatMessage
from household_hub.errors import NotFoundError, TransportError
from household_hub.services.chat import ChatRepository

_COLUMNS = "id, author_id, text, image_ref, created_at, edited_at"


@dataclass
class SupabaseChatRepository(ChatRepository):
    """Supabase implementation for the chat_messages table."""

    client: Client

    def list_messages(self) -> list[ChatMessage]:
        """Return every message oldest first."""
        rows = run(
            self.client.table("chat_messages")
            .select(_COLUMNS)
            .order("created_at", desc=False),
            "list chat messages",
        )
        return [parse_message_row(row) for row in rows]

    def get_message(self, message_id: UUID) -> ChatMessage | None:
        """Return a message by id, if present."""
        rows = run(
            self.client.table("chat_messages")
            .select(_COLUMNS)
            .eq("id", str(message_id))
            .limit(1),
            "load chat message",
        )
        if not rows:
            return None
        return parse_message_row(rows[0])

    def create_message(
        self, author_id: UUID, text: str | None, image_ref: str | None
    ) -> ChatMessage:
        """Insert a message row and return it."""
        rows = run(
            self.client.table("chat_messages").insert(
                {"author_id": str(author_id), "text": text, "image_ref": image_ref}
            ),
            "send chat message",
        )
        if not rows:
            raise TransportError("Failed to send chat message")
        return parse_message_row(rows[0])

    def update_text(
        self, message_id: UUID, text: str, edited_at: datetime
    ) -> ChatMessage:
        """Replace the message text and stamp the edit time."""
        rows = run(
            self.client.table("chat_messages")
            .update({"text": text, "edited_at": edited_at.isoformat()})
            .eq("id", str(message_id)),
            "edit chat message",
        )
        if not rows:
            raise NotFoundError(f"Message {message_id} not found")
        return parse_message_row(rows[0])

    def delete_message(self, message_id: UUID) -> None:
        """Delete a message row."""
        run(
            self.client.table("chat_messages").delete().eq("id", str(message_id)),
            "delete chat message",
        )


def parse_message_row(row: dict[str, object]) -> ChatMessage:
    """Parse a chat_messages row into a domain model."""
    text = row.get("text")
    image_ref = row.get("image_ref")
    return ChatMessage(
        id=UUID(str(row["id"])),
        author_id=UUID(str(row["author_id"])),
        text=str(text) if text else None,
        image_ref=str(image_ref) if image_ref else None,
        created_at=parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
        edited_at=parse_timestamp(row.get("edited_at")),
    )
