"""Forward Supabase Realtime changes on chat_messages to the chat broadcaster."""

import logging
from dataclasses import dataclass
from typing import Any

from supabase import AsyncClient, acreate_client

from household_hub.adapters.supabase_chat_repository import parse_message_row
from household_hub.domain.chat import ChangeKind, ChatEvent
from household_hub.services.chat import ChatBroadcaster

logger = logging.getLogger(__name__)

_TABLE = "chat_messages"


def parse_change(payload: dict[str, Any]) -> ChatEvent | None:
    """Translate a postgres_changes payload into a chat event.

    Deletes carry the old record, which holds the full row only when the table
    uses replica identity full.
    """
    data = payload.get("data", payload)
    raw_kind = data.get("type") or data.get("eventType")
    try:
        kind = ChangeKind(str(raw_kind).upper())
    except ValueError:
        return None
    row = data.get("old_record") if kind is ChangeKind.DELETE else data.get("record")
    if not row:
        return None
    try:
        message = parse_message_row(row)
    except (KeyError, ValueError):
        logger.warning("Ignoring malformed chat change", extra={"kind": kind.value})
        return None
    return ChatEvent(kind=kind, message=message)


@dataclass
class SupabaseRealtimeChatFeed:
    """Realtime subscription that feeds committed chat rows to subscribers."""

    supabase_url: str
    supabase_key: str
    broadcaster: ChatBroadcaster
    _client: AsyncClient | None = None
    _channel: Any = None

    async def start(self) -> None:
        """Open the realtime channel for chat_messages."""
        client = await acreate_client(self.supabase_url, self.supabase_key)
        channel = client.channel(_TABLE)
        channel.on_postgres_changes(
            "*", schema="public", table=_TABLE, callback=self.handle_change
        )
        await channel.subscribe()
        self._client = client
        self._channel = channel
        logger.info("Subscribed to realtime changes on %s", _TABLE)

    def handle_change(self, payload: dict[str, Any]) -> None:
        """Publish a realtime payload as a chat event."""
        event = parse_change(payload)
        if event is not None:
            self.broadcaster.publish(event)

    async def close(self) -> None:
        """Remove the realtime channel."""
        if self._client is not None and self._channel is not None:
            await self._client.remove_channel(self._channel)
        self._client = None
        self._channel = None
