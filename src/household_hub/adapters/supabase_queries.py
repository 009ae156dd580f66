"""Helpers for running Supabase queries."""

from datetime import datetime
from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from household_hub.errors import HouseholdError, TransportError

UNIQUE_VIOLATION = "23505"


class Executable(Protocol):
    """A PostgREST request builder ready to run."""

    def execute(self) -> Any:
        """Run the request and return the API response."""


def run(
    query: Executable,
    action: str,
    on_conflict: HouseholdError | None = None,
) -> list[dict[str, Any]]:
    """Execute a query and return its rows, translating storage failures.

    Unique violations are re-raised as ``on_conflict`` when given.
    """
    try:
        response = query.execute()
    except APIError as exc:
        if on_conflict is not None and exc.code == UNIQUE_VIOLATION:
            raise on_conflict from exc
        raise TransportError(f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"Failed to {action}: {exc}") from exc
    return list(response.data or [])


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp column."""
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
