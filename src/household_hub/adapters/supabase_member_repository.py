"""Supabase-backed member repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from household_hub.adapters.supabase_queries import parse_timestamp, run
from household_hub.domain.members import Member, Role
from household_hub.errors import RoleTakenError
from household_hub.services.identity import MemberRepository

_COLUMNS = "id, external_identity, role_name, created_at"


@dataclass
class SupabaseMemberRepository(MemberRepository):
    """Supabase implementation for member bindings."""

    client: Client

    def get_by_external_id(self, external_id: str) -> Member | None:
        """Return the member bound to an external identity, if present."""
        rows = run(
            self.client.table("members")
            .select(_COLUMNS)
            .eq("external_identity", external_id)
            .limit(1),
            "load member",
        )
        if rows:
            return _parse_member(rows[0])
        return None

    def list_members(self) -> list[Member]:
        """Return every role row, bound or not."""
        rows = run(self.client.table("members").select(_COLUMNS), "list members")
        return [_parse_member(row) for row in rows]

    def bind_role(self, external_id: str, role: Role) -> Member:
        """Set the identity on the role row only while the row is unbound."""
        taken = RoleTakenError(f"{role.value} is already taken")
        rows = run(
            self.client.table("members")
            .update({"external_identity": external_id})
            .eq("role_name", role.value)
            .is_("external_identity", "null"),
            "bind member",
            on_conflict=taken,
        )
        if not rows:
            raise taken
        return _parse_member(rows[0])

    def clear_binding(self, role: Role) -> bool:
        """Null the identity on a bound role row; the row itself is kept."""
        rows = run(
            self.client.table("members")
            .update({"external_identity": None})
            .eq("role_name", role.value)
            .not_.is_("external_identity", "null"),
            "unbind member",
        )
        return bool(rows)


def _parse_member(row: dict[str, object]) -> Member:
    external_id = row.get("external_identity")
    return Member(
        id=UUID(str(row["id"])),
        external_id=str(external_id) if external_id else None,
        role=Role(row["role_name"]),
        created_at=parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
    )
