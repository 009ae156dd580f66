"""Supabase-backed appliance slot repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from household_hub.adapters.supabase_queries import parse_timestamp, run
from household_hub.domain.appliances import Appliance, ApplianceSlot
from household_hub.services.appliances import ApplianceRepository


@dataclass
class SupabaseApplianceRepository(ApplianceRepository):
    """Supabase implementation for the resource_slots table."""

    client: Client

    def get_slot(self, appliance: Appliance) -> ApplianceSlot | None:
        """Return the stored slot for an appliance, if present."""
        rows = run(
            self.client.table("resource_slots")
            .select("appliance_id, occupant_id, start_time, end_time, active")
            .eq("appliance_id", appliance.value)
            .limit(1),
            f"load {appliance.value} slot",
        )
        if not rows:
            return None
        return _parse_slot(rows[0])

    def claim_if_idle(self, slot: ApplianceSlot) -> ApplianceSlot | None:
        """Activate the slot only where the row is still inactive."""
        if slot.start_time is None or slot.end_time is None:
            raise ValueError("A claimed slot needs start and end times")
        rows = run(
            self.client.table("resource_slots")
            .update(
                {
                    "occupant_id": str(slot.occupant_id),
                    "start_time": slot.start_time.isoformat(),
                    "end_time": slot.end_time.isoformat(),
                    "active": True,
                }
            )
            .eq("appliance_id", slot.appliance.value)
            .eq("active", False),
            f"claim {slot.appliance.value}",
        )
        if not rows:
            return None
        return _parse_slot(rows[0])

    def reset_slot(self, slot: ApplianceSlot) -> bool:
        """Clear the slot where the row still holds the given reservation."""
        if slot.occupant_id is None or slot.start_time is None:
            return False
        rows = run(
            self.client.table("resource_slots")
            .update(
                {
                    "occupant_id": None,
                    "start_time": None,
                    "end_time": None,
                    "active": False,
                }
            )
            .eq("appliance_id", slot.appliance.value)
            .eq("occupant_id", str(slot.occupant_id))
            .eq("start_time", slot.start_time.isoformat()),
            f"release {slot.appliance.value}",
        )
        return bool(rows)


def _parse_slot(row: dict[str, object]) -> ApplianceSlot:
    appliance = Appliance(row["appliance_id"])
    occupant = row.get("occupant_id")
    start_time = parse_timestamp(row.get("start_time"))
    end_time = parse_timestamp(row.get("end_time"))
    if not row.get("active") or not occupant or not start_time or not end_time:
        return ApplianceSlot(appliance)
    return ApplianceSlot(
        appliance=appliance,
        occupant_id=UUID(str(occupant)),
        start_time=start_time,
        end_time=end_time,
    )
