"""Supabase-backed parking spot repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from household_hub.adapters.supabase_queries import run
from household_hub.domain.parking import ParkingSpot
from household_hub.services.parking import ParkingRepository


@dataclass
class SupabaseParkingRepository(ParkingRepository):
    """Supabase implementation for the parking_spots table."""

    client: Client

    def list_spots(self) -> list[ParkingSpot]:
        """Return stored spots ordered by number."""
        rows = run(
            self.client.table("parking_spots")
            .select("spot_number, occupant_id, vehicle_info, occupied")
            .order("spot_number"),
            "list parking spots",
        )
        return [_parse_spot(row) for row in rows]

    def claim_if_free(self, spot: ParkingSpot) -> ParkingSpot | None:
        """Occupy the spot only where the row is still free."""
        rows = run(
            self.client.table("parking_spots")
            .update(
                {
                    "occupant_id": str(spot.occupant_id),
                    "vehicle_info": spot.vehicle_info,
                    "occupied": True,
                }
            )
            .eq("spot_number", spot.spot_number)
            .eq("occupied", False),
            f"claim parking spot {spot.spot_number}",
        )
        if not rows:
            return None
        return _parse_spot(rows[0])

    def release_spot(self, spot: ParkingSpot) -> bool:
        """Free the spot where the row still names the given occupant."""
        if spot.occupant_id is None:
            return False
        rows = run(
            self.client.table("parking_spots")
            .update({"occupant_id": None, "vehicle_info": None, "occupied": False})
            .eq("spot_number", spot.spot_number)
            .eq("occupant_id", str(spot.occupant_id)),
            f"release parking spot {spot.spot_number}",
        )
        return bool(rows)


def _parse_spot(row: dict[str, object]) -> ParkingSpot:
    occupant = row.get("occupant_id")
    if not row.get("occupied") or not occupant:
        return ParkingSpot(int(row["spot_number"]))
    vehicle_info = row.get("vehicle_info")
    return ParkingSpot(
        spot_number=int(row["spot_number"]),
        occupant_id=UUID(str(occupant)),
        vehicle_info=str(vehicle_info) if vehicle_info else None,
    )
