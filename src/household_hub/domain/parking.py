"""Domain models for parking spots."""

from dataclasses import dataclass
from uuid import UUID

SPOT_NUMBERS = (1, 2, 3, 4)


@dataclass(frozen=True)
class ParkingSpot:
    """One of the fixed numbered parking spots."""

    spot_number: int
    occupant_id: UUID | None = None
    vehicle_info: str | None = None

    @property
    def occupied(self) -> bool:
        """Return True when someone holds the spot."""
        return self.occupant_id is not None
