"""Parking spot claims."""

import logging
from dataclasses import dataclass
from typing import Protocol

from household_hub.domain.members import Member
from household_hub.domain.parking import SPOT_NUMBERS, ParkingSpot
from household_hub.errors import (
    AlreadyParkedError,
    NotFoundError,
    NotOccupantError,
    SpotOccupiedError,
)

logger = logging.getLogger(__name__)


class ParkingRepository(Protocol):
    """Persistence interface for parking spots."""

    def list_spots(self) -> list[ParkingSpot]:
        """Return stored spots."""

    def claim_if_free(self, spot: ParkingSpot) -> ParkingSpot | None:
        """Occupy a spot only if it is still free; None when it was not."""

    def release_spot(self, spot: ParkingSpot) -> bool:
        """Free the spot only if the given occupant still holds it."""


@dataclass
class ParkingService:
    """Untimed exclusive claims over the fixed parking spots."""

    repository: ParkingRepository

    def list_spots(self) -> list[ParkingSpot]:
        """Return every spot in number order, free when no row is stored."""
        stored = {spot.spot_number: spot for spot in self.repository.list_spots()}
        return [stored.get(number, ParkingSpot(number)) for number in SPOT_NUMBERS]

    def spot_for(self, member: Member) -> ParkingSpot | None:
        """Return the spot a member currently holds."""
        for spot in self.list_spots():
            if spot.occupant_id == member.id:
                return spot
        return None

    def claim(
        self, spot_number: int, member: Member, vehicle_info: str | None = None
    ) -> ParkingSpot:
        """Occupy a free spot for a member who holds no other spot."""
        spot = self._get(spot_number)
        if spot.occupied:
            raise SpotOccupiedError(f"Spot {spot_number} is already occupied")
        held = self.spot_for(member)
        if held is not None:
            raise AlreadyParkedError(f"You already occupy spot {held.spot_number}")

        cleaned = vehicle_info.strip() if vehicle_info else ""
        requested = ParkingSpot(
            spot_number=spot_number,
            occupant_id=member.id,
            vehicle_info=cleaned or None,
        )
        claimed = self.repository.claim_if_free(requested)
        if claimed is None:
            raise SpotOccupiedError(f"Spot {spot_number} was claimed by someone else")
        logger.info("Spot %s claimed by %s", spot_number, member.role.value)
        return claimed

    def release(self, spot_number: int, member: Member) -> ParkingSpot:
        """Free a spot held by the caller."""
        spot = self._get(spot_number)
        if not spot.occupied:
            return spot
        if spot.occupant_id != member.id:
            raise NotOccupantError(f"Only the occupant can release spot {spot_number}")
        if not self.repository.release_spot(spot):
            current = self._get(spot_number)
            if current.occupied and current.occupant_id != member.id:
                raise NotOccupantError(
                    f"Only the occupant can release spot {spot_number}"
                )
            return current
        logger.info("Spot %s released by %s", spot_number, member.role.value)
        return ParkingSpot(spot_number)

    def _get(self, spot_number: int) -> ParkingSpot:
        if spot_number not in SPOT_NUMBERS:
            raise NotFoundError(f"Parking spot {spot_number} does not exist")
        for spot in self.list_spots():
            if spot.spot_number == spot_number:
                return spot
        return ParkingSpot(spot_number)
