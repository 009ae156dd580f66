"""Reservation state machine for the shared appliances."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from household_hub.domain.appliances import Appliance, ApplianceSlot
from household_hub.domain.members import Member
from household_hub.errors import NotOccupantError, ResourceBusyError, ValidationError

logger = logging.getLogger(__name__)


class ApplianceRepository(Protocol):
    """Persistence interface for appliance slots."""

    def get_slot(self, appliance: Appliance) -> ApplianceSlot | None:
        """Return the stored slot, if the row exists."""

    def claim_if_idle(self, slot: ApplianceSlot) -> ApplianceSlot | None:
        """Write an active slot only if the stored slot is still idle.

        Returns the written slot, or None when the row was no longer idle.
        """

    def reset_slot(self, slot: ApplianceSlot) -> bool:
        """Clear the slot only if it still holds the given reservation.

        Returns False when the stored slot no longer matches the snapshot.
        """


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ApplianceService:
    """Claim, release and lazily expire appliance reservations.

    States are Idle and Active. Claims use a conditional write so that two
    members racing from the same Idle snapshot cannot both win.
    """

    repository: ApplianceRepository
    now: Callable[[], datetime] = field(default=_utcnow)

    def read(self, appliance: Appliance) -> ApplianceSlot:
        """Return the current slot, releasing it first if it has expired."""
        slot = self._load(appliance)
        if not slot.is_expired(self.now()):
            return slot
        if self.repository.reset_slot(slot):
            logger.info("%s reservation expired", appliance.value)
            return ApplianceSlot(appliance)
        # Someone else expired or replaced the reservation first.
        current = self._load(appliance)
        return ApplianceSlot(appliance) if current.is_expired(self.now()) else current

    def claim(
        self, appliance: Appliance, member: Member, duration_minutes: int
    ) -> ApplianceSlot:
        """Reserve an idle appliance for the given number of minutes."""
        if isinstance(duration_minutes, bool) or duration_minutes <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        current = self.read(appliance)
        if current.active:
            raise ResourceBusyError(f"The {appliance.value} is already in use")

        start = self.now()
        requested = ApplianceSlot(
            appliance=appliance,
            occupant_id=member.id,
            start_time=start,
            end_time=start + timedelta(minutes=duration_minutes),
        )
        claimed = self.repository.claim_if_idle(requested)
        if claimed is None:
            raise ResourceBusyError(
                f"The {appliance.value} was claimed by someone else"
            )
        logger.info(
            "%s claimed by %s for %s minutes",
            appliance.value,
            member.role.value,
            duration_minutes,
        )
        return claimed

    def release(self, appliance: Appliance, member: Member) -> ApplianceSlot:
        """End the caller's reservation early."""
        current = self.read(appliance)
        if not current.active:
            return current
        if current.occupant_id != member.id:
            raise NotOccupantError(
                f"Only the current occupant can stop the {appliance.value}"
            )
        if not self.repository.reset_slot(current):
            current = self._load(appliance)
            if current.active and current.occupant_id != member.id:
                raise NotOccupantError(
                    f"Only the current occupant can stop the {appliance.value}"
                )
            return current
        logger.info("%s released by %s", appliance.value, member.role.value)
        return ApplianceSlot(appliance)

    def _load(self, appliance: Appliance) -> ApplianceSlot:
        return self.repository.get_slot(appliance) or ApplianceSlot(appliance)
