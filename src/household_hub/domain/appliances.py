"""Domain models for appliance reservations."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class Appliance(Enum):
    """Shared appliances that can be reserved."""

    WASHER = "washer"
    DRYER = "dryer"


DURATION_CHOICES = (30, 45, 60, 90)


@dataclass(frozen=True)
class ApplianceSlot:
    """Exclusive time-boxed occupancy of one appliance.

    The occupant and both timestamps are set or cleared together; a slot is
    active exactly when they are set.
    """

    appliance: Appliance
    occupant_id: UUID | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def active(self) -> bool:
        """Return True when the slot is reserved."""
        return (
            self.occupant_id is not None
            and self.start_time is not None
            and self.end_time is not None
        )

    def is_expired(self, now: datetime) -> bool:
        """Return True when an active reservation has run past its end."""
        return self.active and self.end_time is not None and now > self.end_time

    def seconds_remaining(self, now: datetime) -> int:
        """Recompute the countdown from the stored end time."""
        if not self.active or self.end_time is None:
            return 0
        return max(0, math.floor((self.end_time - now).total_seconds()))
