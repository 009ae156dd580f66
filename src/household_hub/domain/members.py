"""Household member domain models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class Role(Enum):
    """The four fixed household roles."""

    RAM = "Ram"
    MUNNA = "Munna"
    SURIYA = "Suriya"
    KAUSHIK = "Kaushik"


HOUSEHOLD_SIZE = len(Role)

SECURITY_QUESTIONS: dict[Role, str] = {
    Role.RAM: "What is your favorite meme?",
    Role.MUNNA: (
        'What is "golgappa" or "phuchka" in english? '
        "Type the answer with no spaces."
    ),
    Role.SURIYA: "What is ചായ in english?",
    Role.KAUSHIK: (
        'What is the first name of the lead actor of the movie "Hey Ram!"? '
        "(It is a single word starts with 'K')"
    ),
}


@dataclass(frozen=True)
class Member:
    """A household role and the external identity currently bound to it.

    The row outlives its bindings so expenses, votes and messages keep
    pointing at the same member id across an unbind.
    """

    id: UUID
    external_id: str | None
    role: Role
    created_at: datetime

    @property
    def bound(self) -> bool:
        """Return True when an external identity holds the role."""
        return self.external_id is not None
