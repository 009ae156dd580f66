"""Domain models for the shared expense ledger."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from household_hub.domain.members import Role

CATEGORIES = (
    "Groceries",
    "Utilities",
    "Rent",
    "Internet",
    "Cleaning",
    "Food Delivery",
    "Entertainment",
    "Other",
)

REJECTION_QUORUM = 2

# Amounts are stored as numeric(12, 2).
MAX_AMOUNT = 10**10


class ExpenseStatus(Enum):
    """Settlement status of an expense."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VoteKind(Enum):
    """Kind of vote a member casts on an expense."""

    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True)
class Expense:
    """A household cost awaiting or past group ratification."""

    id: UUID
    description: str
    amount: float
    category: str
    payer_id: UUID
    receipt_ref: str | None
    created_at: datetime
    status: ExpenseStatus
    approvers: frozenset[UUID] = frozenset()
    rejecters: frozenset[UUID] = frozenset()

    def has_voted(self, member_id: UUID) -> bool:
        """Return True when the member appears in either vote set."""
        return member_id in self.approvers or member_id in self.rejecters


@dataclass(frozen=True)
class MemberBalance:
    """Equal-split position of one household role."""

    role: Role
    paid: float
    share: float
    balance: float


@dataclass(frozen=True)
class Settlement:
    """Balance sheet derived from approved expenses."""

    total_approved: float
    per_person_share: float
    pending_count: int
    balances: list[MemberBalance]
