"""Expense ledger and approval voting."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from household_hub.domain.expenses import (
    CATEGORIES,
    MAX_AMOUNT,
    REJECTION_QUORUM,
    Expense,
    ExpenseStatus,
    MemberBalance,
    Settlement,
    VoteKind,
)
from household_hub.domain.members import HOUSEHOLD_SIZE, Member, Role
from household_hub.errors import (
    DuplicateVoteError,
    NotFoundError,
    SelfVoteError,
    TerminalStateError,
    ValidationError,
)
from household_hub.services.identity import MemberRepository

logger = logging.getLogger(__name__)


class ExpenseRepository(Protocol):
    """Persistence interface for expenses and their votes."""

    def create_expense(self, payer_id: UUID, payload: dict[str, object]) -> Expense:
        """Insert a pending expense and return it."""

    def get_expense(self, expense_id: UUID) -> Expense | None:
        """Return an expense with its vote sets, if present."""

    def list_expenses(self, status: ExpenseStatus | None = None) -> list[Expense]:
        """Return expenses newest first, optionally filtered by status."""

    def add_vote(self, expense_id: UUID, voter_id: UUID, kind: VoteKind) -> None:
        """Insert a vote row; raises DuplicateVoteError if the voter already voted."""

    def update_status_if_pending(
        self, expense_id: UUID, status: ExpenseStatus
    ) -> None:
        """Move a pending expense to a terminal status."""


def tally(
    approvals: int, rejections: int, household_size: int = HOUSEHOLD_SIZE
) -> ExpenseStatus:
    """Derive the settlement status from vote counts.

    Every non-payer member must approve; two rejections are enough to reject.
    """
    if approvals >= household_size - 1:
        return ExpenseStatus.APPROVED
    if rejections >= REJECTION_QUORUM:
        return ExpenseStatus.REJECTED
    return ExpenseStatus.PENDING


def settle(
    expenses: list[Expense],
    members: list[Member],
    household_size: int = HOUSEHOLD_SIZE,
) -> Settlement:
    """Split approved expenses equally and compute each role's balance.

    A positive balance means the role is owed money back.
    """
    approved = [e for e in expenses if e.status is ExpenseStatus.APPROVED]
    total = sum(expense.amount for expense in approved)
    share = total / household_size
    role_by_member = {member.id: member.role for member in members}

    paid: dict[Role, float] = dict.fromkeys(Role, 0.0)
    for expense in approved:
        role = role_by_member.get(expense.payer_id)
        if role is not None:
            paid[role] += expense.amount

    balances = [
        MemberBalance(
            role=role, paid=paid[role], share=share, balance=paid[role] - share
        )
        for role in Role
    ]
    pending = sum(1 for e in expenses if e.status is ExpenseStatus.PENDING)
    return Settlement(
        total_approved=total,
        per_person_share=share,
        pending_count=pending,
        balances=balances,
    )


@dataclass
class ExpenseService:
    """Application service for expense submission and voting."""

    repository: ExpenseRepository
    member_repository: MemberRepository

    def submit(  # noqa: PLR0913
        self,
        payer: Member,
        description: str,
        amount: float,
        category: str,
        receipt_ref: str | None = None,
    ) -> Expense:
        """Record a new pending expense paid by a member."""
        cleaned = description.strip()
        if not cleaned:
            raise ValidationError("Description is required")
        if isinstance(amount, bool) or not math.isfinite(amount):
            raise ValidationError("Amount must be a positive number")
        rounded = round(amount, 2)
        if rounded <= 0 or rounded >= MAX_AMOUNT:
            raise ValidationError(
                f"Amount must be between 0.01 and {MAX_AMOUNT - 0.01:.2f}"
            )
        if category not in CATEGORIES:
            raise ValidationError(f"Unknown category: {category}")

        expense = self.repository.create_expense(
            payer.id,
            {
                "description": cleaned,
                "amount": float(rounded),
                "category": category,
                "receipt_ref": receipt_ref or None,
            },
        )
        logger.info("Expense %s submitted by %s", expense.id, payer.role.value)
        return expense

    def list_expenses(self, status: ExpenseStatus | None = None) -> list[Expense]:
        """Return expenses newest first."""
        return self.repository.list_expenses(status)

    def approve(self, expense_id: UUID, voter: Member) -> Expense:
        """Cast an approval vote."""
        return self._vote(expense_id, voter, VoteKind.APPROVE)

    def reject(self, expense_id: UUID, voter: Member) -> Expense:
        """Cast a rejection vote."""
        return self._vote(expense_id, voter, VoteKind.REJECT)

    def get_settlement(self) -> Settlement:
        """Return the current equal-split balance sheet."""
        return settle(
            self.repository.list_expenses(),
            self.member_repository.list_members(),
        )

    def _vote(self, expense_id: UUID, voter: Member, kind: VoteKind) -> Expense:
        expense = self._require(expense_id)
        if expense.status is not ExpenseStatus.PENDING:
            raise TerminalStateError(f"Expense is already {expense.status.value}")
        if expense.payer_id == voter.id:
            raise SelfVoteError("You cannot vote on your own expense")
        if expense.has_voted(voter.id):
            raise DuplicateVoteError("You have already voted on this expense")

        self.repository.add_vote(expense_id, voter.id, kind)

        updated = self._require(expense_id)
        if updated.status is not ExpenseStatus.PENDING:
            return updated
        status = tally(len(updated.approvers), len(updated.rejecters))
        if status is ExpenseStatus.PENDING:
            return updated
        self.repository.update_status_if_pending(expense_id, status)
        logger.info("Expense %s is now %s", expense_id, status.value)
        return self._require(expense_id)

    def _require(self, expense_id: UUID) -> Expense:
        expense = self.repository.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(f"Expense {expense_id} not found")
        return expense
