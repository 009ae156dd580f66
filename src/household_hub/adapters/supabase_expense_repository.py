"""Supabase implementation for expenses and votes."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from household_hub.adapters.supabase_queries import parse_timestamp, run
from household_hub.domain.expenses import Expense, ExpenseStatus, VoteKind
from household_hub.errors import DuplicateVoteError, TransportError
from household_hub.services.expenses import ExpenseRepository

_EXPENSE_COLUMNS = (
    "id, description, amount, category, payer_id, receipt_ref, created_at, status"
)


@dataclass
class SupabaseExpenseRepository(ExpenseRepository):
    """Supabase-backed repository for the expense ledger."""

    client: Client

    def create_expense(self, payer_id: UUID, payload: dict[str, object]) -> Expense:
        """Insert a pending expense and return it."""
        rows = run(
            self.client.table("expenses").insert(
                {
                    "payer_id": str(payer_id),
                    "status": ExpenseStatus.PENDING.value,
                    **payload,
                }
            ),
            "create expense",
        )
        if not rows:
            raise TransportError("Failed to create expense")
        return _parse_expense(rows[0], [])

    def get_expense(self, expense_id: UUID) -> Expense | None:
        """Return an expense with its votes, if present."""
        rows = run(
            self.client.table("expenses")
            .select(_EXPENSE_COLUMNS)
            .eq("id", str(expense_id))
            .limit(1),
            "load expense",
        )
        if not rows:
            return None
        votes = run(
            self.client.table("expense_votes")
            .select("expense_id, voter_id, kind")
            .eq("expense_id", str(expense_id)),
            "load expense votes",
        )
        return _parse_expense(rows[0], votes)

    def list_expenses(self, status: ExpenseStatus | None = None) -> list[Expense]:
        """Return expenses newest first with their votes."""
        query = self.client.table("expenses").select(_EXPENSE_COLUMNS)
        if status is not None:
            query = query.eq("status", status.value)
        rows = run(query.order("created_at", desc=True), "list expenses")
        if not rows:
            return []

        votes = run(
            self.client.table("expense_votes")
            .select("expense_id, voter_id, kind")
            .in_("expense_id", [str(row["id"]) for row in rows]),
            "list expense votes",
        )
        votes_by_expense: dict[str, list[dict[str, object]]] = {}
        for vote in votes:
            votes_by_expense.setdefault(str(vote["expense_id"]), []).append(vote)
        return [
            _parse_expense(row, votes_by_expense.get(str(row["id"]), []))
            for row in rows
        ]

    def add_vote(self, expense_id: UUID, voter_id: UUID, kind: VoteKind) -> None:
        """Insert a vote row guarded by the (expense_id, voter_id) unique key."""
        run(
            self.client.table("expense_votes").insert(
                {
                    "expense_id": str(expense_id),
                    "voter_id": str(voter_id),
                    "kind": kind.value,
                }
            ),
            "record vote",
            on_conflict=DuplicateVoteError("You have already voted on this expense"),
        )

    def update_status_if_pending(
        self, expense_id: UUID, status: ExpenseStatus
    ) -> None:
        """Set a terminal status on an expense that is still pending."""
        run(
            self.client.table("expenses")
            .update({"status": status.value})
            .eq("id", str(expense_id))
            .eq("status", ExpenseStatus.PENDING.value),
            "update expense status",
        )


def _parse_expense(row: dict[str, object], votes: list[dict[str, object]]) -> Expense:
    approvers = frozenset(
        UUID(str(vote["voter_id"]))
        for vote in votes
        if vote.get("kind") == VoteKind.APPROVE.value
    )
    rejecters = frozenset(
        UUID(str(vote["voter_id"]))
        for vote in votes
        if vote.get("kind") == VoteKind.REJECT.value
    )
    receipt_ref = row.get("receipt_ref")
    return Expense(
        id=UUID(str(row["id"])),
        description=str(row.get("description", "")),
        amount=float(row.get("amount", 0.0)),
        category=str(row.get("category", "")),
        payer_id=UUID(str(row["payer_id"])),
        receipt_ref=str(receipt_ref) if receipt_ref else None,
        created_at=parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
        status=ExpenseStatus(row.get("status", ExpenseStatus.PENDING.value)),
        approvers=approvers,
        rejecters=rejecters,
    )
