"""Expense ledger endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from household_hub.api.dependencies import current_member
from household_hub.api.models import ExpenseCreate  # noqa: TC001
from household_hub.api.serializers import serialize_expense, serialize_settlement
from household_hub.domain.expenses import CATEGORIES, ExpenseStatus
from household_hub.domain.members import Member  # noqa: TC001

if TYPE_CHECKING:
    from household_hub.containers import AppContainer

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("")
async def list_expenses(
    request: Request,
    status_filter: ExpenseStatus | None = Query(default=None, alias="status"),
    _member: Member = Depends(current_member),
) -> dict[str, object]:
    """Return expenses newest first, optionally filtered by status."""
    container: AppContainer = request.app.state.container
    expenses = container.expense_service.list_expenses(status_filter)
    return {"expenses": [serialize_expense(expense) for expense in expenses]}


@router.get("/categories")
async def list_categories() -> dict[str, object]:
    """Return the fixed expense categories."""
    return {"categories": list(CATEGORIES)}


@router.get("/settlement")
async def settlement(
    request: Request, _member: Member = Depends(current_member)
) -> dict[str, object]:
    """Return the equal-split balance sheet over approved expenses."""
    container: AppContainer = request.app.state.container
    return serialize_settlement(container.expense_service.get_settlement())


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_expense(
    body: ExpenseCreate,
    request: Request,
    member: Member = Depends(current_member),
) -> dict[str, object]:
    """Submit a new expense paid by the caller."""
    container: AppContainer = request.app.state.container
    expense = container.expense_service.submit(
        payer=member,
        description=body.description,
        amount=body.amount,
        category=body.category,
        receipt_ref=body.receipt_ref,
    )
    return serialize_expense(expense)


@router.post("/{expense_id}/approve")
async def approve_expense(
    expense_id: UUID, request: Request, member: Member = Depends(current_member)
) -> dict[str, object]:
    """Approve someone else's expense."""
    container: AppContainer = request.app.state.container
    return serialize_expense(container.expense_service.approve(expense_id, member))


@router.post("/{expense_id}/reject")
async def reject_expense(
    expense_id: UUID, request: Request, member: Member = Depends(current_member)
) -> dict[str, object]:
    """Reject someone else's expense."""
    container: AppContainer = request.app.state.container
    return serialize_expense(container.expense_service.reject(expense_id, member))
