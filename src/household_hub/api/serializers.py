"""JSON serialization of domain models for API responses."""

from datetime import datetime

from household_hub.domain.appliances import ApplianceSlot
from household_hub.domain.chat import ChatEvent, ChatMessage
from household_hub.domain.expenses import Expense, Settlement
from household_hub.domain.members import Member
from household_hub.domain.parking import ParkingSpot


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_member(member: Member) -> dict[str, object]:
    return {
        "id": str(member.id),
        "role": member.role.value,
        "created_at": member.created_at.isoformat(),
    }


def serialize_slot(slot: ApplianceSlot, now: datetime) -> dict[str, object]:
    return {
        "appliance": slot.appliance.value,
        "active": slot.active,
        "occupant_id": str(slot.occupant_id) if slot.occupant_id else None,
        "start_time": _iso(slot.start_time),
        "end_time": _iso(slot.end_time),
        "seconds_remaining": slot.seconds_remaining(now),
    }


def serialize_spot(spot: ParkingSpot) -> dict[str, object]:
    return {
        "spot_number": spot.spot_number,
        "occupied": spot.occupied,
        "occupant_id": str(spot.occupant_id) if spot.occupant_id else None,
        "vehicle_info": spot.vehicle_info,
    }


def serialize_expense(expense: Expense) -> dict[str, object]:
    return {
        "id": str(expense.id),
        "description": expense.description,
        "amount": expense.amount,
        "category": expense.category,
        "payer_id": str(expense.payer_id),
        "receipt_ref": expense.receipt_ref,
        "created_at": expense.created_at.isoformat(),
        "status": expense.status.value,
        "approvers": sorted(str(voter) for voter in expense.approvers),
        "rejecters": sorted(str(voter) for voter in expense.rejecters),
    }


def serialize_settlement(settlement: Settlement) -> dict[str, object]:
    return {
        "total_approved": settlement.total_approved,
        "per_person_share": settlement.per_person_share,
        "pending_count": settlement.pending_count,
        "balances": [
            {
                "role": entry.role.value,
                "paid": entry.paid,
                "share": entry.share,
                "balance": entry.balance,
            }
            for entry in settlement.balances
        ],
    }


def serialize_message(message: ChatMessage) -> dict[str, object]:
    return {
        "id": str(message.id),
        "author_id": str(message.author_id),
        "text": message.text,
        "image_ref": message.image_ref,
        "created_at": message.created_at.isoformat(),
        "edited": message.edited,
        "edited_at": _iso(message.edited_at),
    }


def serialize_event(event: ChatEvent) -> dict[str, object]:
    return {"event": event.kind.value, "message": serialize_message(event.message)}
