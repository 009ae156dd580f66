"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from household_hub.config import Settings, parse_security_answers
from household_hub.containers import AppContainer
from household_hub.domain.appliances import Appliance, ApplianceSlot
from household_hub.domain.chat import ChatMessage
from household_hub.domain.expenses import Expense, ExpenseStatus, VoteKind
from household_hub.domain.members import Member, Role
from household_hub.domain.parking import ParkingSpot
from household_hub.errors import DuplicateVoteError, NotFoundError, RoleTakenError
from household_hub.services.appliances import ApplianceRepository, ApplianceService
from household_hub.services.chat import ChatRepository, ChatService
from household_hub.services.expenses import ExpenseRepository, ExpenseService
from household_hub.services.identity import IdentityService, MemberRepository
from household_hub.services.parking import ParkingRepository, ParkingService

START = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Settable clock for time-dependent services."""

    current: datetime = START

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@dataclass
class InMemoryMemberRepository(MemberRepository):
    """In-memory member rows, one per role, that are never deleted."""

    members: dict[UUID, Member] = field(
        default_factory=lambda: {
            member.id: member
            for member in (
                Member(id=uuid4(), external_id=None, role=role, created_at=START)
                for role in Role
            )
        }
    )

    def get_by_external_id(self, external_id: str) -> Member | None:
        for member in self.members.values():
            if member.external_id == external_id:
                return member
        return None

    def list_members(self) -> list[Member]:
        return list(self.members.values())

    def bind_role(self, external_id: str, role: Role) -> Member:
        if self.get_by_external_id(external_id) is not None:
            raise RoleTakenError(f"{role.value} is already taken")
        row = self._row(role)
        if row.bound:
            raise RoleTakenError(f"{role.value} is already taken")
        member = replace(row, external_id=external_id)
        self.members[member.id] = member
        return member

    def clear_binding(self, role: Role) -> bool:
        row = self._row(role)
        if not row.bound:
            return False
        self.members[row.id] = replace(row, external_id=None)
        return True

    def _row(self, role: Role) -> Member:
        return next(m for m in self.members.values() if m.role is role)


@dataclass
class InMemoryApplianceRepository(ApplianceRepository):
    """In-memory appliance slots with a conditional claim."""

    slots: dict[Appliance, ApplianceSlot] = field(default_factory=dict)
    resets: list[Appliance] = field(default_factory=list)

    def get_slot(self, appliance: Appliance) -> ApplianceSlot | None:
        return self.slots.get(appliance)

    def claim_if_idle(self, slot: ApplianceSlot) -> ApplianceSlot | None:
        stored = self.slots.get(slot.appliance)
        if stored is not None and stored.active:
            return None
        self.slots[slot.appliance] = slot
        return slot

    def reset_slot(self, slot: ApplianceSlot) -> bool:
        stored = self.slots.get(slot.appliance)
        if stored is None or not stored.active or stored != slot:
            return False
        self.resets.append(slot.appliance)
        self.slots[slot.appliance] = ApplianceSlot(slot.appliance)
        return True


@dataclass
class InMemoryParkingRepository(ParkingRepository):
    """In-memory parking spots with a conditional claim."""

    spots: dict[int, ParkingSpot] = field(default_factory=dict)

    def list_spots(self) -> list[ParkingSpot]:
        return [self.spots[number] for number in sorted(self.spots)]

    def claim_if_free(self, spot: ParkingSpot) -> ParkingSpot | None:
        stored = self.spots.get(spot.spot_number)
        if stored is not None and stored.occupied:
            return None
        self.spots[spot.spot_number] = spot
        return spot

    def release_spot(self, spot: ParkingSpot) -> bool:
        stored = self.spots.get(spot.spot_number)
        if stored is None or stored.occupant_id != spot.occupant_id:
            return False
        self.spots[spot.spot_number] = ParkingSpot(spot.spot_number)
        return True


@dataclass
class InMemoryExpenseRepository(ExpenseRepository):
    """In-memory expenses with one vote per member per expense."""

    expenses: dict[UUID, Expense] = field(default_factory=dict)
    votes: dict[UUID, dict[UUID, VoteKind]] = field(default_factory=dict)
    status_updates: list[tuple[UUID, ExpenseStatus]] = field(default_factory=list)

    def create_expense(self, payer_id: UUID, payload: dict[str, object]) -> Expense:
        expense = Expense(
            id=uuid4(),
            description=str(payload["description"]),
            amount=float(payload["amount"]),  # type: ignore[arg-type]
            category=str(payload["category"]),
            payer_id=payer_id,
            receipt_ref=payload.get("receipt_ref"),  # type: ignore[arg-type]
            created_at=START + timedelta(minutes=len(self.expenses)),
            status=ExpenseStatus.PENDING,
        )
        self.expenses[expense.id] = expense
        self.votes[expense.id] = {}
        return expense

    def get_expense(self, expense_id: UUID) -> Expense | None:
        expense = self.expenses.get(expense_id)
        if expense is None:
            return None
        cast = self.votes.get(expense_id, {})
        return replace(
            expense,
            approvers=frozenset(
                voter for voter, kind in cast.items() if kind is VoteKind.APPROVE
            ),
            rejecters=frozenset(
                voter for voter, kind in cast.items() if kind is VoteKind.REJECT
            ),
        )

    def list_expenses(self, status: ExpenseStatus | None = None) -> list[Expense]:
        loaded = [self.get_expense(expense_id) for expense_id in self.expenses]
        results = [
            expense
            for expense in loaded
            if expense is not None and (status is None or expense.status is status)
        ]
        return sorted(results, key=lambda expense: expense.created_at, reverse=True)

    def add_vote(self, expense_id: UUID, voter_id: UUID, kind: VoteKind) -> None:
        cast = self.votes.setdefault(expense_id, {})
        if voter_id in cast:
            raise DuplicateVoteError("You have already voted on this expense")
        cast[voter_id] = kind

    def update_status_if_pending(
        self, expense_id: UUID, status: ExpenseStatus
    ) -> None:
        expense = self.expenses[expense_id]
        if expense.status is not ExpenseStatus.PENDING:
            return
        self.expenses[expense_id] = replace(expense, status=status)
        self.status_updates.append((expense_id, status))


@dataclass
class InMemoryChatRepository(ChatRepository):
    """In-memory chat message store."""

    messages: dict[UUID, ChatMessage] = field(default_factory=dict)

    def list_messages(self) -> list[ChatMessage]:
        return sorted(self.messages.values(), key=lambda message: message.created_at)

    def get_message(self, message_id: UUID) -> ChatMessage | None:
        return self.messages.get(message_id)

    def create_message(
        self, author_id: UUID, text: str | None, image_ref: str | None
    ) -> ChatMessage:
        message = ChatMessage(
            id=uuid4(),
            author_id=author_id,
            text=text,
            image_ref=image_ref,
            created_at=START + timedelta(seconds=len(self.messages)),
        )
        self.messages[message.id] = message
        return message

    def update_text(
        self, message_id: UUID, text: str, edited_at: datetime
    ) -> ChatMessage:
        message = self.messages.get(message_id)
        if message is None:
            raise NotFoundError(f"Message {message_id} not found")
        updated = replace(message, text=text, edited_at=edited_at)
        self.messages[message_id] = updated
        return updated

    def delete_message(self, message_id: UUID) -> None:
        self.messages.pop(message_id, None)


def bind_all(repository: InMemoryMemberRepository) -> dict[Role, Member]:
    """Bind every role to an identity named after it."""
    return {
        role: repository.bind_role(f"user-{role.value.lower()}", role)
        for role in Role
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def member_repository() -> InMemoryMemberRepository:
    return InMemoryMemberRepository()


@pytest.fixture
def members(member_repository: InMemoryMemberRepository) -> dict[Role, Member]:
    return bind_all(member_repository)


@pytest.fixture
def container(
    settings: Settings,
    clock: FakeClock,
    member_repository: InMemoryMemberRepository,
) -> AppContainer:
    identity_service = IdentityService(
        repository=member_repository,
        security_answers=parse_security_answers(settings.security_answers),
    )
    appliance_service = ApplianceService(InMemoryApplianceRepository(), now=clock)
    parking_service = ParkingService(InMemoryParkingRepository())
    expense_service = ExpenseService(
        repository=InMemoryExpenseRepository(),
        member_repository=member_repository,
    )
    chat_service = ChatService(repository=InMemoryChatRepository(), now=clock)

    async def start_resources() -> None:
        return None

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        identity_service=identity_service,
        appliance_service=appliance_service,
        parking_service=parking_service,
        expense_service=expense_service,
        chat_service=chat_service,
        start_resources=start_resources,
        close_resources=close_resources,
    )
