"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from household_hub.adapters.supabase_appliance_repository import (
    SupabaseApplianceRepository,
)
from household_hub.adapters.supabase_chat_repository import SupabaseChatRepository
from household_hub.adapters.supabase_expense_repository import (
    SupabaseExpenseRepository,
)
from household_hub.adapters.supabase_member_repository import SupabaseMemberRepository
from household_hub.adapters.supabase_parking_repository import (
    SupabaseParkingRepository,
)
from household_hub.adapters.supabase_realtime_feed import SupabaseRealtimeChatFeed
from household_hub.config import Settings, parse_security_answers
from household_hub.services.appliances import ApplianceService
from household_hub.services.chat import ChatBroadcaster, ChatService
from household_hub.services.expenses import ExpenseService
from household_hub.services.identity import IdentityService
from household_hub.services.parking import ParkingService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_service: IdentityService
    appliance_service: ApplianceService
    parking_service: ParkingService
    expense_service: ExpenseService
    chat_service: ChatService
    start_resources: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    member_repository = SupabaseMemberRepository(supabase_client)
    identity_service = IdentityService(
        repository=member_repository,
        security_answers=parse_security_answers(resolved_settings.security_answers),
    )
    appliance_service = ApplianceService(SupabaseApplianceRepository(supabase_client))
    parking_service = ParkingService(SupabaseParkingRepository(supabase_client))
    expense_service = ExpenseService(
        repository=SupabaseExpenseRepository(supabase_client),
        member_repository=member_repository,
    )
    broadcaster = ChatBroadcaster()
    chat_service = ChatService(
        repository=SupabaseChatRepository(supabase_client),
        broadcaster=broadcaster,
        publish_commits=not resolved_settings.chat_realtime,
    )
    realtime_feed = (
        SupabaseRealtimeChatFeed(
            supabase_url=resolved_settings.supabase_url,
            supabase_key=resolved_settings.supabase_service_key,
            broadcaster=broadcaster,
        )
        if resolved_settings.chat_realtime
        else None
    )

    async def start_resources() -> None:
        if realtime_feed is not None:
            await realtime_feed.start()

    async def close_resources() -> None:
        if realtime_feed is not None:
            await realtime_feed.close()

    return AppContainer(
        settings=resolved_settings,
        identity_service=identity_service,
        appliance_service=appliance_service,
        parking_service=parking_service,
        expense_service=expense_service,
        chat_service=chat_service,
        start_resources=start_resources,
        close_resources=close_resources,
    )
