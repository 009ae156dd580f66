"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from household_hub.api.admin import router as admin_router
from household_hub.api.chat import router as chat_router
from household_hub.api.dependencies import current_member, require_external_id
from household_hub.api.expenses import router as expenses_router
from household_hub.api.models import (
    BindRequest,
    ClaimApplianceRequest,
    ClaimSpotRequest,
)
from household_hub.api.serializers import (
    serialize_member,
    serialize_slot,
    serialize_spot,
)
from household_hub.app_logging import configure_logging
from household_hub.containers import AppContainer
from household_hub.domain.appliances import DURATION_CHOICES, Appliance
from household_hub.domain.members import Member
from household_hub.errors import (
    HouseholdError,
    IdentityError,
    IncorrectAnswerError,
    NotAuthorError,
    NotFoundError,
    NotOccupantError,
    PolicyViolation,
    TransportError,
    ValidationError,
)

_ERROR_STATUS: tuple[tuple[type[HouseholdError], int], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotOccupantError, status.HTTP_403_FORBIDDEN),
    (NotAuthorError, status.HTTP_403_FORBIDDEN),
    (PolicyViolation, status.HTTP_409_CONFLICT),
    (IncorrectAnswerError, status.HTTP_401_UNAUTHORIZED),
    (IdentityError, status.HTTP_403_FORBIDDEN),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.start_resources()
        except Exception:
            logger.exception("Failed to start the realtime chat feed")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(expenses_router)
    app.include_router(chat_router)

    @app.exception_handler(HouseholdError)
    async def household_error_handler(
        request: Request, exc: HouseholdError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, TransportError):
            logger.exception(
                "Storage failure", exc_info=exc, extra={"path": request.url.path}
            )
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/identity/me")
    async def identity_me(
        request: Request, external_id: str = Depends(require_external_id)
    ) -> dict[str, object]:
        """Return the caller's member, or the roles still open to them."""
        state_container: AppContainer = request.app.state.container
        identity = state_container.identity_service
        member = identity.resolve(external_id)
        if member is not None:
            return {"bound": True, "member": serialize_member(member)}
        available = identity.available_roles()
        return {
            "bound": False,
            "access_denied": not available,
            "available_roles": [role.value for role in available],
        }

    @app.get("/identity/roles")
    async def identity_roles(request: Request) -> dict[str, object]:
        """Return unclaimed roles with their security questions."""
        state_container: AppContainer = request.app.state.container
        identity = state_container.identity_service
        return {
            "roles": [
                {"role": role.value, "question": identity.question_for(role)}
                for role in identity.available_roles()
            ]
        }

    @app.post("/identity/bind")
    async def identity_bind(
        body: BindRequest,
        request: Request,
        external_id: str = Depends(require_external_id),
    ) -> dict[str, object]:
        """Bind the caller to a role after checking the security answer."""
        state_container: AppContainer = request.app.state.container
        member = state_container.identity_service.bind(
            external_id, body.role, body.answer
        )
        return serialize_member(member)

    @app.get("/members")
    async def list_members(
        request: Request, _member: Member = Depends(current_member)
    ) -> dict[str, object]:
        """Return the household roster."""
        state_container: AppContainer = request.app.state.container
        members = state_container.identity_service.list_members()
        return {"members": [serialize_member(member) for member in members]}

    @app.get("/appliances")
    async def list_appliances(
        request: Request, _member: Member = Depends(current_member)
    ) -> dict[str, object]:
        """Return both appliance slots and the duration menu."""
        state_container: AppContainer = request.app.state.container
        service = state_container.appliance_service
        now = service.now()
        return {
            "appliances": [
                serialize_slot(service.read(appliance), now) for appliance in Appliance
            ],
            "duration_choices": list(DURATION_CHOICES),
        }

    @app.get("/appliances/{appliance}")
    async def read_appliance(
        appliance: Appliance,
        request: Request,
        _member: Member = Depends(current_member),
    ) -> dict[str, object]:
        """Return one appliance slot, expiring it if its time ran out."""
        state_container: AppContainer = request.app.state.container
        service = state_container.appliance_service
        slot = service.read(appliance)
        return serialize_slot(slot, service.now())

    @app.post("/appliances/{appliance}/claim")
    async def claim_appliance(
        appliance: Appliance,
        body: ClaimApplianceRequest,
        request: Request,
        member: Member = Depends(current_member),
    ) -> dict[str, object]:
        """Reserve an idle appliance for the caller."""
        state_container: AppContainer = request.app.state.container
        service = state_container.appliance_service
        slot = service.claim(appliance, member, body.duration_minutes)
        return serialize_slot(slot, service.now())

    @app.post("/appliances/{appliance}/release")
    async def release_appliance(
        appliance: Appliance,
        request: Request,
        member: Member = Depends(current_member),
    ) -> dict[str, object]:
        """Stop the caller's reservation early."""
        state_container: AppContainer = request.app.state.container
        service = state_container.appliance_service
        slot = service.release(appliance, member)
        return serialize_slot(slot, service.now())

    @app.get("/parking")
    async def list_parking(
        request: Request, member: Member = Depends(current_member)
    ) -> dict[str, object]:
        """Return all parking spots and the caller's spot, if any."""
        state_container: AppContainer = request.app.state.container
        spots = state_container.parking_service.list_spots()
        mine = next((spot for spot in spots if spot.occupant_id == member.id), None)
        return {
            "spots": [serialize_spot(spot) for spot in spots],
            "my_spot": mine.spot_number if mine else None,
        }

    @app.post("/parking/{spot_number}/claim")
    async def claim_parking(
        spot_number: int,
        body: ClaimSpotRequest,
        request: Request,
        member: Member = Depends(current_member),
    ) -> dict[str, object]:
        """Claim a free parking spot for the caller."""
        state_container: AppContainer = request.app.state.container
        spot = state_container.parking_service.claim(
            spot_number, member, body.vehicle_info
        )
        return serialize_spot(spot)

    @app.post("/parking/{spot_number}/release")
    async def release_parking(
        spot_number: int,
        request: Request,
        member: Member = Depends(current_member),
    ) -> dict[str, object]:
        """Release the caller's parking spot."""
        state_container: AppContainer = request.app.state.container
        spot = state_container.parking_service.release(spot_number, member)
        return serialize_spot(spot)

    return app


def _status_for(exc: HouseholdError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST
