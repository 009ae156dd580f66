"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from household_hub.api.serializers import serialize_member
from household_hub.domain.members import Role  # noqa: TC001

if TYPE_CHECKING:
    from household_hub.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/members", dependencies=[Depends(require_admin)])
async def list_members(request: Request) -> dict[str, object]:
    """Return bound members with their external identities."""
    container: AppContainer = request.app.state.container
    members = container.identity_service.list_members()
    return {
        "members": [
            {**serialize_member(member), "external_id": member.external_id}
            for member in members
        ],
        "available_roles": [
            role.value for role in container.identity_service.available_roles()
        ],
    }


@router.post("/members/{role}/unbind", dependencies=[Depends(require_admin)])
async def unbind_member(role: Role, request: Request) -> dict[str, object]:
    """Release a role so a new identity can claim it."""
    container: AppContainer = request.app.state.container
    removed = container.identity_service.unbind(role)
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{role.value} is not bound",
        )
    return {"role": role.value, "unbound": True}
