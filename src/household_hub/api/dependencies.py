"""Request dependencies shared by the API routers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

from household_hub.domain.members import Member  # noqa: TC001

if TYPE_CHECKING:
    from household_hub.containers import AppContainer


def require_external_id(x_external_id: str | None = Header(default=None)) -> str:
    """Return the authenticated external identity forwarded by the auth proxy."""
    if not x_external_id or not x_external_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-External-Id header",
        )
    return x_external_id.strip()


def current_member(
    request: Request, external_id: str = Depends(require_external_id)
) -> Member:
    """Resolve the caller to a bound household member."""
    container: AppContainer = request.app.state.container
    member = container.identity_service.resolve(external_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Identity is not bound to a household member",
        )
    return member
