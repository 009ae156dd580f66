"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field

from household_hub.domain.appliances import DURATION_CHOICES
from household_hub.domain.members import Role


class BindRequest(BaseModel):
    """Role choice plus the answer to its security question."""

    role: Role
    answer: str


class ClaimApplianceRequest(BaseModel):
    """Reservation length for an appliance."""

    duration_minutes: int = DURATION_CHOICES[0]


class ClaimSpotRequest(BaseModel):
    """Optional vehicle description for a parking claim."""

    vehicle_info: str | None = Field(default=None, max_length=120)


class ExpenseCreate(BaseModel):
    """New expense submission."""

    description: str
    amount: float
    category: str = "Other"
    receipt_ref: str | None = None


class MessageCreate(BaseModel):
    """New chat message."""

    text: str | None = None
    image_ref: str | None = None


class MessageEdit(BaseModel):
    """Replacement text for a chat message."""

    text: str
