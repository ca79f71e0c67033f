"""Booking-related Pydantic schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from ..models.booking import BookingStatus
from .actor import ActorSummary
from .package import PackageSummary


class BookingAction(str, Enum):
    """Agency decisions on a booking request."""
    ACCEPT = "accept"
    REJECT = "reject"


class CreateBookingRequest(BaseModel):
    """Request schema for requesting slots on a package.

    ``slots_booked`` is range-checked by the service, so that a zero
    request is reported as a business validation error.
    """

    package_id: UUID = Field(..., description="Package to book")
    slots_booked: int = Field(..., description="Number of slots requested")


class BookingActionRequest(BaseModel):
    """Request schema for accepting or rejecting a booking."""

    action: str = Field(..., description="'accept' or 'reject'")


class Booking(BaseModel):
    """Booking response schema."""

    id: UUID = Field(..., description="Unique booking ID")
    traveler_id: UUID = Field(..., description="Requesting traveler ID")
    package_id: UUID = Field(..., description="Booked package ID")
    slots_booked: int = Field(..., ge=1, description="Number of slots")
    status: BookingStatus = Field(..., description="Booking status")
    created_at: datetime = Field(..., description="Booking creation time (ISO 8601)")

    model_config = {"from_attributes": True}


class BookingDetail(Booking):
    """Booking joined with traveler and package summaries."""

    traveler: ActorSummary = Field(..., description="Requesting traveler")
    package: PackageSummary = Field(..., description="Booked package")
