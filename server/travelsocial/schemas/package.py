"""Package-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class CreatePackageRequest(BaseModel):
    """Request schema for publishing a package."""

    title: str = Field(..., min_length=1, max_length=255, description="Package title")
    description: str = Field("", max_length=5000, description="Package description")
    main_location: str = Field("", max_length=255, description="Main destination")
    price: int = Field(0, ge=0, description="Price in minor units")
    start_date: datetime = Field(..., description="Trip start (ISO 8601)")
    end_date: datetime = Field(..., description="Trip end (ISO 8601)")
    max_slots: int = Field(..., ge=1, le=10000, description="Total capacity")

    @model_validator(mode="after")
    def check_dates(self) -> "CreatePackageRequest":
        if self.start_date >= self.end_date:
            raise ValueError("End date must be after start date.")
        return self


class Package(BaseModel):
    """Package response schema."""

    id: UUID = Field(..., description="Unique package ID")
    agency_id: UUID = Field(..., description="Owning agency ID")
    title: str = Field(..., description="Package title")
    description: str = Field(..., description="Package description")
    main_location: str = Field(..., description="Main destination")
    price: int = Field(..., ge=0, description="Price in minor units")
    start_date: datetime = Field(..., description="Trip start (ISO 8601)")
    end_date: datetime = Field(..., description="Trip end (ISO 8601)")
    max_slots: int = Field(..., ge=1, description="Total capacity")
    available_slots: int = Field(..., ge=0, description="Slots not yet taken by confirmed bookings")
    is_active: bool = Field(..., description="Whether the package accepts bookings")

    model_config = {"from_attributes": True}


class PackageSummary(BaseModel):
    """Package fields embedded in a joined booking view."""

    id: UUID
    title: str
    agency_id: UUID
    start_date: datetime
    end_date: datetime
    available_slots: int

    model_config = {"from_attributes": True}
