"""Booking model definition."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base, UTCDateTime
from .actor import ActorRef, utcnow

if TYPE_CHECKING:
    from .package import Package
    from .profile import Traveler


class BookingStatus(str, Enum):
    """Booking status enumeration.

    Pending is the only state an agency can accept; a Confirmed booking can
    still be revoked (rejected) or deleted, which returns its slots.
    """
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class Booking(Base):
    """A traveler's request for slots on a package."""

    __tablename__ = "bookings"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Parties
    traveler_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("travelers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    package_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Booking details
    slots_booked: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now()
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("slots_booked > 0", name="ck_booking_slots_positive"),
        CheckConstraint(
            "status IN ('Pending', 'Confirmed', 'Cancelled')",
            name="ck_booking_status_valid"
        ),
    )

    # Relationships
    traveler: Mapped["Traveler"] = relationship("Traveler", back_populates="bookings")
    package: Mapped["Package"] = relationship("Package", back_populates="bookings")

    @property
    def traveler_ref(self) -> ActorRef:
        return ActorRef.traveler(self.traveler_id)

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, package_id={self.package_id}, "
            f"slots_booked={self.slots_booked}, status={self.status})>"
        )
