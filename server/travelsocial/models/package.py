"""Package model definition."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base, UTCDateTime
from .actor import ActorRef, utcnow

if TYPE_CHECKING:
    from .booking import Booking
    from .profile import Agency


class Package(Base):
    """Travel package published by an agency, with a finite number of slots."""

    __tablename__ = "packages"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Owning agency
    agency_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("agencies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Package details
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    main_location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # minor units
    start_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Inventory; only InventoryService writes available_slots
    max_slots: Mapped[int] = mapped_column(Integer, nullable=False)
    available_slots: Mapped[int] = mapped_column(Integer, nullable=False)

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
        CheckConstraint("max_slots >= 1", name="ck_package_max_slots_positive"),
        CheckConstraint("available_slots >= 0", name="ck_package_available_slots_non_negative"),
        CheckConstraint("available_slots <= max_slots", name="ck_package_available_slots_lte_max"),
        CheckConstraint("price >= 0", name="ck_package_price_non_negative"),
        CheckConstraint("start_date < end_date", name="ck_package_dates_ordered"),
    )

    # Relationships
    agency: Mapped["Agency"] = relationship("Agency", back_populates="packages")
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking",
        back_populates="package",
        cascade="all, delete-orphan"
    )

    @property
    def owner(self) -> ActorRef:
        return ActorRef.agency(self.agency_id)

    def __repr__(self) -> str:
        return (
            f"<Package(id={self.id}, agency_id={self.agency_id}, "
            f"slots={self.available_slots}/{self.max_slots})>"
        )
