"""Traveler and Agency account models."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base, UTCDateTime
from .actor import ActorRef, ActorType, utcnow

if TYPE_CHECKING:
    from .booking import Booking
    from .package import Package


class Traveler(Base):
    """Individual traveler account."""

    __tablename__ = "travelers"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    full_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    avatar: Mapped[str] = mapped_column(String(512), nullable=False, default="profile.jpg")

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("user_name = lower(user_name)", name="ck_traveler_user_name_lowercase"),
    )

    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="traveler")

    actor_type = ActorType.TRAVELER

    @property
    def display_name(self) -> str:
        return self.full_name

    @property
    def ref(self) -> ActorRef:
        return ActorRef.traveler(self.id)

    def __repr__(self) -> str:
        return f"<Traveler(id={self.id}, user_name='{self.user_name}')>"


class Agency(Base):
    """Travel agency account; the only kind of actor that publishes packages."""

    __tablename__ = "agencies"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    agency_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    avatar: Mapped[str] = mapped_column(String(512), nullable=False, default="defaultImg.jpg")

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("user_name = lower(user_name)", name="ck_agency_user_name_lowercase"),
    )

    packages: Mapped[list["Package"]] = relationship(
        "Package",
        back_populates="agency",
        cascade="all, delete-orphan"
    )

    actor_type = ActorType.AGENCY

    @property
    def display_name(self) -> str:
        return self.agency_name

    @property
    def ref(self) -> ActorRef:
        return ActorRef.agency(self.id)

    def __repr__(self) -> str:
        return f"<Agency(id={self.id}, user_name='{self.user_name}')>"
