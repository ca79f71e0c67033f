"""Notification model definition."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, UTCDateTime
from .actor import ActorRef, ActorType, utcnow


class NotificationType(str, Enum):
    """Events that produce a notification."""
    LIKE = "LIKE"
    COMMENT = "COMMENT"
    FOLLOW = "FOLLOW"
    TWEET = "TWEET"
    BOOKING = "BOOKING"
    NEW_PACKAGE = "NEW_PACKAGE"
    BOOKING_REQUEST = "BOOKING_REQUEST"
    BOOKING_REJECTED = "BOOKING_REJECTED"
    BOOKING_CONFIRMED = "BOOKING_CONFIRMED"
    BOOKING_CANCELLED = "BOOKING_CANCELLED"


class RelatedEntityType(str, Enum):
    """Kind of entity a notification points at."""
    POST = "post"
    COMMENT = "comment"
    TWEET = "tweet"
    PACKAGE = "package"
    FOLLOW = "follow"
    BOOKING = "booking"
    REQUEST = "request"


class Notification(Base):
    """
    Recipient-addressed record of a social or booking event.

    Immutable apart from ``is_read``. ``related_entity_id`` carries no
    foreign key: the entity may be deleted (a removed booking still has
    its cancellation notice).
    """

    __tablename__ = "notifications"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Addressing
    recipient_type: Mapped[ActorType] = mapped_column(String(20), nullable=False)
    recipient_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    sender_type: Mapped[ActorType] = mapped_column(String(20), nullable=False)
    sender_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    # Event
    type: Mapped[NotificationType] = mapped_column(String(32), nullable=False)
    related_entity_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    related_entity_type: Mapped[RelatedEntityType] = mapped_column(String(20), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        Index(
            "ix_notifications_recipient_created",
            "recipient_type",
            "recipient_id",
            "created_at",
        ),
        CheckConstraint("length(message) > 0", name="ck_notification_message_not_empty"),
        CheckConstraint(
            "NOT (recipient_type = sender_type AND recipient_id = sender_id)",
            name="ck_notification_not_self_addressed"
        ),
    )

    @property
    def recipient(self) -> ActorRef:
        return ActorRef(actor_type=ActorType(self.recipient_type), actor_id=self.recipient_id)

    @property
    def sender(self) -> ActorRef:
        return ActorRef(actor_type=ActorType(self.sender_type), actor_id=self.sender_id)

    def __repr__(self) -> str:
        return (
            f"<Notification(id={self.id}, type={self.type}, "
            f"recipient={self.recipient_type}:{self.recipient_id}, is_read={self.is_read})>"
        )
