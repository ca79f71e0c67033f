"""Minimal content models: the things that can be liked or commented on."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, UTCDateTime
from .actor import ActorRef, ActorType, utcnow


class OwnedContent:
    """Columns shared by content that belongs to a traveler or an agency."""

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    owner_type: Mapped[ActorType] = mapped_column(String(20), nullable=False)
    owner_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )

    @property
    def owner(self) -> ActorRef:
        return ActorRef(actor_type=ActorType(self.owner_type), actor_id=self.owner_id)


class Post(OwnedContent, Base):
    __tablename__ = "posts"

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)


class Tweet(OwnedContent, Base):
    __tablename__ = "tweets"

    content: Mapped[str] = mapped_column(String(280), nullable=False)


class Comment(OwnedContent, Base):
    __tablename__ = "comments"

    post_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    content: Mapped[str] = mapped_column(String(400), nullable=False)
