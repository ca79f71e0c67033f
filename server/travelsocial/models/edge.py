"""Follow and like edges, stored in one table discriminated by kind."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, UTCDateTime
from .actor import ActorRef, ActorType, utcnow


class EdgeKind(str, Enum):
    FOLLOW = "follow"
    LIKE = "like"


class LikeTargetKind(str, Enum):
    """Content kinds that can be liked."""
    POST = "post"
    COMMENT = "comment"
    TWEET = "tweet"
    PACKAGE = "package"


class Edge(Base):
    """
    Presence-set membership between an actor and a target.

    For follows ``target_type`` is an ``ActorType``; for likes it is a
    ``LikeTargetKind``. Presence of the row is the whole state.
    """

    __tablename__ = "edges"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    kind: Mapped[EdgeKind] = mapped_column(String(10), nullable=False)

    # The follower / the liker
    actor_type: Mapped[ActorType] = mapped_column(String(20), nullable=False)
    actor_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    # The followed actor / the liked content
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "kind", "actor_type", "actor_id", "target_type", "target_id",
            name="uq_edge_actor_target"
        ),
        Index("ix_edges_target", "kind", "target_type", "target_id"),
        CheckConstraint("kind IN ('follow', 'like')", name="ck_edge_kind_valid"),
        CheckConstraint(
            "NOT (kind = 'follow' AND actor_type = target_type AND actor_id = target_id)",
            name="ck_edge_no_self_follow"
        ),
    )

    @property
    def actor(self) -> ActorRef:
        return ActorRef(actor_type=ActorType(self.actor_type), actor_id=self.actor_id)

    def __repr__(self) -> str:
        return (
            f"<Edge(kind={self.kind}, actor={self.actor_type}:{self.actor_id}, "
            f"target={self.target_type}:{self.target_id})>"
        )
