"""Social service: follow and like toggles over the unified edge table."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, InvalidOperationError
from ..core.observability import metrics_collector
from ..models.actor import ActorRef, ActorType
from ..models.edge import Edge, EdgeKind, LikeTargetKind
from ..models.notification import NotificationType, RelatedEntityType
from ..schemas.actor import ActorSummary
from ..schemas.social import FollowToggleResult, LikedItem, LikeToggleResult, ToggleState
from .actor_resolver import ActorResolver
from .content_service import ContentService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class SocialService:
    """
    Service for follow and like edges.

    A toggle removes the edge when present and inserts it otherwise; only
    an insertion notifies the target's owner.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.actor_resolver = ActorResolver(db)
        self.content_service = ContentService(db)
        self.notification_service = NotificationService(db)

    async def toggle_follow(self, actor: ActorRef, user_name: str) -> FollowToggleResult:
        """
        Follow or unfollow the actor holding ``user_name``.

        Raises:
            NotFoundError: If no actor has this handle
            InvalidOperationError: If the actor targets itself
            ConflictError: If a concurrent toggle inserted the same edge
        """
        target = await self.actor_resolver.find_by_handle(user_name)
        if target == actor:
            raise InvalidOperationError("You cannot follow yourself.")

        follower = await self.actor_resolver.get_or_raise(actor)
        existing = await self._find_edge(EdgeKind.FOLLOW, actor, target.actor_type.value, target.actor_id)

        try:
            if existing:
                await self.db.delete(existing)
                state = ToggleState.REMOVED
            else:
                edge = Edge(
                    kind=EdgeKind.FOLLOW.value,
                    actor_type=actor.actor_type.value,
                    actor_id=actor.actor_id,
                    target_type=target.actor_type.value,
                    target_id=target.actor_id,
                )
                await self._insert_edge(edge)
                await self.notification_service.notify(
                    sender=actor,
                    recipient=target,
                    notification_type=NotificationType.FOLLOW,
                    related_entity_id=edge.id,
                    related_entity_type=RelatedEntityType.FOLLOW,
                    message=f"{follower.display_name} started following you.",
                )
                state = ToggleState.ADDED

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        metrics_collector.record_edge_toggle(EdgeKind.FOLLOW.value, state.value)
        logger.info(
            "Follow toggled",
            extra={"actor": str(actor), "target": str(target), "state": state.value}
        )

        return FollowToggleResult(
            state=state,
            target_type=target.actor_type,
            target_id=target.actor_id,
        )

    async def toggle_like(self, actor: ActorRef, kind: LikeTargetKind, target_id: UUID) -> LikeToggleResult:
        """
        Like or unlike a post, comment, tweet, or package.

        Liking one's own content is allowed; only the notification is skipped.

        Returns:
            The new state and the recomputed like count

        Raises:
            NotFoundError: If the actor or the target does not exist
            ConflictError: If a concurrent toggle inserted the same edge
        """
        await self.actor_resolver.get_or_raise(actor)
        owner = await self.content_service.get_owner(kind, target_id)
        existing = await self._find_edge(EdgeKind.LIKE, actor, kind.value, target_id)

        try:
            if existing:
                await self.db.delete(existing)
                state = ToggleState.REMOVED
            else:
                edge = Edge(
                    kind=EdgeKind.LIKE.value,
                    actor_type=actor.actor_type.value,
                    actor_id=actor.actor_id,
                    target_type=kind.value,
                    target_id=target_id,
                )
                await self._insert_edge(edge)
                await self.notification_service.notify(
                    sender=actor,
                    recipient=owner,
                    notification_type=NotificationType.LIKE,
                    related_entity_id=target_id,
                    related_entity_type=RelatedEntityType(kind.value),
                    message=f"Someone liked your {kind.value}.",
                )
                state = ToggleState.ADDED

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        like_count = await self.like_count(kind, target_id)
        metrics_collector.record_edge_toggle(EdgeKind.LIKE.value, state.value)
        logger.info(
            "Like toggled",
            extra={
                "actor": str(actor),
                "target_kind": kind.value,
                "target_id": str(target_id),
                "state": state.value,
                "like_count": like_count,
            }
        )

        return LikeToggleResult(
            state=state,
            target_kind=kind,
            target_id=target_id,
            like_count=like_count,
        )

    async def like_count(self, kind: LikeTargetKind, target_id: UUID) -> int:
        """Number of distinct actors that like the target."""
        likers = (
            select(Edge.actor_type, Edge.actor_id)
            .where(
                Edge.kind == EdgeKind.LIKE.value,
                Edge.target_type == kind.value,
                Edge.target_id == target_id,
            )
            .distinct()
            .subquery()
        )
        result = await self.db.execute(select(func.count()).select_from(likers))
        return result.scalar() or 0

    async def list_followers(self, user_name: str) -> list[ActorSummary]:
        target = await self.actor_resolver.find_by_handle(user_name)
        stmt = (
            select(Edge)
            .where(
                Edge.kind == EdgeKind.FOLLOW.value,
                Edge.target_type == target.actor_type.value,
                Edge.target_id == target.actor_id,
            )
            .order_by(Edge.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return await self.actor_resolver.summarize(edge.actor for edge in result.scalars())

    async def list_following(self, user_name: str) -> list[ActorSummary]:
        actor = await self.actor_resolver.find_by_handle(user_name)
        stmt = (
            select(Edge)
            .where(
                Edge.kind == EdgeKind.FOLLOW.value,
                Edge.actor_type == actor.actor_type.value,
                Edge.actor_id == actor.actor_id,
            )
            .order_by(Edge.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return await self.actor_resolver.summarize(
            ActorRef(actor_type=ActorType(edge.target_type), actor_id=edge.target_id)
            for edge in result.scalars()
        )

    async def list_liked(self, actor: ActorRef, kind: LikeTargetKind) -> list[LikedItem]:
        """Items of one kind the actor has liked, newest first."""
        stmt = (
            select(Edge)
            .where(
                Edge.kind == EdgeKind.LIKE.value,
                Edge.actor_type == actor.actor_type.value,
                Edge.actor_id == actor.actor_id,
                Edge.target_type == kind.value,
            )
            .order_by(Edge.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [
            LikedItem(target_kind=kind, target_id=edge.target_id, liked_at=edge.created_at)
            for edge in result.scalars()
        ]

    async def _find_edge(self, kind: EdgeKind, actor: ActorRef, target_type: str, target_id: UUID) -> Edge | None:
        stmt = select(Edge).where(
            Edge.kind == kind.value,
            Edge.actor_type == actor.actor_type.value,
            Edge.actor_id == actor.actor_id,
            Edge.target_type == target_type,
            Edge.target_id == target_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _insert_edge(self, edge: Edge) -> None:
        self.db.add(edge)
        try:
            await self.db.flush()
        except IntegrityError:
            logger.warning(
                "Edge insert lost a race",
                extra={
                    "kind": edge.kind,
                    "actor": f"{edge.actor_type}:{edge.actor_id}",
                    "target": f"{edge.target_type}:{edge.target_id}",
                }
            )
            raise ConflictError("This action was already applied. Please retry.")
