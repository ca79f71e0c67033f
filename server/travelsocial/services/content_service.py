"""Content service: owner lookup for likeable content and comments on posts."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models.actor import ActorRef
from ..models.content import Comment, Post, Tweet
from ..models.edge import LikeTargetKind
from ..models.notification import NotificationType, RelatedEntityType
from ..models.package import Package
from .actor_resolver import ActorResolver
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

CONTENT_MODELS: dict[LikeTargetKind, type] = {
    LikeTargetKind.POST: Post,
    LikeTargetKind.COMMENT: Comment,
    LikeTargetKind.TWEET: Tweet,
    LikeTargetKind.PACKAGE: Package,
}


class ContentService:
    """Service for the content that social edges point at."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.actor_resolver = ActorResolver(db)
        self.notification_service = NotificationService(db)

    async def get_owner(self, kind: LikeTargetKind, target_id: UUID) -> ActorRef:
        """
        Resolve who owns a piece of content.

        Posts, comments and tweets carry their owner; a package is owned by
        its agency.

        Raises:
            NotFoundError: If the target does not exist
        """
        target = await self.db.get(CONTENT_MODELS[kind], target_id)
        if not target:
            raise NotFoundError(kind.value, str(target_id))
        return target.owner

    async def add_comment(self, actor: ActorRef, post_id: UUID, content: str) -> Comment:
        """
        Comment on a post and notify its owner.

        Raises:
            NotFoundError: If the actor or the post does not exist
        """
        await self.actor_resolver.get_or_raise(actor)

        try:
            post = await self.db.get(Post, post_id)
            if not post:
                raise NotFoundError("post", str(post_id))

            comment = Comment(
                post_id=post.id,
                owner_type=actor.actor_type.value,
                owner_id=actor.actor_id,
                content=content,
            )
            self.db.add(comment)
            await self.db.flush()

            await self.notification_service.notify(
                sender=actor,
                recipient=post.owner,
                notification_type=NotificationType.COMMENT,
                related_entity_id=post.id,
                related_entity_type=RelatedEntityType.POST,
                message="Someone commented on your post.",
            )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(comment)
        logger.info(
            "Comment added",
            extra={"comment_id": str(comment.id), "post_id": str(post_id), "actor": str(actor)}
        )
        return comment
