"""Notification service: recording events for recipients and managing inboxes."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundOrUnauthorizedError
from ..core.observability import metrics_collector
from ..models.actor import ActorRef
from ..models.notification import Notification, NotificationType, RelatedEntityType

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for notification-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def notify(
        self,
        sender: ActorRef,
        recipient: ActorRef,
        notification_type: NotificationType,
        related_entity_id: UUID,
        related_entity_type: RelatedEntityType,
        message: str,
    ) -> Optional[Notification]:
        """
        Record a notification inside the caller's transaction.

        Nothing is written when sender and recipient are the same actor.
        The row is flushed but not committed, so it shares the fate of the
        business mutation that triggered it.

        Args:
            sender: Actor whose action caused the event
            recipient: Actor to inform
            notification_type: Triggering event
            related_entity_id: Entity the event is about
            related_entity_type: Kind of that entity
            message: Human-readable text

        Returns:
            The new notification, or None when suppressed
        """
        if sender == recipient:
            metrics_collector.record_notification(notification_type.value, suppressed=True)
            logger.debug(
                "Self-notification suppressed",
                extra={"actor": str(sender), "type": notification_type.value}
            )
            return None

        notification = Notification(
            recipient_type=recipient.actor_type.value,
            recipient_id=recipient.actor_id,
            sender_type=sender.actor_type.value,
            sender_id=sender.actor_id,
            type=notification_type.value,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type.value,
            message=message,
            is_read=False,
        )
        self.db.add(notification)
        await self.db.flush()

        metrics_collector.record_notification(notification_type.value)
        logger.info(
            "Notification recorded",
            extra={
                "notification_id": str(notification.id),
                "type": notification_type.value,
                "recipient": str(recipient),
                "sender": str(sender),
            }
        )

        return notification

    async def list(self, recipient: ActorRef, is_read: Optional[bool] = None) -> list[Notification]:
        """
        List a recipient's notifications, newest first.

        Args:
            recipient: Inbox owner
            is_read: Optional read-state filter
        """
        stmt = select(Notification).where(*self._addressed_to(recipient))
        if is_read is not None:
            stmt = stmt.where(Notification.is_read == is_read)
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def mark_read(self, notification_id: UUID, recipient: ActorRef) -> Notification:
        """
        Mark one of the recipient's notifications as read.

        Raises:
            NotFoundOrUnauthorizedError: If the id does not exist or belongs to someone else
        """
        notification = await self._get_owned(notification_id, recipient)
        notification.is_read = True
        await self.db.commit()
        await self.db.refresh(notification)
        return notification

    async def delete(self, notification_id: UUID, recipient: ActorRef) -> None:
        """
        Delete one of the recipient's notifications.

        Raises:
            NotFoundOrUnauthorizedError: If the id does not exist or belongs to someone else
        """
        stmt = delete(Notification).where(
            Notification.id == notification_id,
            *self._addressed_to(recipient),
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundOrUnauthorizedError("notification")

        await self.db.commit()
        logger.info(
            "Notification deleted",
            extra={"notification_id": str(notification_id), "recipient": str(recipient)}
        )

    async def unread_count(self, recipient: ActorRef) -> int:
        stmt = select(func.count(Notification.id)).where(
            *self._addressed_to(recipient),
            Notification.is_read.is_(False),
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def mark_all_read(self, recipient: ActorRef) -> int:
        """Mark every unread notification of the recipient as read; returns how many changed."""
        stmt = (
            update(Notification)
            .where(*self._addressed_to(recipient), Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount

    async def _get_owned(self, notification_id: UUID, recipient: ActorRef) -> Notification:
        stmt = (
            select(Notification)
            .where(Notification.id == notification_id, *self._addressed_to(recipient))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFoundOrUnauthorizedError("notification")
        return notification

    @staticmethod
    def _addressed_to(recipient: ActorRef) -> tuple:
        return (
            Notification.recipient_type == recipient.actor_type.value,
            Notification.recipient_id == recipient.actor_id,
        )
