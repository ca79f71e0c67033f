"""Notification router: the calling actor's inbox."""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import CurrentActor, DatabaseSession, parse_uuid
from ..core.exceptions import ApiException, InternalServerError
from ..models.actor import ActorRef
from ..schemas.common import envelope
from ..schemas.notification import MarkAllReadResult, Notification, UnreadCount
from ..services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    is_read: Optional[bool] = None,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """List the caller's notifications, newest first, optionally filtered by read state."""
    try:
        notifications = await NotificationService(db).list(actor, is_read=is_read)
        return JSONResponse(
            status_code=200,
            content=envelope(
                [Notification.model_validate(n) for n in notifications],
                "Notifications retrieved successfully.",
            ),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in notification listing",
            extra={"recipient": str(actor), "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("/unread-count")
async def unread_count(
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    try:
        count = await NotificationService(db).unread_count(actor)
        return JSONResponse(
            status_code=200,
            content=envelope(UnreadCount(unread=count), "Unread count retrieved successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in unread count",
            extra={"recipient": str(actor), "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.patch("/read-all")
async def mark_all_read(
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    try:
        updated = await NotificationService(db).mark_all_read(actor)
        return JSONResponse(
            status_code=200,
            content=envelope(MarkAllReadResult(updated=updated), "Notifications marked as read."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in mark all read",
            extra={"recipient": str(actor), "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.patch("/{notification_id}")
async def mark_read(
    notification_id: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Mark one of the caller's notifications as read."""
    notification_uuid = parse_uuid(notification_id, "notification_id")

    try:
        notification = await NotificationService(db).mark_read(notification_uuid, actor)
        return JSONResponse(
            status_code=200,
            content=envelope(Notification.model_validate(notification), "Notification marked as read."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in notification update",
            extra={"notification_id": notification_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    notification_uuid = parse_uuid(notification_id, "notification_id")

    try:
        await NotificationService(db).delete(notification_uuid, actor)
        return JSONResponse(
            status_code=200,
            content=envelope(None, "Notification deleted successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in notification deletion",
            extra={"notification_id": notification_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e
