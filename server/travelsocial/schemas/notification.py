"""Notification-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ..models.actor import ActorType
from ..models.notification import NotificationType, RelatedEntityType


class Notification(BaseModel):
    """Notification response schema."""

    id: UUID = Field(..., description="Unique notification ID")
    recipient_type: ActorType
    recipient_id: UUID
    sender_type: ActorType
    sender_id: UUID
    type: NotificationType = Field(..., description="Triggering event")
    related_entity_id: UUID = Field(..., description="Entity the event is about")
    related_entity_type: RelatedEntityType
    message: str
    is_read: bool
    created_at: datetime = Field(..., description="Creation time (ISO 8601)")

    model_config = {"from_attributes": True}


class UnreadCount(BaseModel):
    unread: int = Field(..., ge=0)


class MarkAllReadResult(BaseModel):
    updated: int = Field(..., ge=0)
