"""Social graph and content Pydantic schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from ..models.actor import ActorType
from ..models.edge import LikeTargetKind


class ToggleState(str, Enum):
    ADDED = "added"
    REMOVED = "removed"


class FollowToggleResult(BaseModel):
    """Outcome of a follow toggle."""

    state: ToggleState
    target_type: ActorType
    target_id: UUID


class LikeToggleResult(BaseModel):
    """Outcome of a like toggle with the recomputed like count."""

    state: ToggleState
    target_kind: LikeTargetKind
    target_id: UUID
    like_count: int = Field(..., ge=0)


class LikedItem(BaseModel):
    target_kind: LikeTargetKind
    target_id: UUID
    liked_at: datetime


class CreateCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=400, description="Comment text")


class Comment(BaseModel):
    """Comment response schema."""

    id: UUID
    post_id: UUID
    owner_type: ActorType
    owner_id: UUID
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
