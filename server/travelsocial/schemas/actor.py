"""Actor-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, Field

from ..models.actor import ActorType


class ActorSummary(BaseModel):
    """Public identity card of a traveler or an agency."""

    actor_type: ActorType = Field(..., description="Traveler or Agency")
    actor_id: UUID = Field(..., description="Actor ID")
    name: str = Field(..., description="Traveler full name or agency name")
    user_name: str = Field(..., description="Unique handle")
    avatar: str = Field(..., description="Avatar URL")
