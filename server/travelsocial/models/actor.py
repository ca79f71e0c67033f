"""Actor identity shared by every model that points at "a user"."""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class ActorType(str, Enum):
    """The two kinds of account that can act on the platform."""
    TRAVELER = "Traveler"
    AGENCY = "Agency"


class ActorRef(BaseModel):
    """
    Discriminated reference to a traveler or an agency.

    Stored flattened as ``<role>_type`` / ``<role>_id`` column pairs and
    compared by both fields, so a traveler and an agency that happen to
    share an id are different actors.
    """

    model_config = {"frozen": True}

    actor_type: ActorType
    actor_id: UUID

    @classmethod
    def traveler(cls, actor_id: UUID) -> "ActorRef":
        return cls(actor_type=ActorType.TRAVELER, actor_id=actor_id)

    @classmethod
    def agency(cls, actor_id: UUID) -> "ActorRef":
        return cls(actor_type=ActorType.AGENCY, actor_id=actor_id)

    @property
    def is_traveler(self) -> bool:
        return self.actor_type == ActorType.TRAVELER

    @property
    def is_agency(self) -> bool:
        return self.actor_type == ActorType.AGENCY

    def __str__(self) -> str:
        return f"{self.actor_type.value}:{self.actor_id}"


def utcnow() -> datetime:
    """Timezone-aware current time used for Python-side timestamp defaults."""
    return datetime.now(timezone.utc)
