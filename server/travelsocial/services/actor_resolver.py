"""Resolution of polymorphic actor references to traveler and agency records."""

import logging
from typing import Iterable, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models.actor import ActorRef, ActorType
from ..models.profile import Agency, Traveler
from ..schemas.actor import ActorSummary

logger = logging.getLogger(__name__)

ActorRecord = Union[Traveler, Agency]

# Handle lookups try travelers before agencies.
ACTOR_MODELS: dict[ActorType, type] = {
    ActorType.TRAVELER: Traveler,
    ActorType.AGENCY: Agency,
}


class ActorResolver:
    """Single place that maps an ``ActorRef`` to its backing record."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, ref: ActorRef) -> Optional[ActorRecord]:
        model = ACTOR_MODELS[ActorType(ref.actor_type)]
        return await self.db.get(model, ref.actor_id)

    async def get_or_raise(self, ref: ActorRef) -> ActorRecord:
        """
        Load the record behind an actor reference.

        Raises:
            NotFoundError: If no such traveler or agency exists
        """
        record = await self.get(ref)
        if not record:
            raise NotFoundError(ActorType(ref.actor_type).value.lower(), str(ref.actor_id))
        return record

    async def find_by_handle(self, user_name: str) -> ActorRef:
        """
        Resolve a user name to an actor, case-insensitively.

        Args:
            user_name: Handle to look up

        Returns:
            Reference to the first traveler or agency holding the handle

        Raises:
            NotFoundError: If no actor has this handle
        """
        handle = user_name.strip().lower()
        for actor_type, model in ACTOR_MODELS.items():
            stmt = select(model.id).where(func.lower(model.user_name) == handle)
            result = await self.db.execute(stmt)
            actor_id = result.scalar_one_or_none()
            if actor_id is not None:
                return ActorRef(actor_type=actor_type, actor_id=actor_id)

        logger.info("Actor handle not found", extra={"user_name": handle})
        raise NotFoundError("user", message=f"User '{user_name}' not found.")

    async def summarize(self, refs: Iterable[ActorRef]) -> list[ActorSummary]:
        """
        Build public summaries for a list of actors, keeping input order.

        Records are fetched with one query per actor type. References whose
        record no longer exists are skipped.
        """
        refs = list(refs)
        records: dict[ActorRef, ActorRecord] = {}
        for actor_type, model in ACTOR_MODELS.items():
            ids = {ref.actor_id for ref in refs if ActorType(ref.actor_type) == actor_type}
            if not ids:
                continue
            result = await self.db.execute(select(model).where(model.id.in_(ids)))
            for record in result.scalars():
                records[ActorRef(actor_type=actor_type, actor_id=record.id)] = record

        summaries = []
        for ref in refs:
            record = records.get(ActorRef(actor_type=ActorType(ref.actor_type), actor_id=ref.actor_id))
            if record is not None:
                summaries.append(self.to_summary(record))
        return summaries

    @staticmethod
    def to_summary(record: ActorRecord) -> ActorSummary:
        return ActorSummary(
            actor_type=record.actor_type,
            actor_id=record.id,
            name=record.display_name,
            user_name=record.user_name,
            avatar=record.avatar,
        )
