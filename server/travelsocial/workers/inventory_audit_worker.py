"""Background worker that checks package counters against confirmed bookings."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.database import async_session_factory
from ..core.observability import metrics_collector
from ..services.inventory_service import InventoryDrift, InventoryService
from .base import BaseWorker

logger = logging.getLogger(__name__)


class InventoryAuditWorker(BaseWorker):
    """
    Periodically reports packages whose available slots disagree with
    the slots held by their Confirmed bookings.

    Report only: drift is logged and exported as a gauge, never repaired.
    """

    def __init__(
        self,
        interval_seconds: int = 300,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
    ):
        super().__init__(name="InventoryAudit", interval_seconds=interval_seconds)
        self.session_factory = session_factory

    async def process(self) -> list[InventoryDrift]:
        """Run one audit pass and return the drifted packages."""
        async with self.session_factory() as db:
            drifts = await InventoryService(db).audit_inventory()

        for drift in drifts:
            logger.error(
                "Inventory drift detected",
                extra={
                    "package_id": str(drift.package_id),
                    "max_slots": drift.max_slots,
                    "available_slots": drift.available_slots,
                    "confirmed_slots": drift.confirmed_slots,
                    "expected_available": drift.expected_available,
                    "worker": self.name,
                }
            )

        metrics_collector.set_inventory_drift(len(drifts))
        return drifts
