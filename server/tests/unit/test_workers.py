"""Unit tests for background workers."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from travelsocial.core.observability import REGISTRY
from travelsocial.models import Booking, BookingStatus
from travelsocial.workers.inventory_audit_worker import InventoryAuditWorker
from travelsocial.workers.manager import WorkerManager


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


class TestInventoryAuditWorker:
    """Test cases for InventoryAuditWorker."""

    @pytest.mark.asyncio
    async def test_process_clean_inventory(self, session_factory, package):
        worker = InventoryAuditWorker(session_factory=session_factory)

        assert await worker.process() == []
        assert REGISTRY.get_sample_value("package_inventory_drift_packages") == 0

    @pytest.mark.asyncio
    async def test_process_reports_drift_without_repairing(self, session_factory, test_session, package, traveler):
        test_session.add(Booking(
            traveler_id=traveler.id,
            package_id=package.id,
            slots_booked=1,
            status=BookingStatus.CONFIRMED.value,
        ))
        await test_session.commit()
        worker = InventoryAuditWorker(session_factory=session_factory)

        first = await worker.process()
        second = await worker.process()

        assert [d.package_id for d in first] == [package.id]
        assert second == first
        assert REGISTRY.get_sample_value("package_inventory_drift_packages") == 1


class TestWorkerManager:
    """Test cases for WorkerManager."""

    @pytest.mark.asyncio
    async def test_start_all_respects_disabled_workers(self):
        manager = WorkerManager()

        await manager.start_all()

        assert not manager.get_worker("inventory_audit").is_running
        await manager.stop_all()

    @pytest.mark.asyncio
    async def test_start_and_stop_worker(self, session_factory):
        worker = InventoryAuditWorker(interval_seconds=3600, session_factory=session_factory)

        await worker.start()
        assert worker.is_running

        await worker.stop()
        assert not worker.is_running
