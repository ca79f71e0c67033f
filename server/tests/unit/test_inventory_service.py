"""Unit tests for InventoryService."""

from uuid import uuid4

import pytest

from travelsocial.core.exceptions import (
    InsufficientCapacityError,
    InventoryInvariantError,
    NotFoundError,
    ValidationError,
)
from travelsocial.models import Booking, BookingStatus
from travelsocial.services.inventory_service import InventoryService


class TestInventoryService:
    """Test cases for InventoryService."""

    @pytest.mark.asyncio
    async def test_reserve_decrements_available_slots(self, test_session, package):
        """Test that a reservation takes slots out of availability."""
        service = InventoryService(test_session)

        remaining = await service.reserve(package.id, 3)
        await test_session.commit()

        assert remaining == 2
        reloaded = await service.get_package_with_lock(package.id)
        assert reloaded.available_slots == 2
        assert reloaded.max_slots == 5

    @pytest.mark.asyncio
    async def test_reserve_exact_remaining_capacity(self, test_session, package):
        service = InventoryService(test_session)

        assert await service.reserve(package.id, 5) == 0

    @pytest.mark.asyncio
    async def test_reserve_insufficient_capacity(self, test_session, package):
        """Test that over-reserving fails without changing availability."""
        service = InventoryService(test_session)
        package_id = package.id

        with pytest.raises(InsufficientCapacityError) as exc_info:
            await service.reserve(package_id, 6)

        assert exc_info.value.status_code == 400
        assert exc_info.value.requested_slots == 6
        assert exc_info.value.available_slots == 5

        reloaded = await service.get_package_with_lock(package_id)
        assert reloaded.available_slots == 5

    @pytest.mark.asyncio
    async def test_reserve_unknown_package(self, test_session):
        service = InventoryService(test_session)

        with pytest.raises(NotFoundError):
            await service.reserve(uuid4(), 1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("slots", [0, -1])
    async def test_reserve_and_release_reject_non_positive_slots(self, test_session, package, slots):
        service = InventoryService(test_session)

        with pytest.raises(ValidationError):
            await service.reserve(package.id, slots)
        with pytest.raises(ValidationError):
            await service.release(package.id, slots)

    @pytest.mark.asyncio
    async def test_release_restores_slots(self, test_session, package):
        service = InventoryService(test_session)

        await service.reserve(package.id, 4)
        remaining = await service.release(package.id, 3)

        assert remaining == 4

    @pytest.mark.asyncio
    async def test_release_above_max_is_an_invariant_error(self, test_session, package):
        """Test that a double release is surfaced, never clamped."""
        service = InventoryService(test_session)
        package_id = package.id

        await service.reserve(package_id, 2)
        await service.release(package_id, 2)

        with pytest.raises(InventoryInvariantError) as exc_info:
            await service.release(package_id, 2)

        assert exc_info.value.status_code == 500
        reloaded = await service.get_package_with_lock(package_id)
        assert reloaded.available_slots == 5

    @pytest.mark.asyncio
    async def test_release_unknown_package(self, test_session):
        service = InventoryService(test_session)

        with pytest.raises(NotFoundError):
            await service.release(uuid4(), 1)

    @pytest.mark.asyncio
    async def test_get_package_with_lock_not_found(self, test_session):
        service = InventoryService(test_session)

        with pytest.raises(NotFoundError):
            await service.get_package_with_lock(uuid4())

    @pytest.mark.asyncio
    async def test_audit_inventory_reports_drift(self, test_session, package, traveler):
        """Test that the audit compares counters against confirmed bookings."""
        service = InventoryService(test_session)

        assert await service.audit_inventory() == []

        # A confirmed booking whose slots were never reserved
        test_session.add(Booking(
            traveler_id=traveler.id,
            package_id=package.id,
            slots_booked=2,
            status=BookingStatus.CONFIRMED.value,
        ))
        await test_session.commit()

        drifts = await service.audit_inventory()

        assert len(drifts) == 1
        assert drifts[0].package_id == package.id
        assert drifts[0].confirmed_slots == 2
        assert drifts[0].available_slots == 5
        assert drifts[0].expected_available == 3

    @pytest.mark.asyncio
    async def test_audit_inventory_ignores_pending_bookings(self, test_session, package, traveler):
        service = InventoryService(test_session)

        test_session.add(Booking(
            traveler_id=traveler.id,
            package_id=package.id,
            slots_booked=2,
            status=BookingStatus.PENDING.value,
        ))
        await test_session.commit()

        assert await service.audit_inventory() == []
