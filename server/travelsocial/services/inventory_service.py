"""Inventory service: atomic slot reservation and release on packages."""

import logging
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import and_, func, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import is_postgresql
from ..core.exceptions import (
    InsufficientCapacityError,
    InventoryInvariantError,
    NotFoundError,
    ValidationError,
)
from ..core.observability import metrics_collector
from ..models.booking import Booking, BookingStatus
from ..models.package import Package

logger = logging.getLogger(__name__)


class InventoryDrift(BaseModel):
    """A package whose counters disagree with its confirmed bookings."""

    model_config = {"frozen": True}

    package_id: UUID
    max_slots: int
    available_slots: int
    confirmed_slots: int

    @property
    def expected_available(self) -> int:
        return self.max_slots - self.confirmed_slots


class InventoryService:
    """
    Service for package capacity mutations.

    Every mutation is a single conditional UPDATE, so the check and the
    write cannot be interleaved by a concurrent transaction. Methods never
    commit; they run inside the caller's transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_package_with_lock(self, package_id: UUID) -> Package:
        """
        Get package by ID with advisory lock for booking transitions.

        Args:
            package_id: Package ID to search for

        Returns:
            Package entity with lock held

        Raises:
            NotFoundError: If package not found
        """
        # Released automatically at transaction end
        if is_postgresql(self.db):
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(hashtext(:package_id))"),
                {"package_id": str(package_id)}
            )

        package = await self._load_package(package_id)
        if not package:
            raise NotFoundError("package", str(package_id))

        logger.debug(
            "Acquired advisory lock for package",
            extra={"package_id": str(package_id)}
        )

        return package

    async def reserve(self, package_id: UUID, slots: int) -> int:
        """
        Take slots out of a package's availability.

        Args:
            package_id: Package to reserve on
            slots: Number of slots, at least 1

        Returns:
            Remaining available slots after the reservation

        Raises:
            ValidationError: If slots is below 1
            NotFoundError: If package not found
            InsufficientCapacityError: If fewer than ``slots`` are available
        """
        self._check_slots(slots)

        stmt = (
            update(Package)
            .where(Package.id == package_id, Package.available_slots >= slots)
            .values(available_slots=Package.available_slots - slots)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)

        if result.rowcount == 0:
            available = await self._current_available(package_id)
            if available is None:
                raise NotFoundError("package", str(package_id))

            metrics_collector.record_capacity_rejection("reserve")
            logger.warning(
                "Slot reservation failed - insufficient capacity",
                extra={
                    "package_id": str(package_id),
                    "requested_slots": slots,
                    "available_slots": available,
                }
            )
            raise InsufficientCapacityError(
                package_id=str(package_id),
                requested_slots=slots,
                available_slots=available
            )

        package = await self._load_package(package_id)
        logger.info(
            "Slots reserved",
            extra={
                "package_id": str(package_id),
                "slots": slots,
                "available_slots": package.available_slots,
            }
        )
        return package.available_slots

    async def release(self, package_id: UUID, slots: int) -> int:
        """
        Return slots to a package's availability.

        A release that would push availability above ``max_slots`` means the
        slots were never held; it fails instead of being clamped.

        Returns:
            Available slots after the release

        Raises:
            ValidationError: If slots is below 1
            NotFoundError: If package not found
            InventoryInvariantError: If the release would exceed max_slots
        """
        self._check_slots(slots)

        stmt = (
            update(Package)
            .where(
                Package.id == package_id,
                Package.available_slots + slots <= Package.max_slots,
            )
            .values(available_slots=Package.available_slots + slots)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)

        if result.rowcount == 0:
            counters = await self.db.execute(
                select(Package.available_slots, Package.max_slots).where(Package.id == package_id)
            )
            row = counters.first()
            if row is None:
                raise NotFoundError("package", str(package_id))

            logger.error(
                "Slot release would exceed package capacity",
                extra={
                    "package_id": str(package_id),
                    "slots": slots,
                    "available_slots": row.available_slots,
                    "max_slots": row.max_slots,
                }
            )
            raise InventoryInvariantError()

        package = await self._load_package(package_id)
        logger.info(
            "Slots released",
            extra={
                "package_id": str(package_id),
                "slots": slots,
                "available_slots": package.available_slots,
            }
        )
        return package.available_slots

    async def audit_inventory(self) -> list[InventoryDrift]:
        """
        Compare each package's counters with its confirmed bookings.

        Returns:
            Packages where ``max_slots - available_slots`` differs from the
            slots held by Confirmed bookings
        """
        confirmed = func.coalesce(func.sum(Booking.slots_booked), 0)
        stmt = (
            select(
                Package.id,
                Package.max_slots,
                Package.available_slots,
                confirmed.label("confirmed_slots"),
            )
            .outerjoin(
                Booking,
                and_(
                    Booking.package_id == Package.id,
                    Booking.status == BookingStatus.CONFIRMED.value,
                ),
            )
            .group_by(Package.id, Package.max_slots, Package.available_slots)
        )
        result = await self.db.execute(stmt)

        drifts = []
        for row in result:
            if row.max_slots - row.available_slots != row.confirmed_slots:
                drifts.append(
                    InventoryDrift(
                        package_id=row.id,
                        max_slots=row.max_slots,
                        available_slots=row.available_slots,
                        confirmed_slots=row.confirmed_slots,
                    )
                )
        return drifts

    async def _load_package(self, package_id: UUID) -> Package | None:
        # Conditional UPDATEs bypass the identity map, so always refresh.
        stmt = (
            select(Package)
            .where(Package.id == package_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _current_available(self, package_id: UUID) -> int | None:
        result = await self.db.execute(
            select(Package.available_slots).where(Package.id == package_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _check_slots(slots: int) -> None:
        if slots < 1:
            raise ValidationError(
                "Slots must be at least 1.",
                errors=[{"path": "slots", "message": "Must be at least 1"}],
            )
