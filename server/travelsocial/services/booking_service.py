"""Booking service: the request/approval lifecycle of package bookings."""

import logging
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    InsufficientCapacityError,
    NotFoundError,
    ValidationError,
)
from ..core.observability import metrics_collector
from ..models.actor import ActorRef
from ..models.booking import Booking, BookingStatus
from ..models.notification import NotificationType, RelatedEntityType
from ..models.package import Package
from ..schemas.booking import BookingAction, BookingDetail
from ..schemas.package import PackageSummary
from .actor_resolver import ActorResolver
from .inventory_service import InventoryService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class BookingService:
    """
    Service for booking-related operations.

    Each public mutation runs as one transaction: the status change, the
    inventory change and the notification commit together or not at all.
    Capacity is only taken when an agency accepts a booking.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory_service = InventoryService(db)
        self.notification_service = NotificationService(db)
        self.actor_resolver = ActorResolver(db)

    async def create(self, traveler: ActorRef, package_id: UUID, slots: int) -> Booking:
        """
        Request slots on a package.

        Args:
            traveler: Requesting actor, must be a traveler
            package_id: Package to book
            slots: Number of slots requested

        Returns:
            The new Pending booking

        Raises:
            AuthorizationError: If the actor is not a traveler
            ValidationError: If slots is below 1 or the package is inactive
            NotFoundError: If the package or traveler does not exist
            InsufficientCapacityError: If the package currently has fewer slots available
        """
        if not traveler.is_traveler:
            raise AuthorizationError("Only travelers can book packages.")

        if slots < 1:
            raise ValidationError(
                "Slots booked must be at least 1.",
                errors=[{"path": "slots_booked", "message": "Must be at least 1"}],
            )

        try:
            traveler_record = await self.actor_resolver.get_or_raise(traveler)
            package = await self._get_package_or_raise(package_id)

            if not package.is_active:
                raise ValidationError("This package is not accepting bookings.")

            # Advisory only; nothing is reserved until the agency accepts.
            if slots > package.available_slots:
                metrics_collector.record_capacity_rejection("request")
                logger.warning(
                    "Booking request failed - insufficient capacity",
                    extra={
                        "package_id": str(package_id),
                        "requested_slots": slots,
                        "available_slots": package.available_slots,
                        "traveler": str(traveler),
                    }
                )
                raise InsufficientCapacityError(
                    package_id=str(package_id),
                    requested_slots=slots,
                    available_slots=package.available_slots
                )

            booking = Booking(
                traveler_id=traveler.actor_id,
                package_id=package.id,
                slots_booked=slots,
                status=BookingStatus.PENDING.value,
            )
            self.db.add(booking)
            await self.db.flush()

            await self.notification_service.notify(
                sender=traveler,
                recipient=package.owner,
                notification_type=NotificationType.BOOKING_REQUEST,
                related_entity_id=booking.id,
                related_entity_type=RelatedEntityType.BOOKING,
                message=(
                    f"{traveler_record.full_name} requested {slots} slot(s) "
                    f"for '{package.title}'."
                ),
            )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(booking)
        metrics_collector.record_booking_requested()

        logger.info(
            "Booking requested successfully",
            extra={
                "booking_id": str(booking.id),
                "package_id": str(package_id),
                "traveler": str(traveler),
                "slots": slots,
            }
        )

        return booking

    async def accept(self, booking_id: UUID, agency: ActorRef) -> Booking:
        """
        Confirm a Pending booking and take its slots from the package.

        If the package no longer has enough slots the whole transition is
        rolled back and the booking stays Pending.

        Raises:
            NotFoundError: If the booking does not exist
            AuthorizationError: If the agency does not own the package
            ConflictError: If the booking is not Pending
            InsufficientCapacityError: If the package cannot cover the slots
        """
        try:
            booking, package = await self._load_for_decision(booking_id, agency)
            observed = BookingStatus(booking.status)

            if observed != BookingStatus.PENDING:
                raise ConflictError(f"Booking is already {observed.value}.")

            await self._transition(booking_id, observed, BookingStatus.CONFIRMED)
            await self.inventory_service.reserve(package.id, booking.slots_booked)

            await self.notification_service.notify(
                sender=agency,
                recipient=booking.traveler_ref,
                notification_type=NotificationType.BOOKING_CONFIRMED,
                related_entity_id=booking.id,
                related_entity_type=RelatedEntityType.BOOKING,
                message=f"Your booking for '{package.title}' has been confirmed.",
            )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        metrics_collector.record_booking_transition("confirmed")
        logger.info(
            "Booking confirmed",
            extra={
                "booking_id": str(booking_id),
                "package_id": str(package.id),
                "slots": booking.slots_booked,
            }
        )

        return await self._reload(booking_id)

    async def reject(self, booking_id: UUID, agency: ActorRef) -> Booking:
        """
        Cancel a Pending or Confirmed booking; a Confirmed one gives its slots back.

        Raises:
            NotFoundError: If the booking does not exist
            AuthorizationError: If the agency does not own the package
            ConflictError: If the booking is already Cancelled
        """
        try:
            booking, package = await self._load_for_decision(booking_id, agency)
            observed = BookingStatus(booking.status)

            if observed == BookingStatus.CANCELLED:
                raise ConflictError("Booking is already Cancelled.")

            await self._transition(booking_id, observed, BookingStatus.CANCELLED)
            if observed == BookingStatus.CONFIRMED:
                await self.inventory_service.release(package.id, booking.slots_booked)

            await self.notification_service.notify(
                sender=agency,
                recipient=booking.traveler_ref,
                notification_type=NotificationType.BOOKING_REJECTED,
                related_entity_id=booking.id,
                related_entity_type=RelatedEntityType.BOOKING,
                message=f"Your booking for '{package.title}' has been rejected.",
            )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        metrics_collector.record_booking_transition("rejected")
        logger.info(
            "Booking rejected",
            extra={
                "booking_id": str(booking_id),
                "previous_status": observed.value,
                "released_slots": booking.slots_booked if observed == BookingStatus.CONFIRMED else 0,
            }
        )

        return await self._reload(booking_id)

    async def handle_action(self, booking_id: UUID, agency: ActorRef, action: str) -> Booking:
        """
        Dispatch an agency decision.

        Raises:
            ValidationError: If action is neither 'accept' nor 'reject'
        """
        if action == BookingAction.ACCEPT.value:
            return await self.accept(booking_id, agency)
        if action == BookingAction.REJECT.value:
            return await self.reject(booking_id, agency)

        raise ValidationError(
            "Invalid action. Use 'accept' or 'reject'.",
            errors=[{"path": "action", "message": "Must be 'accept' or 'reject'"}],
        )

    async def delete(self, booking_id: UUID, agency: ActorRef) -> None:
        """
        Remove a booking; a Confirmed one gives its slots back.

        Raises:
            NotFoundError: If the booking does not exist
            AuthorizationError: If the agency does not own the package
            ConflictError: If the booking changed concurrently
        """
        try:
            booking, package = await self._load_for_decision(booking_id, agency)
            observed = BookingStatus(booking.status)
            traveler = booking.traveler_ref
            slots = booking.slots_booked

            stmt = (
                delete(Booking)
                .where(Booking.id == booking_id, Booking.status == observed.value)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(stmt)
            if result.rowcount != 1:
                raise ConflictError("Booking was modified concurrently.")
            self.db.expunge(booking)

            if observed == BookingStatus.CONFIRMED:
                await self.inventory_service.release(package.id, slots)

            await self.notification_service.notify(
                sender=agency,
                recipient=traveler,
                notification_type=NotificationType.BOOKING_CANCELLED,
                related_entity_id=booking_id,
                related_entity_type=RelatedEntityType.BOOKING,
                message=f"Your booking for '{package.title}' has been cancelled.",
            )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        metrics_collector.record_booking_transition("deleted")
        logger.info(
            "Booking deleted",
            extra={
                "booking_id": str(booking_id),
                "previous_status": observed.value,
                "released_slots": slots if observed == BookingStatus.CONFIRMED else 0,
            }
        )

    async def get(self, booking_id: UUID) -> BookingDetail:
        """
        Get a booking joined with its traveler and package summaries.

        Raises:
            NotFoundError: If the booking does not exist
        """
        stmt = (
            select(Booking, Package)
            .join(Package, Package.id == Booking.package_id)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        row = result.first()
        if row is None:
            raise NotFoundError("booking", str(booking_id))

        booking, package = row
        traveler = await self.actor_resolver.get_or_raise(booking.traveler_ref)

        return BookingDetail(
            id=booking.id,
            traveler_id=booking.traveler_id,
            package_id=booking.package_id,
            slots_booked=booking.slots_booked,
            status=booking.status,
            created_at=booking.created_at,
            traveler=self.actor_resolver.to_summary(traveler),
            package=PackageSummary.model_validate(package),
        )

    async def list_for_traveler(self, traveler: ActorRef) -> list[Booking]:
        """List a traveler's bookings, newest first."""
        if not traveler.is_traveler:
            raise AuthorizationError("Only travelers have bookings.")

        stmt = (
            select(Booking)
            .where(Booking.traveler_id == traveler.actor_id)
            .order_by(Booking.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def list_for_package(self, package_id: UUID, agency: ActorRef) -> list[Booking]:
        """
        List the bookings of a package, newest first. Owner only.

        Raises:
            NotFoundError: If the package does not exist
            AuthorizationError: If the agency does not own the package
        """
        package = await self._get_package_or_raise(package_id)
        if package.owner != agency:
            raise AuthorizationError("You can only view bookings of your own packages.")

        stmt = (
            select(Booking)
            .where(Booking.package_id == package_id)
            .order_by(Booking.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def get_booking_by_id(self, booking_id: UUID) -> Booking | None:
        """Get booking by ID."""
        stmt = (
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _load_for_decision(self, booking_id: UUID, agency: ActorRef) -> tuple[Booking, Package]:
        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            raise NotFoundError("booking", str(booking_id))

        package = await self.inventory_service.get_package_with_lock(booking.package_id)
        if package.owner != agency:
            logger.warning(
                "Booking decision refused - not the package owner",
                extra={"booking_id": str(booking_id), "actor": str(agency)}
            )
            raise AuthorizationError("You can only manage bookings of your own packages.")

        # Re-read under the package lock so the observed status is current.
        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            raise NotFoundError("booking", str(booking_id))

        return booking, package

    async def _transition(self, booking_id: UUID, observed: BookingStatus, target: BookingStatus) -> None:
        stmt = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == observed.value)
            .values(status=target.value)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            logger.warning(
                "Booking transition lost a race",
                extra={
                    "booking_id": str(booking_id),
                    "from_status": observed.value,
                    "to_status": target.value,
                }
            )
            raise ConflictError("Booking was modified concurrently.")

    async def _get_package_or_raise(self, package_id: UUID) -> Package:
        stmt = (
            select(Package)
            .where(Package.id == package_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        package = result.scalar_one_or_none()
        if not package:
            raise NotFoundError("package", str(package_id))
        return package

    async def _reload(self, booking_id: UUID) -> Booking:
        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            raise NotFoundError("booking", str(booking_id))
        return booking
