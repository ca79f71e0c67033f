"""Booking router for the request/approval workflow."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import (
    AgencyActor,
    CurrentActor,
    DatabaseSession,
    TravelerActor,
    parse_uuid,
)
from ..core.exceptions import ApiException, InternalServerError
from ..models.actor import ActorRef
from ..models.booking import BookingStatus
from ..schemas.booking import Booking, BookingActionRequest, CreateBookingRequest
from ..schemas.common import envelope
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])

_ACTION_MESSAGES = {
    BookingStatus.CONFIRMED: "Booking accepted successfully.",
    BookingStatus.CANCELLED: "Booking rejected successfully.",
}


@router.post("", status_code=201)
async def create_booking(
    request: CreateBookingRequest,
    traveler: ActorRef = TravelerActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """
    Request slots on a package.

    The booking starts Pending; no capacity is taken until the agency accepts.
    """
    try:
        booking = await BookingService(db).create(traveler, request.package_id, request.slots_booked)
        return JSONResponse(
            status_code=201,
            content=envelope(Booking.model_validate(booking), "Booking request sent successfully.", 201),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking creation",
            extra={
                "package_id": str(request.package_id),
                "slots": request.slots_booked,
                "traveler": str(traveler),
                "error": str(e)
            },
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("")
async def list_my_bookings(
    traveler: ActorRef = TravelerActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    try:
        bookings = await BookingService(db).list_for_traveler(traveler)
        return JSONResponse(
            status_code=200,
            content=envelope(
                [Booking.model_validate(booking) for booking in bookings],
                "Bookings retrieved successfully.",
            ),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking listing",
            extra={"traveler": str(traveler), "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.patch("/{booking_id}/action")
async def booking_action(
    booking_id: str,
    request: BookingActionRequest,
    agency: ActorRef = AgencyActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Accept or reject a booking of one of the agency's packages."""
    booking_uuid = parse_uuid(booking_id, "booking_id")

    try:
        booking = await BookingService(db).handle_action(booking_uuid, agency, request.action)
        return JSONResponse(
            status_code=200,
            content=envelope(
                Booking.model_validate(booking),
                _ACTION_MESSAGES[BookingStatus(booking.status)],
            ),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking action",
            extra={"booking_id": booking_id, "action": request.action, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("/{booking_id}")
async def get_booking(
    booking_id: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Get a booking with traveler and package summaries."""
    booking_uuid = parse_uuid(booking_id, "booking_id")

    try:
        detail = await BookingService(db).get(booking_uuid)
        return JSONResponse(
            status_code=200,
            content=envelope(detail, "Booking retrieved successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking retrieval",
            extra={"booking_id": booking_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: str,
    agency: ActorRef = AgencyActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Delete a booking; slots of a Confirmed booking go back to the package."""
    booking_uuid = parse_uuid(booking_id, "booking_id")

    try:
        await BookingService(db).delete(booking_uuid, agency)
        return JSONResponse(
            status_code=200,
            content=envelope(None, "Booking deleted successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking deletion",
            extra={"booking_id": booking_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e
