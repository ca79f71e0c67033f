"""Package router for publishing and reading travel packages."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import AgencyActor, CurrentActor, DatabaseSession, parse_uuid
from ..core.exceptions import ApiException, InternalServerError
from ..models.actor import ActorRef
from ..schemas.booking import Booking
from ..schemas.common import envelope
from ..schemas.package import CreatePackageRequest, Package
from ..services.booking_service import BookingService
from ..services.package_service import PackageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/packages", tags=["packages"])


@router.post("", status_code=201)
async def create_package(
    request: CreatePackageRequest,
    agency: ActorRef = AgencyActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Publish a package with all of its slots available."""
    try:
        package = await PackageService(db).create_package(agency, request)
        return JSONResponse(
            status_code=201,
            content=envelope(Package.model_validate(package), "Package created successfully.", 201),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in package creation",
            extra={"agency": str(agency), "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("/{package_id}")
async def get_package(
    package_id: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Get a package with its current availability."""
    package_uuid = parse_uuid(package_id, "package_id")

    try:
        package = await PackageService(db).get_package(package_uuid)
        return JSONResponse(
            status_code=200,
            content=envelope(Package.model_validate(package), "Package retrieved successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in package retrieval",
            extra={"package_id": package_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("/{package_id}/bookings")
async def list_package_bookings(
    package_id: str,
    agency: ActorRef = AgencyActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """List the bookings of a package owned by the calling agency."""
    package_uuid = parse_uuid(package_id, "package_id")

    try:
        bookings = await BookingService(db).list_for_package(package_uuid, agency)
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
            "Unexpected error in package booking listing",
            extra={"package_id": package_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e
