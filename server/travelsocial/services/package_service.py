"""Package service for publishing and reading travel packages."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..models.actor import ActorRef
from ..models.package import Package
from ..schemas.package import CreatePackageRequest
from .actor_resolver import ActorResolver

logger = logging.getLogger(__name__)


class PackageService:
    """Service for package-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.actor_resolver = ActorResolver(db)

    async def create_package(self, agency: ActorRef, request: CreatePackageRequest) -> Package:
        """
        Publish a new package with full availability.

        Args:
            agency: Publishing actor, must be an agency
            request: Package creation request

        Returns:
            Created package

        Raises:
            AuthorizationError: If the actor is not an agency
            NotFoundError: If the agency does not exist
            ValidationError: If the trip dates are out of order
        """
        if not agency.is_agency:
            raise AuthorizationError("Only agencies can publish packages.")

        await self.actor_resolver.get_or_raise(agency)

        if request.start_date >= request.end_date:
            raise ValidationError(
                "End date must be after start date.",
                errors=[{"path": "end_date", "message": "Must be after start_date"}],
            )

        package = Package(
            agency_id=agency.actor_id,
            title=request.title,
            description=request.description,
            main_location=request.main_location,
            price=request.price,
            start_date=request.start_date,
            end_date=request.end_date,
            max_slots=request.max_slots,
            available_slots=request.max_slots,
            is_active=True,
        )

        self.db.add(package)
        await self.db.commit()
        await self.db.refresh(package)

        logger.info(
            "Package created successfully",
            extra={
                "package_id": str(package.id),
                "agency_id": str(agency.actor_id),
                "max_slots": package.max_slots,
            }
        )

        return package

    async def get_package_by_id(self, package_id: UUID) -> Optional[Package]:
        """Get package by ID."""
        stmt = (
            select(Package)
            .where(Package.id == package_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_package(self, package_id: UUID) -> Package:
        """
        Get package by ID or raise NotFoundError.

        Raises:
            NotFoundError: If package not found
        """
        package = await self.get_package_by_id(package_id)
        if not package:
            raise NotFoundError("package", str(package_id))
        return package
