"""Concurrency tests for booking decisions racing on one package."""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from factories import create_schema, seed_agency, seed_package, seed_traveler
from travelsocial.core.exceptions import ConflictError, InsufficientCapacityError
from travelsocial.services.booking_service import BookingService
from travelsocial.services.inventory_service import InventoryService
from travelsocial.services.package_service import PackageService


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Sessions on separate connections to one file-backed database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}",
        connect_args={"timeout": 15},
    )
    await create_schema(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


async def _outcome(coro):
    try:
        return await coro
    except (ConflictError, InsufficientCapacityError) as e:
        return e


@pytest.mark.asyncio
async def test_concurrent_accepts_never_overbook(session_factory):
    """Two accepts that together exceed capacity: exactly one wins."""
    async with session_factory() as setup:
        agency = await seed_agency(setup)
        alice = await seed_traveler(setup, "alice")
        bruno = await seed_traveler(setup, "bruno")
        package = await seed_package(setup, agency, max_slots=5)

        service = BookingService(setup)
        first = await service.create(alice.ref, package.id, 3)
        second = await service.create(bruno.ref, package.id, 3)
        booking_ids = [first.id, second.id]

    async with session_factory() as session_a, session_factory() as session_b:
        results = await asyncio.gather(
            _outcome(BookingService(session_a).accept(booking_ids[0], agency.ref)),
            _outcome(BookingService(session_b).accept(booking_ids[1], agency.ref)),
        )

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], InsufficientCapacityError)

    async with session_factory() as check:
        final = await PackageService(check).get_package(package.id)
        assert final.available_slots == 2
        assert await InventoryService(check).audit_inventory() == []


@pytest.mark.asyncio
async def test_concurrent_rejects_release_once(session_factory):
    """Two agencies' sessions revoking one confirmed booking give its slots back once."""
    async with session_factory() as setup:
        agency = await seed_agency(setup)
        traveler = await seed_traveler(setup)
        package = await seed_package(setup, agency, max_slots=4)

        service = BookingService(setup)
        booking = await service.create(traveler.ref, package.id, 4)
        booking_id = booking.id
        await service.accept(booking_id, agency.ref)

    async with session_factory() as session_a, session_factory() as session_b:
        results = await asyncio.gather(
            _outcome(BookingService(session_a).reject(booking_id, agency.ref)),
            _outcome(BookingService(session_b).reject(booking_id, agency.ref)),
        )

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], ConflictError)

    async with session_factory() as check:
        final = await PackageService(check).get_package(package.id)
        assert final.available_slots == 4
        assert await InventoryService(check).audit_inventory() == []
