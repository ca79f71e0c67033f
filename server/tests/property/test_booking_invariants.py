"""Property-based tests for booking inventory invariants."""

import asyncio

from hypothesis import given, settings
from hypothesis import strategies as st
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from factories import TEST_DATABASE_URL, create_schema, seed_agency, seed_package, seed_traveler
from travelsocial.core.exceptions import ApiException
from travelsocial.services.booking_service import BookingService
from travelsocial.services.inventory_service import InventoryService
from travelsocial.services.package_service import PackageService

# (operation, booking index or slot count)
operations = st.lists(
    st.one_of(
        st.tuples(st.just("create"), st.integers(min_value=1, max_value=6)),
        st.tuples(st.sampled_from(["accept", "reject", "delete"]), st.integers(min_value=0, max_value=9)),
    ),
    min_size=1,
    max_size=25,
)
capacity_values = st.integers(min_value=1, max_value=10)


async def _run_workflow(max_slots: int, steps: list[tuple[str, int]]) -> list[tuple[int, int, list]]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    observations = []
    try:
        async with session_factory() as session:
            agency = await seed_agency(session)
            traveler = await seed_traveler(session)
            package = await seed_package(session, agency, max_slots=max_slots)

            service = BookingService(session)
            booking_ids = []

            for operation, value in steps:
                try:
                    if operation == "create":
                        booking = await service.create(traveler.ref, package.id, value)
                        booking_ids.append(booking.id)
                    elif booking_ids:
                        booking_id = booking_ids[value % len(booking_ids)]
                        if operation == "accept":
                            await service.accept(booking_id, agency.ref)
                        elif operation == "reject":
                            await service.reject(booking_id, agency.ref)
                        else:
                            await service.delete(booking_id, agency.ref)
                except ApiException:
                    pass

                current = await PackageService(session).get_package(package.id)
                drifts = await InventoryService(session).audit_inventory()
                observations.append((current.available_slots, current.max_slots, drifts))
    finally:
        await engine.dispose()

    return observations


@settings(max_examples=25, deadline=None)
@given(max_slots=capacity_values, steps=operations)
def test_available_slots_match_confirmed_bookings(max_slots, steps):
    """Any mix of requests and decisions keeps counters consistent with confirmed bookings."""
    observations = asyncio.run(_run_workflow(max_slots, steps))

    for available, maximum, drifts in observations:
        assert 0 <= available <= maximum
        assert drifts == []


@settings(max_examples=25, deadline=None)
@given(max_slots=capacity_values, requests=st.lists(st.integers(min_value=1, max_value=4), min_size=1, max_size=8))
def test_accepting_everything_never_overbooks(max_slots, requests):
    """Accepting every request confirms at most the package's capacity."""
    steps = [("create", slots) for slots in requests]
    steps += [("accept", index) for index in range(len(requests))]

    observations = asyncio.run(_run_workflow(max_slots, steps))

    available, maximum, drifts = observations[-1]
    assert available >= 0
    assert drifts == []
