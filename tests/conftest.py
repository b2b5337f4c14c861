"""
Общие фикстуры для тестов движка бронирования.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from facility_booking.booking.application import BookingApplicationService
from facility_booking.booking.domain import FacilityRef
from facility_booking.booking.infrastructure import (
    BookingUnitOfWork,
    CatalogFacilityDirectory,
    InMemoryUserDirectory,
)
from facility_booking.catalog.domain import Facility
from facility_booking.catalog.infrastructure import InMemoryFacilityRepository
from facility_booking.config import SchedulingSettings
from facility_booking.shared_kernel import Actor, Money, Role
from helpers import FIXED_NOW


@pytest.fixture
def member() -> Actor:
    return Actor(id=uuid4(), roles={Role.MEMBER})


@pytest.fixture
def other_member() -> Actor:
    return Actor(id=uuid4(), roles={Role.MEMBER})


@pytest.fixture
def staff() -> Actor:
    return Actor(id=uuid4(), roles={Role.STAFF})


@pytest.fixture
def admin() -> Actor:
    return Actor(id=uuid4(), roles={Role.ADMIN})


@pytest.fixture
def facility_ref() -> FacilityRef:
    return FacilityRef(
        id=uuid4(), name="Main Gymnasium", hourly_rate=Money(amount=Decimal("20"))
    )


@pytest.fixture
def facility_repo() -> InMemoryFacilityRepository:
    return InMemoryFacilityRepository()


@pytest.fixture
def gym(facility_repo) -> Facility:
    facility = Facility.register(
        name="Main Gymnasium",
        facility_type="Sports Hall",
        capacity=200,
        hourly_rate=Money(amount=Decimal("20.00")),
    )
    facility_repo.add(facility)
    return facility


@pytest.fixture
def studio(facility_repo) -> Facility:
    facility = Facility.register(
        name="Movement Studio",
        facility_type="Studio",
        capacity=40,
        hourly_rate=Money(amount=Decimal("45.00")),
    )
    facility_repo.add(facility)
    return facility


@pytest.fixture
def user_directory(member, other_member, staff) -> InMemoryUserDirectory:
    return InMemoryUserDirectory(
        {
            member.id: "Alice Walker",
            other_member.id: "Bob Stone",
            staff.id: "Front Desk",
        }
    )


@pytest.fixture
def booking_uow() -> BookingUnitOfWork:
    return BookingUnitOfWork()


@pytest.fixture
def booking_service(
    booking_uow, facility_repo, user_directory
) -> BookingApplicationService:
    """Сервис приложения с чистым хранилищем и фиксированными часами."""
    return BookingApplicationService(
        uow=booking_uow,
        facilities=CatalogFacilityDirectory(facility_repo),
        users=user_directory,
        settings=SchedulingSettings(),
        clock=lambda: FIXED_NOW,
    )
