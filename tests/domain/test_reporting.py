"""
Тесты для отбора и сводки бронирований.
"""

from datetime import date, datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from facility_booking.booking.domain import Booking
from facility_booking.booking.reporting import (
    BookingFilterCriteria,
    BookingSummary,
    filter_bookings,
    summarize_bookings,
)
from facility_booking.shared_kernel import BookingStatus, Money, TimeInterval

FACILITY_1, FACILITY_2, FACILITY_3 = uuid4(), uuid4(), uuid4()
ALICE, BOB = uuid4(), uuid4()

USER_NAMES = {ALICE: "Alice Walker", BOB: "Bob Stone"}
FACILITY_NAMES = {
    FACILITY_1: "Main Gymnasium",
    FACILITY_2: "Movement Studio",
    FACILITY_3: "Teaching Kitchen",
}


def make_booking(facility_id, user_id, status, day, start_hour=10, end_hour=11) -> Booking:
    return Booking(
        facility_id=facility_id,
        user_id=user_id,
        interval=TimeInterval(
            start=datetime(2030, 5, day, start_hour), end=datetime(2030, 5, day, end_hour)
        ),
        status=status,
        total_price=Money(amount=0),
    )


@pytest.fixture
def bookings():
    statuses = list(BookingStatus)
    result = []
    day = 1
    for facility_id in (FACILITY_1, FACILITY_2, FACILITY_3):
        for index, status in enumerate(statuses):
            user_id = ALICE if index % 2 == 0 else BOB
            result.append(make_booking(facility_id, user_id, status, day))
            day += 1
    return result


def test_no_criteria_returns_everything_in_order(bookings):
    assert filter_bookings(bookings, BookingFilterCriteria()) == bookings


def test_status_and_facility_combine_with_and(bookings):
    criteria = BookingFilterCriteria(status=BookingStatus.CONFIRMED, facility_id=FACILITY_2)

    result = filter_bookings(bookings, criteria)

    expected = [
        b
        for b in bookings
        if b.status == BookingStatus.CONFIRMED and b.facility_id == FACILITY_2
    ]
    assert result == expected
    assert len(result) == 1


def test_status_filter_keeps_input_order(bookings):
    result = filter_bookings(bookings, BookingFilterCriteria(status=BookingStatus.PENDING))

    assert [b.facility_id for b in result] == [FACILITY_1, FACILITY_2, FACILITY_3]


@pytest.mark.parametrize(
    "search, expected_count",
    [
        ("alice", 6),
        ("STONE", 6),
        ("studio", 4),
        ("kitchen", 4),
        ("nobody", 0),
    ],
)
def test_search_is_case_insensitive_over_names(bookings, search, expected_count):
    result = filter_bookings(
        bookings, BookingFilterCriteria(search=search), USER_NAMES, FACILITY_NAMES
    )
    assert len(result) == expected_count


def test_search_matches_booking_id(bookings):
    target = bookings[5]
    fragment = str(target.id)[:13].upper()

    result = filter_bookings(bookings, BookingFilterCriteria(search=fragment))

    assert target in result


def test_search_combines_with_status(bookings):
    criteria = BookingFilterCriteria(search="gymnasium", status=BookingStatus.CANCELLED)

    result = filter_bookings(bookings, criteria, USER_NAMES, FACILITY_NAMES)

    assert len(result) == 1
    assert result[0].facility_id == FACILITY_1


def test_date_range_is_inclusive(bookings):
    criteria = BookingFilterCriteria(start_date=date(2030, 5, 3), end_date=date(2030, 5, 5))

    result = filter_bookings(bookings, criteria)

    assert [b.interval.start.day for b in result] == [3, 4, 5]


def test_booking_crossing_end_of_range_is_excluded():
    overnight = Booking(
        facility_id=FACILITY_1,
        user_id=ALICE,
        interval=TimeInterval(start=datetime(2030, 5, 5, 23), end=datetime(2030, 5, 6, 1)),
        total_price=Money(amount=0),
    )
    late_evening = make_booking(FACILITY_1, ALICE, BookingStatus.PENDING, 5, 22, 23)

    criteria = BookingFilterCriteria(end_date=date(2030, 5, 5))

    assert filter_bookings([overnight, late_evening], criteria) == [late_evening]


def test_summary_counts_by_status(bookings):
    summary = summarize_bookings(bookings)

    assert summary == BookingSummary(
        total=12, pending=3, confirmed=3, cancelled=3, completed=3
    )


def test_summary_of_empty_collection():
    assert summarize_bookings([]) == BookingSummary()


def test_unknown_status_is_counted_only_in_total(bookings):
    legacy = SimpleNamespace(status="ARCHIVED")

    summary = summarize_bookings(bookings[:2] + [legacy])

    assert summary.total == 3
    assert summary.pending + summary.confirmed + summary.cancelled + summary.completed == 2
