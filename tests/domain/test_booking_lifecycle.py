"""
Тесты для агрегата Booking: создание и жизненный цикл статусов.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from facility_booking.booking.domain import (
    Booking,
    BookingCreated,
    BookingStatusChanged,
    FacilityRef,
)
from facility_booking.shared_kernel import (
    BookingStatus,
    FacilityUnavailable,
    InvalidTransition,
    Money,
    SlotUnavailable,
)
from helpers import interval


@pytest.fixture
def booking(member, facility_ref) -> Booking:
    booking = Booking.create(member, facility_ref, interval(10, 11), existing=[])
    booking.pull_domain_events()
    return booking


class TestBookingCreation:
    """Тесты создания бронирования."""

    def test_new_booking_is_pending_and_priced(self, member, facility_ref):
        booking = Booking.create(
            member, facility_ref, interval(10, 11, end_minute=30), existing=[], notes="Yoga"
        )

        assert booking.status == BookingStatus.PENDING
        assert booking.facility_id == facility_ref.id
        assert booking.user_id == member.id
        assert booking.total_price.amount == Decimal("30.00")
        assert booking.notes == "Yoga"
        assert not booking.is_blocked_slot

        events = booking.pull_domain_events()
        assert len(events) == 1
        assert isinstance(events[0], BookingCreated)
        assert events[0].booking_id == booking.id
        assert booking.pull_domain_events() == []

    def test_adjacent_booking_is_allowed(self, member, facility_ref):
        booking = Booking.create(
            member, facility_ref, interval(11, 12), existing=[interval(10, 11)]
        )
        assert booking.status == BookingStatus.PENDING

    @pytest.mark.parametrize(
        "candidate", [interval(10, 11), interval(10, 11, 30, 30), interval(9, 12)]
    )
    def test_overlapping_booking_is_rejected(self, member, facility_ref, candidate):
        with pytest.raises(SlotUnavailable):
            Booking.create(member, facility_ref, candidate, existing=[interval(10, 11)])

    def test_unavailable_facility_is_rejected(self, member):
        closed = FacilityRef(
            id=uuid4(), hourly_rate=Money(amount=Decimal("20")), is_available=False
        )
        with pytest.raises(FacilityUnavailable):
            Booking.create(member, closed, interval(10, 11), existing=[])

    def test_price_and_interval_are_immutable(self, booking):
        with pytest.raises(ValidationError):
            booking.total_price = Money(amount=Decimal("1"))
        with pytest.raises(ValidationError):
            booking.interval = interval(12, 13)


class TestBookingTransitions:
    """Тесты таблицы переходов статусов."""

    def test_staff_confirms_pending(self, booking, staff):
        booking.confirm(staff)

        assert booking.status == BookingStatus.CONFIRMED
        events = booking.pull_domain_events()
        assert len(events) == 1
        assert isinstance(events[0], BookingStatusChanged)
        assert events[0].previous_status == BookingStatus.PENDING
        assert events[0].new_status == BookingStatus.CONFIRMED
        assert events[0].actor_id == staff.id

    def test_admin_completes_confirmed(self, booking, admin):
        booking.confirm(admin)
        booking.complete(admin)
        assert booking.status == BookingStatus.COMPLETED

    def test_owner_cancels_own_pending(self, booking, member):
        booking.cancel(member)
        assert booking.status == BookingStatus.CANCELLED

    def test_member_cannot_confirm(self, booking, member):
        with pytest.raises(InvalidTransition):
            booking.confirm(member)
        assert booking.status == BookingStatus.PENDING
        assert booking.pull_domain_events() == []

    def test_other_member_cannot_cancel(self, booking, other_member):
        with pytest.raises(InvalidTransition):
            booking.cancel(other_member)
        assert booking.status == BookingStatus.PENDING

    def test_owner_cannot_cancel_confirmed(self, booking, member, staff):
        booking.confirm(staff)
        with pytest.raises(InvalidTransition):
            booking.cancel(member)
        assert booking.status == BookingStatus.CONFIRMED

    def test_staff_cancels_confirmed(self, booking, staff):
        booking.confirm(staff)
        booking.cancel(staff)
        assert booking.status == BookingStatus.CANCELLED

    def test_pending_cannot_be_completed(self, booking, staff):
        with pytest.raises(InvalidTransition):
            booking.complete(staff)

    def test_same_status_is_not_a_transition(self, booking, staff):
        with pytest.raises(InvalidTransition):
            booking.transition_to(staff, BookingStatus.PENDING)

    @pytest.mark.parametrize("terminal", [BookingStatus.CANCELLED, BookingStatus.COMPLETED])
    @pytest.mark.parametrize("target", list(BookingStatus))
    def test_terminal_states_reject_everything(self, booking, admin, terminal, target):
        booking.confirm(admin)
        booking.transition_to(admin, terminal)
        assert booking.is_terminal

        with pytest.raises(InvalidTransition):
            booking.transition_to(admin, target)
        assert booking.status == terminal
