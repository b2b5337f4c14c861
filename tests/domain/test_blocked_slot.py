import pytest

from facility_booking.booking.domain import (
    BLOCKED_SLOT_MARKER,
    Booking,
    BookingCreated,
    BookingStatusChanged,
    SlotBlocked,
    blocked_slot_notes,
)
from facility_booking.shared_kernel import BookingStatus, InvalidTransition, SlotUnavailable
from helpers import interval


def test_marker_without_reason():
    assert blocked_slot_notes() == "Blocked slot"
    assert blocked_slot_notes("   ") == "Blocked slot"


def test_marker_with_reason():
    assert blocked_slot_notes("HVAC") == "Blocked slot: HVAC"


def test_block_is_confirmed_immediately(staff, facility_ref):
    booking = Booking.create_blocked_slot(
        staff, facility_ref, interval(14, 16), existing=[], reason="HVAC"
    )

    assert booking.status == BookingStatus.CONFIRMED
    assert booking.notes == "Blocked slot: HVAC"
    assert booking.is_blocked_slot
    assert booking.user_id == staff.id

    events = booking.pull_domain_events()
    assert [type(e) for e in events] == [BookingCreated, BookingStatusChanged, SlotBlocked]
    # Снаружи видно только итоговое подтвержденное состояние
    assert events[1].new_status == BookingStatus.CONFIRMED


def test_block_without_reason(admin, facility_ref):
    booking = Booking.create_blocked_slot(admin, facility_ref, interval(8, 9), existing=[])
    assert booking.notes == BLOCKED_SLOT_MARKER


def test_member_cannot_block(member, facility_ref):
    with pytest.raises(InvalidTransition):
        Booking.create_blocked_slot(member, facility_ref, interval(14, 16), existing=[])


def test_block_respects_existing_bookings(staff, facility_ref):
    with pytest.raises(SlotUnavailable):
        Booking.create_blocked_slot(
            staff, facility_ref, interval(14, 16), existing=[interval(15, 17)]
        )


def test_member_notes_with_marker_prefix_are_detected(member, facility_ref):
    booking = Booking.create(
        member, facility_ref, interval(8, 9), existing=[], notes="Blocked slot: manual"
    )
    assert booking.is_blocked_slot
    assert booking.status == BookingStatus.PENDING
