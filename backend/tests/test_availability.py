from datetime import datetime

import pytest

from backend.app.services.slots import (
    AmbiguousTimeFormat,
    BookingStatus,
    CandidateSlot,
    SlotStatus,
    generate_day_slots,
    resolve_availability,
)
from backend.app.services.slots.availability import bookable_slots

from helpers import MONDAY, SUNDAY, make_booking, make_schedule


def _statuses(slots):
    return {s.start_time: s.status for s in slots}


def test_buffer_blocks_following_slot():
    booking = make_booking("10:00AM", "11:00AM")
    candidates = [CandidateSlot(11 * 60, 12 * 60), CandidateSlot(11 * 60 + 30, 12 * 60 + 30)]

    slots = resolve_availability(MONDAY, candidates, [booking], 30, datetime(2026, 10, 18, 9, 0))

    assert slots[0].status == SlotStatus.BOOKED
    assert slots[1].status == SlotStatus.AVAILABLE


def test_buffer_blocks_preceding_slot():
    booking = make_booking("10:00AM", "11:00AM")
    candidates = [CandidateSlot(8 * 60 + 30, 9 * 60 + 30), CandidateSlot(9 * 60, 10 * 60)]

    slots = resolve_availability(MONDAY, candidates, [booking], 15, datetime(2026, 10, 18, 9, 0))

    assert slots[0].status == SlotStatus.AVAILABLE
    assert slots[1].status == SlotStatus.BOOKED


def test_adjacent_booking_without_buffer_does_not_block():
    booking = make_booking("10:00AM", "11:00AM")
    candidates = [CandidateSlot(9 * 60, 10 * 60), CandidateSlot(11 * 60, 12 * 60)]

    slots = resolve_availability(MONDAY, candidates, [booking], 0, datetime(2026, 10, 18, 9, 0))

    assert [s.status for s in slots] == [SlotStatus.AVAILABLE, SlotStatus.AVAILABLE]


def test_end_to_end_morning_then_mid_morning():
    schedule = make_schedule("everyday", "08:00", "18:00", 60, buffer_minutes=15)
    candidates = generate_day_slots(schedule, MONDAY)

    early = resolve_availability(MONDAY, candidates, [], 15, datetime(2026, 10, 19, 7, 0))
    assert len(early) == 10
    assert all(s.status == SlotStatus.AVAILABLE for s in early)
    assert not any(s.is_past for s in early)

    later = resolve_availability(MONDAY, candidates, [], 15, datetime(2026, 10, 19, 10, 30))
    past = [s.start_time for s in later if s.status == SlotStatus.PAST]
    assert past == ["08:00", "09:00", "10:00"]
    assert all(s.status == SlotStatus.AVAILABLE for s in later[3:])


def test_past_takes_precedence_but_keeps_booked_flag():
    booking = make_booking("8:00AM", "9:00AM")
    candidates = [CandidateSlot(8 * 60, 9 * 60)]

    slots = resolve_availability(MONDAY, candidates, [booking], 0, datetime(2026, 10, 19, 12, 0))

    assert slots[0].status == SlotStatus.PAST
    assert slots[0].is_past and slots[0].is_booked


def test_earlier_date_is_all_past_and_later_date_has_none():
    schedule = make_schedule()
    candidates = generate_day_slots(schedule, MONDAY)
    now = datetime(2026, 10, 20, 7, 0)

    assert all(s.is_past for s in resolve_availability(MONDAY, candidates, [], 0, now))
    assert not any(s.is_past for s in resolve_availability(SUNDAY, candidates, [], 0, now))


@pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.COMPLETED])
def test_inactive_bookings_never_block(status):
    booking = make_booking("10:00AM", "11:00AM", status=status)
    candidates = [CandidateSlot(10 * 60, 11 * 60)]

    slots = resolve_availability(MONDAY, candidates, [booking], 30, datetime(2026, 10, 18, 9, 0))

    assert slots[0].status == SlotStatus.AVAILABLE


def test_pending_booking_blocks():
    booking = make_booking("10:00AM", "11:00AM", status=BookingStatus.PENDING)
    slots = resolve_availability(
        MONDAY, [CandidateSlot(10 * 60, 11 * 60)], [booking], 0, datetime(2026, 10, 18, 9, 0)
    )
    assert slots[0].is_booked


def test_bookings_on_other_dates_or_fields_ignored():
    other_day = make_booking("10:00AM", "11:00AM", booking_date=SUNDAY)
    other_field = make_booking("10:00AM", "11:00AM", field_id=2)
    candidates = [CandidateSlot(10 * 60, 11 * 60)]

    slots = resolve_availability(
        MONDAY, candidates, [other_day, other_field], 0, datetime(2026, 10, 18, 9, 0), field_id=1
    )

    assert slots[0].status == SlotStatus.AVAILABLE


def test_capacity_counts_dogs_without_buffer():
    bookings = [
        make_booking("10:00AM", "11:00AM", number_of_dogs=2),
        make_booking("10:00AM", "11:00AM", number_of_dogs=1, status=BookingStatus.PENDING),
    ]
    candidates = [CandidateSlot(10 * 60, 11 * 60), CandidateSlot(11 * 60, 12 * 60)]

    slots = resolve_availability(
        MONDAY, candidates, bookings, 30, datetime(2026, 10, 18, 9, 0), max_dogs_per_slot=4
    )

    assert (slots[0].booked_dogs, slots[0].available_spots) == (3, 1)
    assert (slots[1].booked_dogs, slots[1].available_spots) == (0, 4)
    assert slots[1].is_booked  # buffer still applies to time
    assert not slots[0].is_fully_booked


def test_bookable_slots_filters_status_and_capacity():
    candidates = [CandidateSlot(14 * 60, 15 * 60), CandidateSlot(16 * 60, 17 * 60)]
    slots = resolve_availability(
        MONDAY, candidates, [make_booking("2:00PM", "3:00PM")], 0,
        datetime(2026, 10, 18, 9, 0), max_dogs_per_slot=2,
    )
    assert [s.start_time for s in bookable_slots(slots, number_of_dogs=2)] == ["16:00"]
    assert bookable_slots(slots, number_of_dogs=3) == []


def test_twenty_four_hour_booking_times_accepted():
    booking = make_booking("13:00", "14:00")
    slots = resolve_availability(
        MONDAY, [CandidateSlot(13 * 60, 14 * 60)], [booking], 0, datetime(2026, 10, 18, 9, 0)
    )
    assert slots[0].is_booked


def test_unparseable_booking_time_is_reported():
    booking = make_booking("ten o'clock", "11:00AM")
    with pytest.raises(AmbiguousTimeFormat):
        resolve_availability(
            MONDAY, [CandidateSlot(10 * 60, 11 * 60)], [booking], 0, datetime(2026, 10, 18, 9, 0)
        )


def test_booking_ending_at_midnight_blocks_last_slot():
    booking = make_booking("11:00PM", "12:00AM")
    candidates = [CandidateSlot(22 * 60, 23 * 60), CandidateSlot(23 * 60, 24 * 60)]

    slots = resolve_availability(MONDAY, candidates, [booking], 0, datetime(2026, 10, 18, 9, 0))

    assert slots[0].status == SlotStatus.AVAILABLE
    assert slots[1].status == SlotStatus.BOOKED
    assert booking.end_minute == 24 * 60


@pytest.mark.parametrize("start, end", [("3:00PM", "2:00PM"), ("10:00AM", "10:00AM")])
def test_booking_ending_before_it_starts_is_reported(start, end):
    booking = make_booking(start, end)
    with pytest.raises(AmbiguousTimeFormat):
        resolve_availability(
            MONDAY, [CandidateSlot(10 * 60, 11 * 60)], [booking], 0, datetime(2026, 10, 18, 9, 0)
        )


def test_resolver_does_not_mutate_inputs():
    bookings = [make_booking()]
    candidates = [CandidateSlot(10 * 60, 11 * 60)]
    now = datetime(2026, 10, 18, 9, 0)

    first = resolve_availability(MONDAY, candidates, bookings, 15, now)
    second = resolve_availability(MONDAY, candidates, bookings, 15, now)

    assert first == second
    assert candidates == [CandidateSlot(10 * 60, 11 * 60)]
