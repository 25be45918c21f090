from datetime import date, time, timedelta

import pytest

from app.core.exceptions import InvalidArgument, NotFound
from app.models.facility import RoomStatus, Schedule
from app.models.reservation import Reservation, ReservationStatus
from app.services.availability import availability_service

DAY = date(2026, 3, 10)

def _reserve(db, schedule, on_date, status=ReservationStatus.WAITING, user_id=3):
    reservation = Reservation(sched_id=schedule.id, user_id=user_id, reservation_date=on_date, status=status)
    db.add(reservation)
    db.commit()
    return reservation

def test_free_slot_is_available(db, schedule, today):
    result = availability_service.check(db, schedule.id, DAY, today=today)
    assert result.available
    assert result.reason is None
    assert result.slot_date == DAY

def test_today_is_bookable(db, schedule, today):
    assert availability_service.check(db, schedule.id, today, today=today).available

def test_past_date_is_unavailable(db, schedule, today):
    result = availability_service.check(db, schedule.id, date(2026, 2, 28), today=today)
    assert not result.available
    assert result.reason == "past_date"

def test_closed_room_wins_over_past_date(db, room, schedule, today):
    room.status = RoomStatus.CLOSED
    db.commit()
    past = availability_service.check(db, schedule.id, date(2026, 2, 1), today=today)
    future = availability_service.check(db, schedule.id, DAY, today=today)
    assert past.reason == "room_closed"
    assert future.reason == "room_closed"

def test_reserved_room_status_still_bookable(db, room, schedule, today):
    # Only `closed` blocks new bookings
    room.status = RoomStatus.RESERVED
    db.commit()
    assert availability_service.check(db, schedule.id, DAY, today=today).available

@pytest.mark.parametrize("status", [ReservationStatus.WAITING, ReservationStatus.ACCEPTED])
def test_active_reservation_blocks_slot(db, schedule, today, status):
    _reserve(db, schedule, DAY, status)
    result = availability_service.check(db, schedule.id, DAY, today=today)
    assert not result.available
    assert result.reason == "already_reserved"

@pytest.mark.parametrize("status", [ReservationStatus.DENIED, ReservationStatus.CANCELLED])
def test_inactive_reservation_leaves_slot_free(db, schedule, today, status):
    _reserve(db, schedule, DAY, status)
    assert availability_service.check(db, schedule.id, DAY, today=today).available

def test_reservation_on_other_date_or_schedule_does_not_block(db, room, schedule, today):
    other = Schedule(room_id=room.id, start_time=time(10, 0), end_time=time(12, 0))
    db.add(other)
    db.commit()
    _reserve(db, schedule, date(2026, 3, 11))
    _reserve(db, other, DAY)
    assert availability_service.check(db, schedule.id, DAY, today=today).available

def test_unknown_schedule_is_not_found(db, today):
    with pytest.raises(NotFound):
        availability_service.check(db, 999, DAY, today=today)

# --- Booked dates ---

def test_booked_dates_lists_active_dates_in_range(db, schedule):
    _reserve(db, schedule, date(2026, 3, 12), ReservationStatus.ACCEPTED)
    _reserve(db, schedule, date(2026, 3, 5))
    _reserve(db, schedule, date(2026, 3, 7), ReservationStatus.DENIED)
    _reserve(db, schedule, date(2026, 4, 2))

    result = availability_service.booked_dates(db, schedule.id, date(2026, 3, 1), date(2026, 3, 31))
    assert result.dates == [date(2026, 3, 5), date(2026, 3, 12)]

def test_booked_dates_range_is_inclusive(db, schedule):
    _reserve(db, schedule, date(2026, 3, 1))
    _reserve(db, schedule, date(2026, 3, 31))
    result = availability_service.booked_dates(db, schedule.id, date(2026, 3, 1), date(2026, 3, 31))
    assert result.dates == [date(2026, 3, 1), date(2026, 3, 31)]

def test_booked_dates_rejects_inverted_range(db, schedule):
    with pytest.raises(InvalidArgument):
        availability_service.booked_dates(db, schedule.id, date(2026, 3, 31), date(2026, 3, 1))

def test_booked_dates_rejects_oversized_range(db, schedule):
    with pytest.raises(InvalidArgument):
        availability_service.booked_dates(db, schedule.id, date(2026, 1, 1), date(2028, 1, 1))

def test_booked_dates_range_limit_counts_both_ends(db, schedule, monkeypatch):
    from app.core.config import settings
    monkeypatch.setattr(settings, "BOOKED_DATES_MAX_RANGE_DAYS", 366)
    start = date(2026, 1, 1)

    widest = availability_service.booked_dates(db, schedule.id, start, start + timedelta(days=365))
    assert widest.dates == []
    with pytest.raises(InvalidArgument):
        availability_service.booked_dates(db, schedule.id, start, start + timedelta(days=366))

def test_booked_dates_single_day(db, schedule):
    _reserve(db, schedule, DAY)
    assert availability_service.booked_dates(db, schedule.id, DAY, DAY).dates == [DAY]

def test_booked_dates_unknown_schedule(db):
    with pytest.raises(NotFound):
        availability_service.booked_dates(db, 999, date(2026, 3, 1), date(2026, 3, 2))

def test_reserved_schedule_ids(db, room, schedule):
    other = Schedule(room_id=room.id, start_time=time(13, 0), end_time=time(15, 0))
    db.add(other)
    db.commit()
    _reserve(db, schedule, DAY)
    _reserve(db, other, DAY, ReservationStatus.CANCELLED)

    assert availability_service.reserved_schedule_ids(db, [schedule.id, other.id], DAY) == {schedule.id}
    assert availability_service.reserved_schedule_ids(db, [], DAY) == set()
