import threading
from datetime import date, time

import pytest
from sqlalchemy.orm import sessionmaker

import app.models  # noqa: F401
from app.core.database import build_engine
from app.core.exceptions import Conflict
from app.core.locks import SlotLockRegistry
from app.models.base import Base
from app.models.facility import Room, RoomStatus, RoomType, Schedule
from app.models.reservation import Reservation, ReservationStatus
from app.models.user import UserRole
from app.repositories.reservation import reservation_repository
from app.schemas.schedule import AvailabilityResponse
from app.schemas.token import Caller
from app.services.authorization import AuthorizationGate
from app.services.availability import availability_service
from app.services.reservation import ReservationService

DAY = date(2026, 3, 10)
TODAY = date(2026, 3, 1)

@pytest.fixture
def file_sessions(tmp_path):
    """File-backed SQLite so every thread gets its own connection."""
    engine = build_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with factory() as session:
        room = Room(name="R1", room_type=RoomType.CLASS, status=RoomStatus.OPEN, tag_ids=[])
        session.add(room)
        session.flush()
        schedule = Schedule(room_id=room.id, start_time=time(8, 0), end_time=time(10, 0))
        session.add(schedule)
        session.commit()
        sched_id = schedule.id

    yield factory, sched_id
    engine.dispose()

def _race(factory, sched_id, service, workers):
    barrier = threading.Barrier(workers)
    outcomes = []
    guard = threading.Lock()

    def attempt(user_id):
        caller = Caller(id=user_id, role=UserRole.STUDENT)
        session = factory()
        try:
            barrier.wait()
            service.create(session, caller, sched_id, DAY, today=TODAY)
            result = "created"
        except Conflict:
            result = "conflict"
        finally:
            session.close()
        with guard:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(100 + i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes

def test_concurrent_creates_yield_exactly_one_reservation(file_sessions):
    factory, sched_id = file_sessions
    locks = SlotLockRegistry(timeout=10)
    service = ReservationService(reservation_repository, availability_service, AuthorizationGate(), locks)

    outcomes = _race(factory, sched_id, service, workers=6)

    assert outcomes.count("created") == 1
    assert outcomes.count("conflict") == 5
    assert len(locks) == 0
    with factory() as session:
        rows = session.query(Reservation).all()
        assert len(rows) == 1
        assert rows[0].status == ReservationStatus.WAITING

def test_unique_index_rejects_second_active_reservation(file_sessions, mocker):
    factory, sched_id = file_sessions
    # An availability check that always says yes stands in for another process
    availability = mocker.MagicMock()
    availability.check.side_effect = lambda db, sched_id, on_date, today=None: AvailabilityResponse(
        sched_id=sched_id, slot_date=on_date, available=True
    )
    service = ReservationService(reservation_repository, availability, AuthorizationGate(), SlotLockRegistry())
    first = Caller(id=1, role=UserRole.STUDENT)
    second = Caller(id=2, role=UserRole.LECTURER)

    with factory() as session:
        service.create(session, first, sched_id, DAY, today=TODAY)
        with pytest.raises(Conflict) as exc:
            service.create(session, second, sched_id, DAY, today=TODAY)
        assert exc.value.detail == "Slot is not available for this date"
        assert session.query(Reservation).count() == 1

def test_unique_index_ignores_inactive_rows(file_sessions):
    factory, sched_id = file_sessions
    with factory() as session:
        for status in (ReservationStatus.DENIED, ReservationStatus.CANCELLED, ReservationStatus.WAITING):
            session.add(Reservation(
                sched_id=sched_id, user_id=1, reservation_date=DAY, status=status
            ))
            session.commit()
        assert session.query(Reservation).count() == 3

def test_concurrent_decisions_have_one_winner(file_sessions):
    factory, sched_id = file_sessions
    with factory() as session:
        reservation = Reservation(
            sched_id=sched_id, user_id=1, reservation_date=DAY, status=ReservationStatus.WAITING
        )
        session.add(reservation)
        session.commit()
        reservation_id = reservation.id

    barrier = threading.Barrier(2)
    results = []

    def decide(target):
        session = factory()
        try:
            barrier.wait()
            results.append(reservation_repository.transition_status(
                session, reservation_id, [ReservationStatus.WAITING], target
            ))
        finally:
            session.close()

    threads = [
        threading.Thread(target=decide, args=(ReservationStatus.ACCEPTED,)),
        threading.Thread(target=decide, args=(ReservationStatus.DENIED,)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == [False, True]
