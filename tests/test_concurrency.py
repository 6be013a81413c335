"""Concurrent bookings and cancellations against a file-backed database."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from catalog import add_flight
from errors import AlreadyCancelled, InsufficientSeats
from inventory import book_ticket, cancel_ticket
from model import Booking, Flight, User, db

WORKERS = 12


@pytest.fixture
def threaded_app(tmp_path):
    app = create_app("testing", {"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'concurrency.db'}"})
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


def make_flight(app, seats):
    with app.app_context():
        traveler = User(username="elina", email="elina@example.com", usertype="traveler",
                        password=generate_password_hash("x"), approval="approved")
        db.session.add(traveler)
        db.session.commit()
        flight = add_flight({
            "flightName": "AirFrance", "flightId": "AF1145", "origin": "Moscow",
            "destination": "Paris", "departureTime": "10:00", "arrivalTime": "14:30",
            "basePrice": 100, "totalSeats": seats, "journeyDate": "2030-10-10",
        })
        return flight.id, {"id": traveler.id, "role": "traveler", "approval": "approved"}


def test_concurrent_bookings_never_overcommit(threaded_app):
    flight_id, identity = make_flight(threaded_app, WORKERS - 1)

    def attempt(i):
        with threaded_app.app_context():
            try:
                booking = book_ticket(identity, flight_id, [{"name": f"P{i}", "age": 20}], "economy")
                return list(booking.seats)
            except InsufficientSeats:
                return None

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(attempt, range(WORKERS)))

    booked = [r for r in results if r is not None]
    assert len(booked) == WORKERS - 1
    assert results.count(None) == 1

    codes = [code for seats in booked for code in seats]
    assert len(set(codes)) == len(codes)
    assert sorted(codes, key=lambda c: int(c.split("-")[1])) == [f"E-{n}" for n in range(1, WORKERS)]

    with threaded_app.app_context():
        assert db.session.get(Flight, flight_id).available_seats == 0


def test_mixed_bookings_and_cancellations_keep_counter_consistent(threaded_app):
    flight_id, identity = make_flight(threaded_app, 8)
    with threaded_app.app_context():
        existing = [book_ticket(identity, flight_id, [{"name": "A"}, {"name": "B"}], "business").id
                    for _ in range(3)]

    # each existing booking is cancelled twice, racing against new bookings
    jobs = [("cancel", b) for b in existing] * 2 + [("book", None)] * 6

    def run(job):
        kind, booking_id = job
        with threaded_app.app_context():
            try:
                if kind == "cancel":
                    cancel_ticket(identity, booking_id)
                else:
                    book_ticket(identity, flight_id, [{"name": "C"}], "business")
                return kind
            except (AlreadyCancelled, InsufficientSeats) as exc:
                return type(exc).__name__

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        outcomes = list(pool.map(run, jobs))

    assert outcomes.count("cancel") == 3
    assert outcomes.count("AlreadyCancelled") == 3

    with threaded_app.app_context():
        flight = db.session.get(Flight, flight_id)
        confirmed = Booking.query.filter_by(flight_id=flight_id, booking_status="confirmed").all()
        held = sum(b.seat_count for b in confirmed)
        assert 0 <= flight.available_seats <= flight.total_seats
        assert flight.available_seats == flight.total_seats - held

        codes = [code for b in Booking.query.all() for code in b.seats]
        assert len(set(codes)) == len(codes)
