# Seat codes continue from every seat ever issued in a flight and class, cancelled ones included.

import math

from flask import current_app
from sqlalchemy import case, func, update
from sqlalchemy.exc import SQLAlchemyError

from access import ensure_owner_or_admin
from errors import AlreadyCancelled, InsufficientSeats, NotFound, ServerError, ValidationError
from locks import seat_locks
from model import SEAT_PREFIXES, Booking, Flight, User, db


def _validate_passengers(passengers):
    if not isinstance(passengers, list) or not passengers:
        raise ValidationError("At least one passenger is required.")
    cleaned = []
    for p in passengers:
        if not isinstance(p, dict) or not isinstance(p.get("name"), str) or not p["name"].strip():
            raise ValidationError("Each passenger needs a name.")
        age = p.get("age")
        if age is not None and (isinstance(age, bool) or not isinstance(age, (int, float))
                                or not math.isfinite(age) or age < 0):
            raise ValidationError("Passenger age must be a non-negative number.")
        cleaned.append({"name": p["name"].strip(), "age": age})
    return cleaned


def seats_issued(flight_id, seat_class):
    total = db.session.query(func.coalesce(func.sum(Booking.seat_count), 0)).filter(
        Booking.flight_id == flight_id,
        Booking.seat_class == seat_class,
    ).scalar()
    return int(total)


def assign_seat_codes(seat_class, issued, count):
    prefix = SEAT_PREFIXES[seat_class]
    return [f"{prefix}-{issued + i + 1}" for i in range(count)]


def book_ticket(identity, flight_id, passengers, seat_class, mobile=None):
    if flight_id is None:
        raise ValidationError("flightId is required.")
    # unknown flights never reach the lock registry
    if db.session.get(Flight, flight_id) is None:
        raise NotFound("Flight not found.")

    passengers = _validate_passengers(passengers)
    if seat_class not in SEAT_PREFIXES:
        raise ValidationError("Invalid seatClass. Must be one of: %s" % ", ".join(SEAT_PREFIXES))
    count = len(passengers)

    with seat_locks.for_flight(flight_id):
        # reload: the identity map may hold a copy from before the lock was taken
        flight = db.session.get(Flight, flight_id, populate_existing=True)
        if not flight:
            raise NotFound("Flight not found.")
        if flight.available_seats < count:
            raise InsufficientSeats(
                f"Not enough seats available. Only {flight.available_seats} seats left.",
                available=flight.available_seats)

        owner = db.session.get(User, identity["id"])
        try:
            result = db.session.execute(
                update(Flight)
                .where(Flight.id == flight.id, Flight.available_seats >= count)
                .values(available_seats=Flight.available_seats - count)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                # another process took the seats between our read and write
                db.session.rollback()
                db.session.refresh(flight)
                raise InsufficientSeats(
                    f"Not enough seats available. Only {flight.available_seats} seats left.",
                    available=flight.available_seats)

            seats = assign_seat_codes(seat_class, seats_issued(flight.id, seat_class), count)
            booking = Booking(
                user_id=identity["id"],
                flight_id=flight.id,
                flight_name=flight.flight_name,
                flight_code=flight.flight_code,
                origin=flight.origin,
                departure=flight.departure_time,
                destination=flight.destination,
                journey_date=flight.journey_date,
                journey_time=flight.departure_time,
                email=owner.email if owner else None,
                mobile=mobile or "N/A",
                passengers=passengers,
                seat_count=count,
                seats=seats,
                seat_class=seat_class,
                total_price=count * flight.base_price,
                booking_status="confirmed",
            )
            db.session.add(booking)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Booking on flight %s failed, nothing applied", flight_id)
            raise ServerError()

    current_app.logger.info("Booking %s: user %s took %s on flight %s",
                            booking.id, identity["id"], ", ".join(seats), flight_id)
    return booking


def cancel_ticket(identity, booking_id):
    booking = db.session.get(Booking, booking_id)
    if not booking:
        raise NotFound("Booking not found.")
    ensure_owner_or_admin(identity, booking.user_id, "Not authorized to cancel this booking.")

    with seat_locks.for_flight(booking.flight_id):
        db.session.refresh(booking)
        if booking.booking_status == "cancelled":
            raise AlreadyCancelled()

        try:
            booking.booking_status = "cancelled"
            flight = db.session.get(Flight, booking.flight_id, populate_existing=True)
            if flight is None:
                current_app.logger.warning(
                    "Flight %s of booking %s no longer exists, seats not restored",
                    booking.flight_id, booking.id)
            else:
                restored = flight.available_seats + booking.seat_count
                if restored > flight.total_seats:
                    current_app.logger.warning(
                        "Restoring %s seats on flight %s would exceed capacity (%s/%s), clamping",
                        booking.seat_count, flight.id, restored, flight.total_seats)
                db.session.execute(
                    update(Flight)
                    .where(Flight.id == flight.id)
                    .values(available_seats=case(
                        (Flight.available_seats + booking.seat_count > Flight.total_seats,
                         Flight.total_seats),
                        else_=Flight.available_seats + booking.seat_count,
                    ))
                    .execution_options(synchronize_session=False)
                )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Cancelling booking %s failed, nothing applied", booking_id)
            raise ServerError()

    current_app.logger.info("Booking %s cancelled by user %s", booking.id, identity["id"])
    return booking


def list_user_bookings(identity):
    return (Booking.query.filter_by(user_id=identity["id"])
            .order_by(Booking.booking_date.desc(), Booking.id.desc()).all())


def list_bookings_detailed():
    rows = (db.session.query(Booking, User, Flight)
            .join(User, Booking.user_id == User.id)
            .outerjoin(Flight, Booking.flight_id == Flight.id)
            .order_by(Booking.id.asc()).all())
    result = []
    for booking, user, flight in rows:
        data = booking.to_dict()
        data["user"] = {"_id": user.id, "username": user.username,
                        "email": user.email, "usertype": user.usertype}
        data["flight"] = None if flight is None else {
            "_id": flight.id,
            "flightName": flight.flight_name,
            "origin": flight.origin,
            "destination": flight.destination,
            "departureTime": flight.departure_time,
            "journeyDate": flight.journey_date.isoformat(),
        }
        result.append(data)
    return result


def platform_stats():
    confirmed = Booking.booking_status == "confirmed"
    flights = db.session.query(func.count(Flight.id)).scalar()
    bookings = db.session.query(func.count(Booking.id)).scalar()
    confirmed_bookings, passengers, revenue = db.session.query(
        func.count(Booking.id),
        func.coalesce(func.sum(Booking.seat_count), 0),
        func.coalesce(func.sum(Booking.total_price), 0),
    ).filter(confirmed).one()
    return {
        "total_flights": flights,
        "total_bookings": bookings,
        "confirmed_bookings": confirmed_bookings,
        "cancelled_bookings": bookings - confirmed_bookings,
        "total_passengers": int(passengers),
        "total_revenue": float(revenue),
    }
