import math
from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from errors import NotFound, ServerError, ValidationError
from locks import seat_locks
from model import Flight, db

# JSON field -> Flight column
FLIGHT_FIELDS = {
    "flightName": "flight_name",
    "flightId": "flight_code",
    "origin": "origin",
    "destination": "destination",
    "departureTime": "departure_time",
    "arrivalTime": "arrival_time",
    "basePrice": "base_price",
    "totalSeats": "total_seats",
    "journeyDate": "journey_date",
}

# Largest cabin we accept
MAX_SEATS = 10000


def parse_journey_date(value):
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("journeyDate must be a date string.")
    # both "YYYY-MM-DD" and ISO with time are accepted
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValidationError("Invalid journeyDate: %s" % value)


def _parse_seats(value):
    if isinstance(value, bool):
        raise ValidationError("totalSeats must be a positive integer.")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise ValidationError("totalSeats must be a positive integer.")
    if value > MAX_SEATS:
        raise ValidationError("totalSeats cannot exceed %s." % MAX_SEATS)
    return value


def _parse_price(value):
    if isinstance(value, bool):
        raise ValidationError("basePrice must be a non-negative number.")
    try:
        price = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("basePrice must be a non-negative number.")
    if not math.isfinite(price) or price < 0:
        raise ValidationError("basePrice must be a non-negative number.")
    return price


def _clean(field, value):
    if field == "totalSeats":
        return _parse_seats(value)
    if field == "basePrice":
        return _parse_price(value)
    if field == "journeyDate":
        return parse_journey_date(value)
    if not isinstance(value, str):
        raise ValidationError("%s must be a string." % field)
    return value.strip()


def _provided(value):
    return value is not None and not (isinstance(value, str) and not value.strip())


def add_flight(data):
    data = data or {}
    missing = [f for f in FLIGHT_FIELDS if not _provided(data.get(f))]
    if missing:
        raise ValidationError("Missing required fields: %s" % ", ".join(missing))

    values = {column: _clean(field, data[field]) for field, column in FLIGHT_FIELDS.items()}
    flight = Flight(available_seats=values["total_seats"], **values)
    db.session.add(flight)
    db.session.commit()
    current_app.logger.info("Flight %s (id=%s) added with %s seats",
                            flight.flight_code, flight.id, flight.total_seats)
    return flight


def update_flight(flight_id, data):
    data = data or {}
    if flight_id is None:
        raise ValidationError("Flight _id is required.")

    # Absent or empty fields keep their current value
    changes = {column: _clean(field, data[field])
               for field, column in FLIGHT_FIELDS.items() if _provided(data.get(field))}

    if db.session.get(Flight, flight_id) is None:
        raise NotFound("Flight not found.")

    with seat_locks.for_flight(flight_id):
        flight = db.session.get(Flight, flight_id, populate_existing=True)
        if not flight:
            raise NotFound("Flight not found.")

        new_total = changes.pop("total_seats", None)
        if new_total is not None and new_total != flight.total_seats:
            booked = flight.total_seats - flight.available_seats
            if new_total < booked:
                raise ValidationError(
                    "totalSeats cannot be lower than the %s seats already booked." % booked,
                    booked=booked)
            flight.total_seats = new_total
            flight.available_seats = new_total - booked

        for column, value in changes.items():
            setattr(flight, column, value)

        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Failed to update flight %s", flight_id)
            raise ServerError()

    current_app.logger.info("Flight %s updated", flight_id)
    return flight


def get_flight(flight_id):
    flight = db.session.get(Flight, flight_id)
    if not flight:
        raise NotFound("Flight not found.")
    return flight


def list_flights(origin=None, destination=None, journey_date=None):
    query = Flight.query
    if origin:
        query = query.filter(Flight.origin.ilike(f"%{origin}%"))
    if destination:
        query = query.filter(Flight.destination.ilike(f"%{destination}%"))
    if journey_date:
        query = query.filter(Flight.journey_date == parse_journey_date(journey_date))
    return query.order_by(Flight.journey_date.asc(), Flight.id.asc()).all()
