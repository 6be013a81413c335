from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

ROLES = ("traveler", "admin", "flight-operator")
APPROVAL_STATES = ("approved", "not-approved", "rejected")
BOOKING_STATUSES = ("confirmed", "cancelled")

# Seat class -> seat code prefix
SEAT_PREFIXES = {
    "economy": "E",
    "premium-economy": "P",
    "business": "B",
    "first-class": "A",
}


def _utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    usertype = db.Column(db.String(20), nullable=False, default="traveler")  # traveler / admin / flight-operator
    approval = db.Column(db.String(20), nullable=False, default="approved")  # only meaningful for operators

    def to_dict(self):
        # password hash is never exposed
        return {
            "_id": self.id,
            "username": self.username,
            "email": self.email,
            "usertype": self.usertype,
            "approval": self.approval,
        }


class Flight(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    flight_name = db.Column(db.String(100), nullable=False)
    flight_code = db.Column(db.String(50), nullable=False)
    origin = db.Column(db.String(100), nullable=False)
    destination = db.Column(db.String(100), nullable=False)
    departure_time = db.Column(db.String(20), nullable=False)
    arrival_time = db.Column(db.String(20), nullable=False)
    journey_date = db.Column(db.Date, nullable=False)
    base_price = db.Column(db.Float, nullable=False)
    total_seats = db.Column(db.Integer, nullable=False)
    available_seats = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.CheckConstraint("available_seats >= 0", name="ck_flight_available_non_negative"),
        db.CheckConstraint("available_seats <= total_seats", name="ck_flight_available_within_total"),
    )

    def to_dict(self):
        return {
            "_id": self.id,
            "flightName": self.flight_name,
            "flightId": self.flight_code,
            "origin": self.origin,
            "destination": self.destination,
            "departureTime": self.departure_time,
            "arrivalTime": self.arrival_time,
            "journeyDate": self.journey_date.isoformat(),
            "basePrice": self.base_price,
            "totalSeats": self.total_seats,
            "availableSeats": self.available_seats,
        }


class Booking(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    # No FK constraint: bookings outlive the flight they reference
    flight_id = db.Column(db.Integer, nullable=False, index=True)

    # Snapshot of the flight at booking time
    flight_name = db.Column(db.String(100), nullable=False)
    flight_code = db.Column(db.String(50))
    origin = db.Column(db.String(100))
    departure = db.Column(db.String(20))
    destination = db.Column(db.String(100))
    journey_date = db.Column(db.Date)
    journey_time = db.Column(db.String(20))

    email = db.Column(db.String(255))
    mobile = db.Column(db.String(30), default="N/A")
    passengers = db.Column(db.JSON, nullable=False)
    seat_count = db.Column(db.Integer, nullable=False)
    seats = db.Column(db.JSON, nullable=False)
    seat_class = db.Column(db.String(20), nullable=False)
    total_price = db.Column(db.Float, nullable=False)
    booking_status = db.Column(db.String(20), nullable=False, default="confirmed")  # confirmed / cancelled
    booking_date = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    user = db.relationship("User", lazy="joined")

    __table_args__ = (
        db.Index("ix_booking_flight_class", "flight_id", "seat_class"),
    )

    def to_dict(self):
        return {
            "_id": self.id,
            "user": self.user_id,
            "flight": self.flight_id,
            "flightName": self.flight_name,
            "flightId": self.flight_code,
            "origin": self.origin,
            "departure": self.departure,
            "destination": self.destination,
            "journeyDate": self.journey_date.isoformat() if self.journey_date else None,
            "journeyTime": self.journey_time,
            "email": self.email,
            "mobile": self.mobile,
            "passengers": self.passengers,
            "seats": self.seats,
            "seatClass": self.seat_class,
            "totalPrice": self.total_price,
            "bookingStatus": self.booking_status,
            "bookingDate": self.booking_date.isoformat() if self.booking_date else None,
        }
