from flask import Blueprint, jsonify, request

from access import auth_required, current_identity
from accounts import get_user
from catalog import get_flight, list_flights
from inventory import book_ticket, cancel_ticket, list_user_bookings
from routers.common import json_body, parse_id

user_bp = Blueprint("user", __name__)


# Own profile, or any profile for admins
@user_bp.route("/fetch-user/<user_id>", methods=["GET"])
@auth_required
def fetch_user(user_id):
    user = get_user(current_identity(), parse_id(user_id, "User ID"))
    return jsonify(user.to_dict())


# Public flight list (no auth), optional filters
@user_bp.route("/fetch-flights", methods=["GET"])
def fetch_flights():
    flights = list_flights(
        origin=request.args.get("origin"),
        destination=request.args.get("destination"),
        journey_date=request.args.get("journeyDate") or request.args.get("date"),
    )
    return jsonify([f.to_dict() for f in flights])


@user_bp.route("/fetch-flight/<flight_id>", methods=["GET"])
def fetch_flight(flight_id):
    return jsonify(get_flight(parse_id(flight_id, "Flight ID")).to_dict())


# Book ticket
@user_bp.route("/book-ticket", methods=["POST"])
@auth_required
def book():
    data = json_body()
    booking = book_ticket(
        current_identity(),
        parse_id(data.get("flightId"), "flightId"),
        data.get("passengers"),
        data.get("seatClass"),
        data.get("mobile"),
    )
    return jsonify({"message": "Booking successful!", "booking": booking.to_dict()}), 201


# My bookings
@user_bp.route("/my-bookings", methods=["GET"])
@auth_required
def my_bookings():
    return jsonify([b.to_dict() for b in list_user_bookings(current_identity())])


# Cancel ticket (owner or admin); the booking is kept as cancelled
@user_bp.route("/cancel-ticket/<booking_id>", methods=["PUT"])
@auth_required
def cancel(booking_id):
    booking = cancel_ticket(current_identity(), parse_id(booking_id, "Booking ID"))
    return jsonify({"message": "Booking cancelled successfully!", "booking": booking.to_dict()}), 200
