from flask import Blueprint, jsonify

from access import operator_required
from catalog import add_flight, update_flight
from routers.common import json_body, parse_id

operator_bp = Blueprint("operator", __name__)


# Add flight
@operator_bp.route("/add-flight", methods=["POST"])
@operator_required
def create_flight():
    flight = add_flight(json_body())
    return jsonify({"message": "Flight added successfully!", "flight": flight.to_dict()}), 201


# Update flight; fields left out keep their values
@operator_bp.route("/update-flight", methods=["PUT"])
@operator_required
def edit_flight():
    data = json_body()
    flight = update_flight(parse_id(data.get("_id"), "Flight ID"), data)
    return jsonify({"message": "Flight updated successfully!", "flight": flight.to_dict()}), 200
