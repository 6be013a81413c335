from flask import Blueprint, jsonify

from access import admin_required, current_identity
from accounts import list_users, set_operator_approval
from inventory import list_bookings_detailed, platform_stats
from routers.common import json_body, parse_id

admin_bp = Blueprint("admin", __name__)


# Approve flight operator
@admin_bp.route("/approve-operator", methods=["POST"])
@admin_required
def approve_operator():
    user_id = parse_id(json_body().get("id"), "user id")
    user = set_operator_approval(current_identity(), user_id, "approved")
    return jsonify({"message": "Flight operator approved!", "user": user.to_dict()}), 200


# Reject flight operator
@admin_bp.route("/reject-operator", methods=["POST"])
@admin_required
def reject_operator():
    user_id = parse_id(json_body().get("id"), "user id")
    user = set_operator_approval(current_identity(), user_id, "rejected")
    return jsonify({"message": "Flight operator rejected!", "user": user.to_dict()}), 200


# All users
@admin_bp.route("/fetch-users", methods=["GET"])
@admin_required
def fetch_users():
    return jsonify([u.to_dict() for u in list_users()])


# All bookings with owner and flight details
@admin_bp.route("/fetch-bookings", methods=["GET"])
@admin_required
def fetch_bookings():
    return jsonify(list_bookings_detailed())


# Platform statistics
@admin_bp.route("/stats", methods=["GET"])
@admin_required
def admin_stats():
    return jsonify(platform_stats())
