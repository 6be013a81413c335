from flask import Blueprint, jsonify

from accounts import authenticate, register_user
from routers.common import json_body

auth_bp = Blueprint("auth", __name__)


# Register
@auth_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    user, token = register_user(
        data.get("username"),
        data.get("email"),
        data.get("usertype"),
        data.get("password"),
    )
    return jsonify({"message": "Registration successful!", "token": token, "user": user.to_dict()}), 201


# Login
@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    user, token = authenticate(data.get("email"), data.get("password"))
    return jsonify({"message": "Login successful!", "token": token, "user": user.to_dict()}), 200
