import logging
import os

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager

from config import config
from errors import register_error_handlers
from model import db

# Blueprints
from routers.auth import auth_bp
from routers.user import user_bp
from routers.operator import operator_bp
from routers.admin import admin_bp

jwt = JWTManager()


def create_app(config_name=None, overrides=None):
    # config_name falls back to FLASK_ENV; overrides are applied on top of it
    app = Flask(__name__)

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")
    app.config.from_object(config.get(config_name, config["default"]))
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    db.init_app(app)
    jwt.init_app(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(operator_bp)
    app.register_blueprint(admin_bp)

    @app.route("/")
    def index():
        return "Flight Booking API is running!"

    with app.app_context():
        db.create_all()

    return app


# Token failures are always 401
@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({"message": "No token, authorization denied", "error": "Unauthenticated"}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({"message": "Token is not valid", "error": "Unauthenticated"}), 401


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return jsonify({"message": "Token has expired", "error": "Unauthenticated"}), 401


if __name__ == "__main__":
    create_app().run(debug=True, threaded=True)
