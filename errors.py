from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status_code = 500
    message = "Server Error"

    def __init__(self, message=None, **extra):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.extra = extra

    def to_dict(self):
        payload = {"message": self.message, "error": type(self).__name__}
        payload.update(self.extra)
        return payload


class ValidationError(ApiError):
    status_code = 400
    message = "Invalid request data."


class Conflict(ApiError):
    status_code = 400
    message = "User already exists."


class InvalidRole(ApiError):
    status_code = 400
    message = "Invalid usertype. Must be traveler, admin, or flight-operator."


class NotApplicable(ApiError):
    status_code = 400
    message = "Operation does not apply to this user."


class InsufficientSeats(ApiError):
    status_code = 400
    message = "Not enough seats available."


class AlreadyCancelled(ApiError):
    status_code = 400
    message = "Booking is already cancelled."


class Unauthenticated(ApiError):
    status_code = 401
    message = "No token, authorization denied"


class InvalidCredentials(ApiError):
    status_code = 401
    message = "Invalid credentials"


class Forbidden(ApiError):
    status_code = 403
    message = "Access denied"


class OperatorNotApproved(ApiError):
    status_code = 403
    message = "Flight operator account is not yet approved."


class NotFound(ApiError):
    status_code = 404
    message = "Not found."


class ServerError(ApiError):
    # Storage faults while writing inventory; the caller may retry
    status_code = 503
    message = "Temporary storage failure, please retry."

    def to_dict(self):
        payload = super().to_dict()
        payload["retryable"] = True
        return payload


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description, "error": error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        # Details stay in the server log
        current_app.logger.exception("Unhandled error: %s", error)
        return jsonify({"message": "Server Error"}), 500
