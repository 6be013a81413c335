# Route guards over the claims carried in the x-auth-token header

from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from errors import Forbidden


def current_identity():
    claims = get_jwt()
    return {
        "id": int(get_jwt_identity()),
        "role": claims.get("role"),
        "approval": claims.get("approval"),
    }


def auth_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        return fn(*args, **kwargs)
    return wrapper


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if get_jwt().get("role") != "admin":
            raise Forbidden("Access denied: Admin role required")
        return fn(*args, **kwargs)
    return wrapper


def operator_required(fn):
    # approved flight operators and admins
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        claims = get_jwt()
        if claims.get("role") == "admin":
            return fn(*args, **kwargs)
        if claims.get("role") != "flight-operator" or claims.get("approval") != "approved":
            raise Forbidden("Access denied: Approved Flight Operator role required")
        return fn(*args, **kwargs)
    return wrapper


def ensure_owner_or_admin(identity, owner_id, message="Not authorized to access this resource."):
    if identity["role"] != "admin" and identity["id"] != owner_id:
        raise Forbidden(message)
