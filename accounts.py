from flask import current_app
from flask_jwt_extended import create_access_token
from werkzeug.security import check_password_hash, generate_password_hash

from errors import (Conflict, Forbidden, InvalidCredentials, InvalidRole, NotApplicable,
                    NotFound, OperatorNotApproved, ValidationError)
from model import ROLES, User, db

# Older clients register travelers as "user"
ROLE_ALIASES = {"user": "traveler"}


def issue_token(user):
    # sub = str(id), role and approval travel as additional claims
    return create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.usertype, "approval": user.approval},
    )


def register_user(username, email, usertype, password):
    if not all(isinstance(v, str) and v.strip() for v in (username, email, usertype, password)):
        raise ValidationError("username, email, usertype and password are required.")

    if User.query.filter_by(email=email).first():
        raise Conflict("User already exists with this email.")
    if User.query.filter_by(username=username).first():
        raise Conflict("Username already taken.")

    role = ROLE_ALIASES.get(usertype, usertype)
    if role not in ROLES:
        raise InvalidRole()

    # Flight operators need admin approval before they can log in
    approval = "not-approved" if role == "flight-operator" else "approved"
    user = User(
        username=username,
        email=email,
        usertype=role,
        password=generate_password_hash(password),
        approval=approval,
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Registered %s %s (id=%s)", role, username, user.id)
    return user, issue_token(user)


def authenticate(email, password):
    user = User.query.filter_by(email=email).first() if email else None
    if not user or not password or not check_password_hash(user.password, password):
        raise InvalidCredentials()

    if user.usertype == "flight-operator" and user.approval != "approved":
        raise OperatorNotApproved()

    return user, issue_token(user)


def get_user(identity, user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found.")
    # Users may read their own profile, admins any
    if identity["id"] != user.id and identity["role"] != "admin":
        raise Forbidden("Not authorized to view this user.")
    return user


def list_users():
    return User.query.order_by(User.id.asc()).all()


def set_operator_approval(identity, user_id, approval):
    if identity["role"] != "admin":
        raise Forbidden("Access denied: Admin role required")
    if user_id is None:
        raise ValidationError("User id is required.")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found.")
    if user.usertype != "flight-operator":
        raise NotApplicable("Only flight operators can be approved or rejected.")

    user.approval = approval
    db.session.commit()
    current_app.logger.info("Operator %s (id=%s) set to %s by admin %s",
                            user.username, user.id, approval, identity["id"])
    return user
