from flask import request

from errors import ValidationError

# Ids are stored as signed 64-bit integers
MAX_ID = 2 ** 63 - 1


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def parse_id(value, label="id"):
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}.")
    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid {label}.")
    if not -MAX_ID - 1 <= parsed <= MAX_ID:
        raise ValidationError(f"Invalid {label}.")
    return parsed
