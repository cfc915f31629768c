from functools import wraps
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity

from lendify.models.user import ROLE_ADMIN
from lendify.utils.responses import json_error


def current_identity():
    """(user_id, role) of the caller, read from the JWT of the current request."""
    user_id = int(get_jwt_identity())
    role = (get_jwt() or {}).get("role")
    return user_id, role


def is_admin(role) -> bool:
    return role == ROLE_ADMIN


def role_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            _user_id, role = current_identity()
            if role not in roles:
                return json_error("Forbidden", 403)
            return fn(*args, **kwargs)
        return wrapper
    return decorator


admin_required = role_required(ROLE_ADMIN)
