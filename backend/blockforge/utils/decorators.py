from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from blockforge.models.user import ROLES


def roles_required(*allowed_roles):
    """Reject the request with 403 unless the token's ``role`` claim is allowed."""
    unknown = set(allowed_roles) - set(ROLES)
    if unknown:
        raise ValueError(f"Unknown roles: {sorted(unknown)}")

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            # Also applied under @jwt_required; verifying twice is harmless
            verify_jwt_in_request()
            if get_jwt().get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator
