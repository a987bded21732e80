from functools import wraps

from flask_login import current_user

from supperclub.errors import AppError
from supperclub.models import USER_ROLES


def role_required(*roles):
    allowed = {role.upper() for role in roles}
    unknown = allowed - set(USER_ROLES)
    if unknown:
        raise ValueError(f"Unknown roles: {', '.join(sorted(unknown))}")

    def wrapper(func):
        @wraps(func)
        def inner(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AppError("Authentication required.", 401)
            if current_user.role not in allowed:
                raise AppError(f"Requires role: {' or '.join(sorted(allowed))}.", 403)
            return func(*args, **kwargs)

        return inner

    return wrapper
