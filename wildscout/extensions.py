"""
Shared Flask extension instances.

The limiter lives here so route modules can decorate views without importing
the app factory.
"""

from flask import g
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


def rate_limit_key() -> str:
    """Per-user key once @require_auth has resolved the user, else client IP."""
    user = getattr(g, "user", None)
    if user and user.get("id"):
        return f"user:{user['id']}"
    return get_remote_address()


# Configured from RATELIMIT_* settings in create_app()
limiter = Limiter(key_func=rate_limit_key)
