"""
Authentication helpers for the JSON API.

Sign-in itself happens against Supabase Auth on the client; the API only
verifies the resulting access token. Tokens are read from an
``Authorization: Bearer`` header, falling back to the Flask session.

Provides:
- @require_auth: Decorator that answers 401 JSON for anonymous requests
- get_current_user / get_current_user_id
"""

from __future__ import annotations
from functools import wraps
from typing import Optional, Dict, Any
from flask import session, request, g, jsonify
from wildscout.services import supabase_client

SESSION_ACCESS_TOKEN_KEY = "access_token"
SESSION_REFRESH_TOKEN_KEY = "refresh_token"


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def get_current_user() -> Optional[Dict[str, Any]]:
    """
    Get the user making this request.

    Returns:
        User dict with id, email, etc. or None if not authenticated
    """
    if hasattr(g, 'user'):
        return g.user

    access_token = _bearer_token()
    refresh_token = None
    if not access_token:
        access_token = session.get(SESSION_ACCESS_TOKEN_KEY)
        refresh_token = session.get(SESSION_REFRESH_TOKEN_KEY)

    if not access_token:
        g.user = None
        return None

    user = supabase_client.verify_session(access_token, refresh_token)
    if not user:
        # Stale cookie session
        session.pop(SESSION_ACCESS_TOKEN_KEY, None)
        session.pop(SESSION_REFRESH_TOKEN_KEY, None)

    g.user = user
    return user


def get_current_user_id() -> Optional[str]:
    user = get_current_user()
    return user.get("id") if user else None


def is_authenticated() -> bool:
    return get_current_user() is not None


def require_auth(f):
    """
    Decorator to require authentication for an API route.

    Usage:
        @api_bp.route('/journal')
        @require_auth
        def journal():
            user_id = get_current_user_id()
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return jsonify({"success": False, "error": "Authentication required."}), 401

        return f(*args, **kwargs)

    return decorated_function
