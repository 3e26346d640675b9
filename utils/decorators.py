from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

ACCESS_COOKIE = "accessToken"


def _extract_access_token() -> str | None:
    """Authorization: Bearer <token> first, then the accessToken cookie."""
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth.split(" ", 1)[1].strip()
        if token:
            return token
    return request.cookies.get(ACCESS_COOKIE) or None


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            sessions = current_app.extensions["session_manager"]
            # raises AuthError (401) for a missing/invalid token or unknown account
            g.current_user = sessions.authenticate(_extract_access_token())
            return fn(*args, **kwargs)

        return wrapper

    return decorator
