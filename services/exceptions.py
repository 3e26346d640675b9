"""
Error taxonomy for account and session operations.

Every error carries the HTTP-style status it maps to, but nothing here imports
Flask: the boundary adapter in api/errors.py turns these into the error envelope.
"""
from __future__ import annotations


class AccountServiceError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AccountServiceError):
    """Required input missing, blank, or malformed."""
    status_code = 400
    default_message = "Invalid input"


class ConflictError(AccountServiceError):
    """Username or email already taken."""
    status_code = 409
    default_message = "User already exists"


class NotFoundError(AccountServiceError):
    status_code = 404
    default_message = "User does not exist"


class AuthError(AccountServiceError):
    """Credential mismatch; missing, invalid or reused token; missing authorization."""
    status_code = 401
    default_message = "Unauthorized request"


class TokenInvalid(AccountServiceError):
    """Signature, kind, shape or expiry check failed at the token service."""
    status_code = 401
    default_message = "Invalid token"


class InternalError(AccountServiceError):
    status_code = 500
    default_message = "Something went wrong"
