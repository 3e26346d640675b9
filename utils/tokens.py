"""
JWT issuing/verification via PyJWT.

Access and refresh tokens are signed with different secrets and carry a `typ`
claim, so one kind can never be replayed as the other. Expiry is checked
against the service clock rather than PyJWT's wall clock, which lets tests pin time.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

import jwt

from services.exceptions import TokenInvalid

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenSettings:
    access_secret: str
    refresh_secret: str
    access_expires: timedelta
    refresh_expires: timedelta
    algorithm: str = "HS256"
    issuer: str = "channel-accounts-api"

    @classmethod
    def from_config(cls, config) -> "TokenSettings":
        return cls(
            access_secret=config["ACCESS_TOKEN_SECRET"],
            refresh_secret=config["REFRESH_TOKEN_SECRET"],
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "channel-accounts-api"),
        )


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenService:
    def __init__(self, settings: TokenSettings, clock: Callable[[], datetime] | None = None):
        if settings.access_secret == settings.refresh_secret:
            raise ValueError("access and refresh tokens must use different secrets")
        self.settings = settings
        self._clock = clock or _utcnow

    def _encode(self, claims: Dict[str, Any], token_type: str) -> str:
        now = self._clock()
        if token_type == ACCESS:
            secret, lifetime = self.settings.access_secret, self.settings.access_expires
        else:
            secret, lifetime = self.settings.refresh_secret, self.settings.refresh_expires
        payload = dict(claims)
        payload.update(
            {
                "iss": self.settings.issuer,
                "typ": token_type,
                "jti": str(uuid.uuid4()),
                "iat": int(now.timestamp()),
                "exp": int((now + lifetime).timestamp()),
            }
        )
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm)

    def _decode(self, token: str, token_type: str) -> Dict[str, Any]:
        secret = self.settings.access_secret if token_type == ACCESS else self.settings.refresh_secret
        if not token or not isinstance(token, str):
            raise TokenInvalid("Token missing")
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                issuer=self.settings.issuer,
                options={
                    "require": ["sub", "exp", "iat", "typ"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(f"Invalid token: {exc}") from exc

        if payload.get("typ") != token_type:
            raise TokenInvalid("Wrong token type")
        if int(payload["exp"]) <= int(self._clock().timestamp()):
            raise TokenInvalid("Token expired")
        return payload

    def issue_access_token(self, account) -> str:
        """Short-lived token carrying the account id plus display claims"""
        return self._encode(
            {
                "sub": str(account.id),
                "email": account.email,
                "username": account.username,
                "fullName": account.full_name,
            },
            ACCESS,
        )

    def issue_refresh_token(self, account_id: str) -> str:
        return self._encode({"sub": str(account_id)}, REFRESH)

    def verify_access_token(self, token: str) -> str:
        """Return the account id from a valid access token, else raise TokenInvalid"""
        return self._decode(token, ACCESS)["sub"]

    def verify_refresh_token(self, token: str) -> str:
        """Return the account id from a valid refresh token, else raise TokenInvalid.
        Does not look at the stored token; that comparison belongs to the session manager.
        """
        return self._decode(token, REFRESH)["sub"]
