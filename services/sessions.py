"""
Session manager: registration, login, refresh-token rotation, logout and
password change.

Each account holds at most one refresh token (Account.refresh_token).
Login overwrites it, refresh swaps it for a new one, logout clears it; any
refresh token that does not equal the stored value is rejected even when its
signature and expiry are fine. Every operation runs all of its checks first and
commits once at the end.
"""
from __future__ import annotations

import hmac
import logging
from typing import Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models.account import Account
from services.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    TokenInvalid,
    ValidationError,
)
from utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class SessionManager:
    def __init__(self, storage, tokens, uploader):
        self.storage = storage
        self.tokens = tokens
        self.uploader = uploader

    def _find_by_identity(self, username: Optional[str], email: Optional[str]) -> Optional[Account]:
        clauses = []
        if not _blank(username):
            clauses.append(Account.username == username.strip().lower())
        if not _blank(email):
            clauses.append(Account.email == email.strip())
        if not clauses:
            return None
        session = self.storage.get_session()
        return session.query(Account).filter(or_(*clauses)).first()

    def _issue_pair(self, account: Account) -> Tuple[str, str]:
        return self.tokens.issue_access_token(account), self.tokens.issue_refresh_token(account.id)

    def register(self, *, full_name, email, username, password,
                 avatar_path=None, cover_image_path=None) -> Account:
        if any(_blank(v) for v in (full_name, email, username, password)):
            raise ValidationError("All fields are required")

        username = username.strip().lower()
        email = email.strip()
        if self._find_by_identity(username, email):
            raise ConflictError("User with email or username already exists")

        if not avatar_path:
            raise ValidationError("Avatar file is required")
        avatar = self.uploader.upload(avatar_path)
        if not avatar or not avatar.get("url"):
            raise ValidationError("Avatar file is required")
        # cover image is optional: a failed upload just leaves it empty
        cover_image = self.uploader.upload(cover_image_path) if cover_image_path else None

        account = Account(
            full_name=full_name.strip(),
            username=username,
            email=email,
            avatar=avatar["url"],
            cover_image=(cover_image or {}).get("url", ""),
            password_hash=hash_password(password),
        )
        self.storage.new(account)
        try:
            self.storage.save()
        except IntegrityError:
            # lost a race against a concurrent registration
            raise ConflictError("User with email or username already exists")

        created = self.storage.get(Account, account.id)
        if created is None:
            raise InternalError("Something went wrong while registering the user")
        logger.info("registered account %s (%s)", created.id, created.username)
        return created

    def login(self, *, password, username=None, email=None) -> Tuple[Account, str, str]:
        if _blank(username) and _blank(email):
            raise ValidationError("username or email is required")
        if _blank(password):
            raise ValidationError("Password is required")

        account = self._find_by_identity(username, email)
        if account is None:
            raise NotFoundError("User does not exist")
        if not verify_password(password, account.password_hash):
            raise AuthError("Invalid user credentials")

        access_token, refresh_token = self._issue_pair(account)
        # overwriting the slot invalidates whatever refresh token was issued before
        account.refresh_token = refresh_token
        self.storage.new(account)
        self.storage.save()
        logger.info("account %s logged in", account.id)
        return account, access_token, refresh_token

    def refresh(self, incoming: Optional[str]) -> Tuple[str, str]:
        if _blank(incoming):
            raise AuthError("Unauthorized request")

        try:
            account_id = self.tokens.verify_refresh_token(incoming)
        except TokenInvalid:
            # expired, malformed and forged tokens all look the same to the caller
            raise AuthError("Invalid refresh token")

        account = self.storage.get(Account, account_id)
        if account is None:
            raise NotFoundError("User does not exist")

        current = account.refresh_token
        if current is None or not hmac.compare_digest(current.encode(), incoming.encode()):
            logger.warning("rejected stale or reused refresh token for account %s", account.id)
            raise AuthError("Refresh token is expired or used")

        access_token, refresh_token = self._issue_pair(account)
        if not self.storage.swap_refresh_token(account.id, incoming, refresh_token):
            logger.warning("concurrent refresh lost the swap for account %s", account.id)
            raise AuthError("Refresh token is expired or used")
        return access_token, refresh_token

    def logout(self, account_id: str) -> None:
        account = self.storage.get(Account, account_id)
        if account is None:
            raise NotFoundError("User does not exist")
        if account.refresh_token is None:
            return
        account.refresh_token = None
        self.storage.new(account)
        self.storage.save()
        logger.info("account %s logged out", account.id)

    def change_password(self, account_id: str, old_password, new_password) -> None:
        # outstanding refresh tokens stay valid after a password change
        if _blank(old_password) or _blank(new_password):
            raise ValidationError("Old and new password are required")
        account = self.storage.get(Account, account_id)
        if account is None:
            raise NotFoundError("User does not exist")
        if not verify_password(old_password, account.password_hash):
            raise AuthError("Invalid old password")
        account.password_hash = hash_password(new_password)
        self.storage.new(account)
        self.storage.save()

    def authenticate(self, access_token: Optional[str]) -> Account:
        """Resolve a bearer access token to its Account or raise AuthError."""
        if _blank(access_token):
            raise AuthError("Unauthorized request")
        try:
            account_id = self.tokens.verify_access_token(access_token)
        except TokenInvalid:
            raise AuthError("Invalid access token")
        account = self.storage.get(Account, account_id)
        if account is None:
            raise AuthError("Invalid access token")
        return account
