"""Profile operations: plain field updates plus the channel profile aggregate."""
from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import and_, exists, func, select

from models.account import Account
from models.subscription import Subscription
from services.exceptions import NotFoundError, ValidationError


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class ProfileService:
    def __init__(self, storage, uploader):
        self.storage = storage
        self.uploader = uploader

    def _load(self, account_id: str) -> Account:
        account = self.storage.get(Account, account_id)
        if account is None:
            raise NotFoundError("User does not exist")
        return account

    def current_account(self, account_id: str) -> Account:
        return self._load(account_id)

    def update_details(self, account_id: str, full_name, email) -> Account:
        # email uniqueness is left to the unique index on accounts.email
        if _blank(full_name) or _blank(email):
            raise ValidationError("All fields are required")
        account = self._load(account_id)
        account.full_name = full_name.strip()
        account.email = email.strip()
        self.storage.new(account)
        self.storage.save()
        return account

    def _replace_media(self, account_id: str, local_path: Optional[str], field: str, label: str) -> Account:
        if not local_path:
            raise ValidationError(f"{label} file is missing")
        account = self._load(account_id)
        uploaded = self.uploader.upload(local_path)
        if not uploaded or not uploaded.get("url"):
            raise ValidationError(f"Error while uploading {label.lower()}")
        setattr(account, field, uploaded["url"])
        self.storage.new(account)
        self.storage.save()
        return account

    def update_avatar(self, account_id: str, local_path: Optional[str]) -> Account:
        return self._replace_media(account_id, local_path, "avatar", "Avatar")

    def update_cover_image(self, account_id: str, local_path: Optional[str]) -> Account:
        return self._replace_media(account_id, local_path, "cover_image", "Cover image")

    def channel_profile(self, username, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Account fields plus subscription counts, computed in one query:
        subscriptions are counted once by channel (subscribers) and once by
        subscriber (channels this account follows).
        """
        if _blank(username):
            raise ValidationError("username is missing")

        subscribers = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == Account.id)
            .correlate(Account)
            .scalar_subquery()
        )
        subscribed_to = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == Account.id)
            .correlate(Account)
            .scalar_subquery()
        )
        is_subscribed = (
            exists()
            .where(and_(Subscription.channel_id == Account.id, Subscription.subscriber_id == viewer_id))
            .correlate(Account)
        )

        session = self.storage.get_session()
        row = (
            session.query(
                Account,
                subscribers.label("subscribers_count"),
                subscribed_to.label("channels_subscribed_to_count"),
                is_subscribed.label("is_subscribed"),
            )
            .filter(Account.username == username.strip().lower())
            .first()
        )
        if row is None:
            raise NotFoundError("Channel does not exist")

        account = row[0]
        return {
            "id": account.id,
            "username": account.username,
            "email": account.email,
            "full_name": account.full_name,
            "avatar": account.avatar,
            "cover_image": account.cover_image,
            "subscribers_count": row.subscribers_count or 0,
            "channels_subscribed_to_count": row.channels_subscribed_to_count or 0,
            "is_subscribed": bool(viewer_id) and bool(row.is_subscribed),
        }
