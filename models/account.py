from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Account(BaseModel, Base):
    __tablename__ = "accounts"

    # username is stored lowercased; uniqueness enforced here
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(1024), nullable=False)
    cover_image = Column(String(1024), nullable=False, default="")
    # Single active refresh token; NULL once logged out
    refresh_token = Column(String(1024), nullable=True)

    subscribers = relationship(
        "Subscription",
        foreign_keys="Subscription.channel_id",
        back_populates="channel",
        passive_deletes=True,
    )
    subscriptions = relationship(
        "Subscription",
        foreign_keys="Subscription.subscriber_id",
        back_populates="subscriber",
        passive_deletes=True,
    )
