"""
Subscription model: one row per (subscriber, channel) pair.
Both sides reference accounts; a channel is just an Account seen from the other end.
"""
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Subscription(BaseModel, Base):
    __tablename__ = "subscriptions"

    subscriber_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    channel_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)

    subscriber = relationship("Account", foreign_keys=[subscriber_id], back_populates="subscriptions")
    channel = relationship("Account", foreign_keys=[channel_id], back_populates="subscribers")

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
    )
