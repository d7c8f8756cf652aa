"""Shopper's request to be emailed when a product (or one variant of it) is back in stock."""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, UniqueConstraint

from backinstock.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Subscription(Base):
    __tablename__ = "back_in_stock_subscriptions"
    __table_args__ = (
        UniqueConstraint("shop", "email", "product_id", "variant_id", name="uq_subscription_identity"),
        Index("ix_back_in_stock_subscriptions_eligible", "shop", "product_id", "notified", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop = Column(String(255), nullable=False, index=True)
    email = Column(String(320), nullable=False)
    product_id = Column(String(64), nullable=False)
    variant_id = Column(String(64), nullable=False, default="")  # "" = all variants
    quantity = Column(Integer, nullable=False, default=1)
    notified = Column(Boolean, nullable=False, default=False)
    notified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
