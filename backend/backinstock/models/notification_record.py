"""Audit row for one delivery attempt. Written once, never updated."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from backinstock.db.base import Base


class NotificationRecord(Base):
    __tablename__ = "back_in_stock_notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Points at the subscription row by id and carries its identity tuple; no FK so
    # admin deletes of subscriptions keep the audit trail.
    subscription_id = Column(Integer, nullable=False, index=True)
    shop = Column(String(255), nullable=False, index=True)
    email = Column(String(320), nullable=False)
    product_id = Column(String(64), nullable=False)
    variant_id = Column(String(64), nullable=False, default="")
    status = Column(String(16), nullable=False)  # sent | failed
    error = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
