"""Per-shop merchant configuration: on/off switch and message templates."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from backinstock.core import constants
from backinstock.db.base import Base


class BackInStockSettings(Base):
    __tablename__ = "back_in_stock_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop = Column(String(255), nullable=False, unique=True, index=True)
    enabled = Column(Boolean, nullable=False, default=constants.DEFAULT_ENABLED)
    email_subject = Column(String(500), nullable=False, default=constants.DEFAULT_EMAIL_SUBJECT)
    email_template = Column(Text, nullable=False, default=constants.DEFAULT_EMAIL_TEMPLATE)
    button_text = Column(String(255), nullable=False, default=constants.DEFAULT_BUTTON_TEXT)
    success_message = Column(String(500), nullable=False, default=constants.DEFAULT_SUCCESS_MESSAGE)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
