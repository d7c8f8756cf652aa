from backinstock.models.notification_record import NotificationRecord
from backinstock.models.notification_settings import BackInStockSettings
from backinstock.models.subscription import Subscription

__all__ = [
    "BackInStockSettings",
    "NotificationRecord",
    "Subscription",
]
