"""Shop settings lookup with built-in defaults when a shop never saved any."""
from backinstock.services.subscription_store import SubscriptionStore
from backinstock.services.types import NotificationSettings


def load_settings(store: SubscriptionStore, shop: str) -> NotificationSettings:
    return store.get_settings(shop) or NotificationSettings()
