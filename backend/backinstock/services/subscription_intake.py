"""
Storefront subscription intake: create-or-reactivate on the (shop, email, product, variant) key.

- no row: create it, pending
- row pending: no-op, already subscribed
- row notified: reactivate (pending again, fresh created_at) so the next restock notifies again
"""
import logging
import re

from backinstock.core import constants
from backinstock.core.errors import FeatureDisabledError, StoreConflict, ValidationError
from backinstock.services.settings_service import load_settings
from backinstock.services.subscription_store import SubscriptionStore
from backinstock.services.types import SubscribeResult

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_variant_id(variant_id: str | int | None) -> str:
    if variant_id is None:
        return constants.ALL_VARIANTS
    return str(variant_id).strip()


class SubscriptionIntake:
    def __init__(self, store: SubscriptionStore) -> None:
        self._store = store

    def subscribe(
        self,
        shop: str,
        email: str,
        product_id: str | int,
        variant_id: str | int | None = None,
        quantity: int = 1,
    ) -> SubscribeResult:
        shop = (shop or "").strip()
        email = (email or "").strip()
        product_id = str(product_id).strip() if product_id is not None else ""
        variant_id = normalize_variant_id(variant_id)

        if not shop or not product_id or not email:
            raise ValidationError("Missing required fields")
        if not EMAIL_RE.match(email):
            raise ValidationError("Invalid email format")
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        settings = load_settings(self._store, shop)
        if not settings.enabled:
            raise FeatureDisabledError("Back in stock notifications are disabled")

        existing = self._store.find_by_identity(shop, email, product_id, variant_id)
        if existing is None:
            try:
                self._store.create(shop, email, product_id, variant_id, quantity)
            except StoreConflict:
                # A concurrent request created the same identity first
                logger.info("Concurrent subscribe for %s / %s / %r", email, product_id, variant_id)
                return SubscribeResult(created=False, already_subscribed=True, message=settings.success_message)
            logger.info("Subscription created: shop=%s product=%s variant=%r", shop, product_id, variant_id)
            return SubscribeResult(created=True, already_subscribed=False, message=settings.success_message)

        if existing.notified:
            if self._store.reactivate(existing.id):
                logger.info("Subscription %s reactivated for %s", existing.id, email)
        return SubscribeResult(created=False, already_subscribed=True, message=settings.success_message)
