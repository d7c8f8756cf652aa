"""
Eligible subscriptions for a restocked variant.

Eligible = same shop, same product, variant matches or is the all-variants sentinel,
and not yet notified. Oldest subscription first; ties by insertion order. Read-only.
"""
import logging

from backinstock.services.subscription_store import SubscriptionStore
from backinstock.services.types import SubscriptionRef

logger = logging.getLogger(__name__)


class MatchResolver:
    def __init__(self, store: SubscriptionStore) -> None:
        self._store = store

    def find_eligible(self, shop: str, product_id: str, variant_id: str) -> list[SubscriptionRef]:
        subs = self._store.query_eligible(shop, product_id, variant_id)
        # Dispatch must never see a notified row, whatever the store returned
        eligible = [s for s in subs if not s.notified and s.shop == shop and s.product_id == product_id]
        logger.info(
            "Found %s eligible subscriptions for shop=%s product=%s variant=%s",
            len(eligible),
            shop,
            product_id,
            variant_id,
        )
        return eligible
