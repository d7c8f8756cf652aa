"""
Entry point for inventory-became-available events.

available <= 0, unresolved inventory items, disabled shops and restocks nobody is
waiting for all end as NoOp. Otherwise the eligible subscriptions are dispatched and
the DispatchReport is returned. This path never raises to the webhook.
"""
import logging

from backinstock.core.errors import CatalogResolutionError
from backinstock.services.catalog.base import CatalogClient
from backinstock.services.match_resolver import MatchResolver
from backinstock.services.notification_dispatcher import NotificationDispatcher
from backinstock.services.settings_service import load_settings
from backinstock.services.subscription_store import SubscriptionStore
from backinstock.services.types import DispatchReport, InventoryAvailabilityEvent, NoOp, ResolvedRestock

logger = logging.getLogger(__name__)

NOOP_NOT_AVAILABLE = "inventory not available"
NOOP_UNRESOLVED = "inventory item not resolved"
NOOP_DISABLED = "notifications disabled"
NOOP_NO_SUBSCRIBERS = "no eligible subscriptions"
NOOP_ERROR = "internal error"


class RestockEventHandler:
    def __init__(
        self,
        store: SubscriptionStore,
        catalog: CatalogClient,
        matcher: MatchResolver,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._matcher = matcher
        self._dispatcher = dispatcher

    def handle(self, event: InventoryAvailabilityEvent) -> DispatchReport | NoOp:
        try:
            return self._handle(event)
        except Exception:
            logger.exception(
                "Error processing inventory event for %s (inventory item %s)", event.shop, event.inventory_item_id
            )
            return NoOp(NOOP_ERROR)

    def _handle(self, event: InventoryAvailabilityEvent) -> DispatchReport | NoOp:
        if event.available <= 0:
            return self._noop(event, NOOP_NOT_AVAILABLE)

        restock = self._resolve(event)
        if restock is None:
            return self._noop(event, NOOP_UNRESOLVED)

        # Checked at restock time, not subscribe time: a shop may have switched off in between
        settings = load_settings(self._store, event.shop)
        if not settings.enabled:
            return self._noop(event, NOOP_DISABLED)

        subs = self._matcher.find_eligible(event.shop, restock.product_id, restock.variant_id)
        if not subs:
            return self._noop(event, NOOP_NO_SUBSCRIBERS)

        return self._dispatcher.dispatch(event.shop, restock, settings, subs)

    def _resolve(self, event: InventoryAvailabilityEvent) -> ResolvedRestock | None:
        try:
            variant = self._catalog.resolve_variant_by_inventory_item(event.shop, event.inventory_item_id)
        except CatalogResolutionError as e:
            logger.warning("Catalog lookup failed for inventory item %s: %s", event.inventory_item_id, e)
            return None
        if variant is None or not variant.product_id:
            return None

        try:
            shop_info = self._catalog.get_shop_info(event.shop)
        except CatalogResolutionError as e:
            logger.warning("Shop info lookup failed for %s: %s", event.shop, e)
            shop_info = None

        return ResolvedRestock(
            shop=event.shop,
            product_id=variant.product_id,
            variant_id=variant.variant_id,
            product_title=variant.product_title,
            product_handle=variant.product_handle,
            product_image_url=variant.product_image_url,
            shop_name=shop_info.name if shop_info else event.shop,
            shop_domain=shop_info.domain if shop_info else event.shop,
        )

    def _noop(self, event: InventoryAvailabilityEvent, reason: str) -> NoOp:
        logger.info(
            "Inventory event for %s (item %s, available=%s): no-op, %s",
            event.shop,
            event.inventory_item_id,
            event.available,
            reason,
        )
        return NoOp(reason)
