"""Protocol for catalog lookups. The engine never talks to the commerce platform directly."""
from typing import Protocol

from backinstock.services.catalog.types import CatalogVariant
from backinstock.services.types import ShopInfo


class CatalogClient(Protocol):
    """Resolves inventory items and shops to the data needed for messaging."""

    def resolve_variant_by_inventory_item(self, shop: str, inventory_item_id: str) -> CatalogVariant | None:
        """
        Variant + product for an inventory item. None when the item is unknown
        (e.g. untracked inventory). Raises CatalogResolutionError on transport failure.
        """
        ...

    def get_shop_info(self, shop: str) -> ShopInfo | None:
        """Display name and primary domain host. None when unavailable."""
        ...
