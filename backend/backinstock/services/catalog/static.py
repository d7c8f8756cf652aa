"""In-memory CatalogClient for local runs and tests."""
import logging

from backinstock.services.catalog.types import CatalogVariant
from backinstock.services.types import ShopInfo

logger = logging.getLogger(__name__)


class StaticCatalogClient:
    """Catalog backed by dicts; register variants and shops up front."""

    def __init__(self):
        self._variants: dict[tuple[str, str], CatalogVariant] = {}
        self._shops: dict[str, ShopInfo] = {}
        self.lookups: list[tuple[str, str]] = []

    def add_variant(self, shop: str, inventory_item_id: str, variant: CatalogVariant) -> None:
        self._variants[(shop, str(inventory_item_id))] = variant

    def add_shop(self, shop: str, name: str, domain: str) -> None:
        self._shops[shop] = ShopInfo(name=name, domain=domain)

    def resolve_variant_by_inventory_item(self, shop: str, inventory_item_id: str) -> CatalogVariant | None:
        self.lookups.append((shop, str(inventory_item_id)))
        return self._variants.get((shop, str(inventory_item_id)))

    def get_shop_info(self, shop: str) -> ShopInfo | None:
        return self._shops.get(shop)
