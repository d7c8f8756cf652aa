from backinstock.services.catalog.base import CatalogClient
from backinstock.services.catalog.shopify_client import ShopifyCatalogClient
from backinstock.services.catalog.static import StaticCatalogClient
from backinstock.services.catalog.types import CatalogVariant

__all__ = ["CatalogClient", "CatalogVariant", "ShopifyCatalogClient", "StaticCatalogClient"]
