"""Shopify Admin GraphQL CatalogClient: inventory item -> variant -> product, and shop info."""
import logging
from typing import Any

import httpx

from backinstock.core import constants
from backinstock.core.errors import CatalogResolutionError
from backinstock.services.catalog.types import CatalogVariant, inventory_item_gid, strip_gid
from backinstock.services.types import ShopInfo

logger = logging.getLogger(__name__)

VARIANT_BY_INVENTORY_ITEM_QUERY = """
query getVariantByInventoryItem($inventoryItemId: ID!) {
  inventoryItem(id: $inventoryItemId) {
    id
    variant {
      id
      product {
        id
        title
        handle
        featuredImage {
          url
        }
      }
    }
  }
}
"""

SHOP_QUERY = """
query getShop {
  shop {
    name
    primaryDomain {
      host
    }
  }
}
"""


class ShopifyCatalogClient:
    """Admin API client. One access token per deployment (single-shop install)."""

    def __init__(
        self,
        access_token: str,
        *,
        api_version: str = "2024-10",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._access_token = (access_token or "").strip()
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self._access_token)

    def _graphql(self, shop: str, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self.is_configured():
            raise CatalogResolutionError("Shopify access token not configured. Add SHOPIFY_ACCESS_TOKEN to .env.")
        url = f"https://{shop}/admin/api/{self._api_version}/graphql.json"
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self._access_token,
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as c:
                r = c.post(url, json={"query": query, "variables": variables or {}}, headers=headers)
        except httpx.HTTPError as e:
            raise CatalogResolutionError(f"Shopify request failed: {e}") from e
        if not r.is_success:
            raise CatalogResolutionError(f"Shopify API error: {r.status_code} {(r.text or '')[:300]}")
        try:
            body = r.json() if r.content else {}
        except ValueError as e:
            raise CatalogResolutionError("Shopify returned a non-JSON body") from e
        if body.get("errors"):
            raise CatalogResolutionError(f"Shopify GraphQL errors: {body['errors']}")
        return body.get("data") or {}

    def resolve_variant_by_inventory_item(self, shop: str, inventory_item_id: str) -> CatalogVariant | None:
        data = self._graphql(
            shop,
            VARIANT_BY_INVENTORY_ITEM_QUERY,
            {"inventoryItemId": inventory_item_gid(inventory_item_id)},
        )
        variant = (data.get("inventoryItem") or {}).get("variant")
        if not variant or not variant.get("product"):
            return None
        product = variant["product"]
        image = product.get("featuredImage") or {}
        return CatalogVariant(
            product_id=strip_gid(product.get("id"), constants.GID_PRODUCT),
            variant_id=strip_gid(variant.get("id"), constants.GID_VARIANT),
            product_title=product.get("title") or "",
            product_handle=product.get("handle") or "",
            product_image_url=image.get("url"),
        )

    def get_shop_info(self, shop: str) -> ShopInfo | None:
        try:
            data = self._graphql(shop, SHOP_QUERY)
        except CatalogResolutionError as e:
            logger.warning("Shop info lookup failed for %s: %s", shop, e)
            return None
        info = data.get("shop")
        if not info:
            return None
        return ShopInfo(
            name=info.get("name") or shop,
            domain=(info.get("primaryDomain") or {}).get("host") or shop,
        )
