"""Normalized catalog shapes. Same regardless of which commerce backend answers."""
from dataclasses import dataclass

from backinstock.core import constants


@dataclass(frozen=True)
class CatalogVariant:
    """One variant resolved from an inventory item, with the product data used in emails."""

    product_id: str
    variant_id: str
    product_title: str
    product_handle: str
    product_image_url: str | None = None


def strip_gid(value: str | None, prefix: str) -> str:
    """'gid://shopify/Product/123' -> '123'. Plain ids pass through."""
    if not value:
        return ""
    value = str(value)
    if value.startswith(prefix):
        return value[len(prefix):]
    return value


def inventory_item_gid(inventory_item_id: str) -> str:
    if str(inventory_item_id).startswith(constants.GID_INVENTORY_ITEM):
        return str(inventory_item_id)
    return f"{constants.GID_INVENTORY_ITEM}{inventory_item_id}"
