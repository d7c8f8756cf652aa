"""
Inventory webhook: inventory_levels/update.

Signature verification happens upstream; this route only parses the payload and runs
the restock handler. It always answers 200 so the platform does not retry on our
internal errors; the body carries the dispatch report or the no-op reason.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from backinstock.api.deps import get_restock_handler
from backinstock.services.restock_handler import RestockEventHandler
from backinstock.services.types import InventoryAvailabilityEvent

router = APIRouter()
logger = logging.getLogger(__name__)


class InventoryLevelPayload(BaseModel):
    inventory_item_id: int | str
    location_id: int | str
    available: int | None = Field(default=0, description="Null when the item is untracked")
    shop: str | None = None


@router.post("/webhooks/inventory_levels/update")
def inventory_levels_update(
    body: InventoryLevelPayload,
    handler: RestockEventHandler = Depends(get_restock_handler),
    x_shopify_shop_domain: str | None = Header(None, alias="X-Shopify-Shop-Domain"),
) -> dict[str, Any]:
    shop = (x_shopify_shop_domain or body.shop or "").strip()
    if not shop:
        raise HTTPException(status_code=400, detail="Shop domain required (X-Shopify-Shop-Domain header)")
    logger.info("Received inventory_levels/update webhook for %s", shop)
    try:
        event = InventoryAvailabilityEvent(
            shop=shop,
            inventory_item_id=body.inventory_item_id,
            location_id=body.location_id,
            available=body.available or 0,
        )
    except PydanticValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    result = handler.handle(event)
    return {"ok": True, "shop": shop, **result.to_dict()}
