"""
Storefront endpoints (served through the app proxy): widget settings and subscribe.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from backinstock.api.deps import get_intake, get_store
from backinstock.core.errors import BackInStockError, error_to_http
from backinstock.services.settings_service import load_settings
from backinstock.services.subscription_intake import SubscriptionIntake
from backinstock.services.subscription_store import SqlSubscriptionStore

router = APIRouter()
logger = logging.getLogger(__name__)


class SubscribeBody(BaseModel):
    shop: str = ""
    email: str = ""
    productId: str | int | None = None
    variantId: str | int | None = None
    quantity: int = Field(default=1, ge=1, le=1000)


@router.get("/proxy/settings")
def storefront_settings(
    shop: str = Query(..., min_length=1),
    store: SqlSubscriptionStore = Depends(get_store),
) -> dict[str, Any]:
    """Widget settings for the shop; built-in defaults (disabled) when none are saved."""
    return load_settings(store, shop).storefront_payload()


@router.post("/proxy/subscribe")
def subscribe(body: SubscribeBody, intake: SubscriptionIntake = Depends(get_intake)) -> dict[str, Any]:
    """
    Subscribe an email to a product (optionally one variant).
    Idempotent on (shop, email, product, variant); re-subscribing after a notification re-arms it.
    """
    try:
        result = intake.subscribe(
            body.shop,
            body.email,
            body.productId if body.productId is not None else "",
            body.variantId,
            body.quantity,
        )
    except BackInStockError as e:
        raise error_to_http(e) from e
    out: dict[str, Any] = {"success": True, "message": result.message}
    if result.already_subscribed:
        out["alreadySubscribed"] = True
    return out
