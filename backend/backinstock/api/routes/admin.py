"""
Merchant admin API: subscription list, stats, maintenance, and settings.

Shop is passed as ?shop=; admin session authentication is handled upstream.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from backinstock.api.deps import get_store
from backinstock.core import constants
from backinstock.core.errors import STATUS_NOT_FOUND, BackInStockError, error_to_http
from backinstock.services.settings_service import load_settings
from backinstock.services.subscription_store import SqlSubscriptionStore
from backinstock.services.types import NotificationSettings

router = APIRouter()
logger = logging.getLogger(__name__)


def _settings_dict(s: NotificationSettings) -> dict[str, Any]:
    return {
        "enabled": s.enabled,
        "emailSubject": s.email_subject,
        "emailTemplate": s.email_template,
        "buttonText": s.button_text,
        "successMessage": s.success_message,
    }


# --- Subscriptions ---


@router.get("/subscriptions")
def list_subscriptions(
    shop: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    search: str = Query(""),
    status: str = Query("all"),
    store: SqlSubscriptionStore = Depends(get_store),
) -> dict[str, Any]:
    """Newest first, 25 per page. status: all | active | notified. search matches email or product id."""
    try:
        rows, total = store.list_subscriptions(shop, page=page, search=search, status=status)
    except BackInStockError as e:
        raise error_to_http(e) from e
    page_size = constants.SUBSCRIPTIONS_PAGE_SIZE
    total_pages = (total + page_size - 1) // page_size
    return {
        "subscriptions": [
            {
                "id": r.id,
                "email": r.email,
                "productId": r.product_id,
                "variantId": r.variant_id,
                "quantity": r.quantity,
                "notified": r.notified,
                "notifiedAt": r.notified_at.isoformat() if r.notified_at else None,
                "createdAt": r.created_at.isoformat() if r.created_at else None,
            }
            for r in rows
        ],
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages,
            "totalCount": total,
            "hasNext": page < total_pages,
            "hasPrevious": page > 1,
        },
        "filters": {"search": search, "status": status},
    }


@router.get("/stats")
def stats(shop: str = Query(..., min_length=1), store: SqlSubscriptionStore = Depends(get_store)) -> dict[str, int]:
    """Totals for the dashboard: all subscriptions, still-pending ones, emails sent."""
    return store.stats(shop)


@router.delete("/subscriptions/{subscription_id}")
def delete_subscription(
    subscription_id: int,
    shop: str = Query(..., min_length=1),
    store: SqlSubscriptionStore = Depends(get_store),
) -> dict[str, Any]:
    if not store.delete_subscription(shop, subscription_id):
        raise HTTPException(status_code=STATUS_NOT_FOUND, detail="Subscription not found")
    logger.info("Subscription %s deleted for %s", subscription_id, shop)
    return {"success": True, "message": "Subscription deleted successfully"}


@router.post("/subscriptions/{subscription_id}/mark-notified")
def mark_notified(
    subscription_id: int,
    shop: str = Query(..., min_length=1),
    store: SqlSubscriptionStore = Depends(get_store),
) -> dict[str, Any]:
    if not store.mark_notified(shop, subscription_id):
        raise HTTPException(status_code=STATUS_NOT_FOUND, detail="Subscription not found or already notified")
    return {"success": True, "message": "Subscription marked as notified"}


# --- Settings ---


class SettingsBody(BaseModel):
    enabled: bool | None = None
    emailSubject: str | None = Field(None, max_length=500)
    emailTemplate: str | None = None
    buttonText: str | None = Field(None, max_length=255)
    successMessage: str | None = Field(None, max_length=500)


@router.get("/settings")
def get_settings(shop: str = Query(..., min_length=1), store: SqlSubscriptionStore = Depends(get_store)):
    return _settings_dict(load_settings(store, shop))


@router.put("/settings")
def update_settings(
    body: SettingsBody,
    shop: str = Query(..., min_length=1),
    store: SqlSubscriptionStore = Depends(get_store),
) -> dict[str, Any]:
    saved = store.upsert_settings(
        shop,
        enabled=body.enabled,
        email_subject=body.emailSubject,
        email_template=body.emailTemplate,
        button_text=body.buttonText,
        success_message=body.successMessage,
    )
    return {"success": True, "message": "Settings updated successfully!", "settings": _settings_dict(saved)}


@router.post("/settings/toggle")
def toggle_enabled(shop: str = Query(..., min_length=1), store: SqlSubscriptionStore = Depends(get_store)):
    saved = store.toggle_enabled(shop)
    logger.info("Back in stock %s for %s", "enabled" if saved.enabled else "disabled", shop)
    return {"success": True, "enabled": saved.enabled}
