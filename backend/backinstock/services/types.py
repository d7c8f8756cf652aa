"""
Value types passed between the restock handler, matcher, dispatcher and intake.

Inbound events are validated pydantic models; everything derived inside the
engine is a frozen dataclass so worker threads only ever see immutable data.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backinstock.core import constants


class InventoryAvailabilityEvent(BaseModel):
    """Parsed inventory_levels/update payload for one shop. Transport already verified."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    shop: str = Field(..., min_length=1)
    inventory_item_id: str = Field(..., min_length=1)
    location_id: str = Field(..., min_length=1)
    available: int

    @field_validator("shop", "inventory_item_id", "location_id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # Shopify sends numeric ids; keep them as strings
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v


@dataclass(frozen=True)
class NotificationSettings:
    """Read-only snapshot of a shop's settings (defaults when the shop never saved any)."""

    enabled: bool = constants.DEFAULT_ENABLED
    email_subject: str = constants.DEFAULT_EMAIL_SUBJECT
    email_template: str = constants.DEFAULT_EMAIL_TEMPLATE
    button_text: str = constants.DEFAULT_BUTTON_TEXT
    success_message: str = constants.DEFAULT_SUCCESS_MESSAGE

    def storefront_payload(self) -> dict[str, Any]:
        """Shape consumed by the storefront widget."""
        return {
            "enabled": self.enabled,
            "buttonText": self.button_text,
            "successMessage": self.success_message,
        }


@dataclass(frozen=True)
class ShopInfo:
    name: str
    domain: str


@dataclass(frozen=True)
class ResolvedRestock:
    """Catalog view of a restocked variant. Never persisted."""

    shop: str
    product_id: str
    variant_id: str
    product_title: str
    product_handle: str
    product_image_url: str | None = None
    shop_name: str = ""
    shop_domain: str = ""

    @property
    def product_url(self) -> str:
        return f"https://{self.shop_domain or self.shop}/products/{self.product_handle}"


@dataclass(frozen=True)
class SubscriptionRef:
    """Immutable snapshot of a Subscription row handed to the dispatcher."""

    id: int
    shop: str
    email: str
    product_id: str
    variant_id: str
    quantity: int
    notified: bool
    notified_at: datetime | None
    created_at: datetime | None


@dataclass(frozen=True)
class SubscribeResult:
    created: bool
    already_subscribed: bool
    message: str = ""


@dataclass(frozen=True)
class DispatchFailure:
    email: str
    reason: str
    subscription_id: int | None = None


@dataclass(frozen=True)
class SubscriberOutcome:
    """Result of processing one subscription inside a dispatch batch."""

    subscription_id: int
    email: str
    status: str  # sent | failed | skipped
    reason: str | None = None


@dataclass
class DispatchReport:
    sent_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    failures: list[DispatchFailure] = field(default_factory=list)

    def add(self, outcome: SubscriberOutcome) -> None:
        if outcome.status == constants.STATUS_SENT:
            self.sent_count += 1
            # Delivered, but a store write behind it failed
            if outcome.reason:
                self._add_failure(outcome)
        elif outcome.status == constants.STATUS_FAILED:
            self.failed_count += 1
            self._add_failure(outcome)
        else:
            self.skipped_count += 1

    def _add_failure(self, outcome: SubscriberOutcome) -> None:
        self.failures.append(
            DispatchFailure(
                email=outcome.email,
                reason=outcome.reason or "unknown error",
                subscription_id=outcome.subscription_id,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentCount": self.sent_count,
            "failedCount": self.failed_count,
            "skippedCount": self.skipped_count,
            "failures": [{"email": f.email, "reason": f.reason} for f in self.failures],
        }


@dataclass(frozen=True)
class NoOp:
    """Restock event that required no dispatch, with the reason."""

    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"noop": True, "reason": self.reason}
