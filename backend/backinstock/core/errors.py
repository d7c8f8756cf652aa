"""
Error taxonomy for subscription intake and restock dispatch, plus the HTTP mapping.

Only ValidationError and FeatureDisabledError reach a direct caller. The restock
path records everything else in its DispatchReport and never raises to the webhook.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BackInStockError(Exception):
    """Base for all domain errors."""


class ValidationError(BackInStockError):
    """Bad input to SubscriptionIntake. No state change."""


class FeatureDisabledError(BackInStockError):
    """Back-in-stock notifications are disabled for the shop. No state change."""


class CatalogResolutionError(BackInStockError):
    """CatalogClient could not resolve an inventory item or shop."""


class DeliveryError(BackInStockError):
    """EmailSender raised or reported failure for one recipient."""


class StoreWriteError(BackInStockError):
    """A SubscriptionStore write failed."""


class StoreConflict(StoreWriteError):
    """A create collided with an existing row on the identity tuple."""


# ---------------------------------------------------------------------------
# HTTP mapping: (exception type, status_code). First match wins.
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500

MSG_INTERNAL_ERROR = "Internal server error"

ERROR_RULES: list[tuple[type[Exception], int]] = [
    (ValidationError, STATUS_BAD_REQUEST),
    (FeatureDisabledError, STATUS_FORBIDDEN),
]


def error_to_http(exc: Exception) -> HTTPException:
    """
    Map a domain exception into an HTTPException.
    Known types keep their message; anything else becomes a generic 500.
    """
    for exc_type, status_code in ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=MSG_INTERNAL_ERROR)
