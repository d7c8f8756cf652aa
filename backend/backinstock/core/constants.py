"""
Centralized constants for back-in-stock notifications.

Defaults below apply when a shop has never saved its settings.
"""

# Subscription.variant_id value meaning "any variant of the product"
ALL_VARIANTS = ""

# NotificationRecord.status
STATUS_SENT = "sent"
STATUS_FAILED = "failed"
# Dispatch outcome only, never stored
STATUS_SKIPPED = "skipped"

# Template placeholders available to merchants
VAR_PRODUCT_TITLE = "product_title"
VAR_PRODUCT_URL = "product_url"
VAR_SHOP_NAME = "shop_name"
VAR_CUSTOMER_EMAIL = "customer_email"

DEFAULT_ENABLED = False
DEFAULT_EMAIL_SUBJECT = "{{product_title}} is back in stock!"
DEFAULT_EMAIL_TEMPLATE = (
    "Hi there,\n\n"
    "Good news! {{product_title}} is back in stock at {{shop_name}}.\n\n"
    "Shop now: {{product_url}}\n\n"
    "Thanks,\n"
    "{{shop_name}}"
)
DEFAULT_BUTTON_TEXT = "Notify Me When Available"
DEFAULT_SUCCESS_MESSAGE = "Thanks! We'll notify you when this product is back in stock."

# Admin listing
SUBSCRIPTIONS_PAGE_SIZE = 25
SUBSCRIPTION_STATUS_FILTERS = ("all", "active", "notified")

# Shopify global id prefixes
GID_PRODUCT = "gid://shopify/Product/"
GID_VARIANT = "gid://shopify/ProductVariant/"
GID_INVENTORY_ITEM = "gid://shopify/InventoryItem/"
