"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. TRUNCATE in scripts).
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    "back_in_stock_subscriptions",
    "back_in_stock_notifications",
    "back_in_stock_settings",
)
