#!/usr/bin/env python3
"""
Replay an inventory_levels/update event through the restock handler, without the webhook.
Useful to check a shop's template and subscriber list against a real restock.

Run: cd backend && python scripts/replay_inventory_event.py --shop example.myshopify.com \
        --inventory-item 808950810 --available 5
"""
import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from backinstock.config import settings
from backinstock.db.session import SessionLocal
from backinstock.services.engine import build_engine
from backinstock.services.types import InventoryAvailabilityEvent


def main():
    parser = argparse.ArgumentParser(description="Replay one inventory level update.")
    parser.add_argument("--shop", required=True, help="Shop domain, e.g. example.myshopify.com")
    parser.add_argument("--inventory-item", required=True, help="Inventory item id (numeric)")
    parser.add_argument("--location", default="0", help="Location id (default 0)")
    parser.add_argument("--available", type=int, default=1, help="Available quantity after the update")
    parser.add_argument(
        "--email-backend",
        choices=("log", "smtp"),
        help="Override EMAIL_BACKEND for this run (use 'log' for a dry run)",
    )
    args = parser.parse_args()

    run_settings = settings
    if args.email_backend:
        run_settings = settings.model_copy(update={"email_backend": args.email_backend})

    engine = build_engine(run_settings, SessionLocal)
    event = InventoryAvailabilityEvent(
        shop=args.shop,
        inventory_item_id=args.inventory_item,
        location_id=args.location,
        available=args.available,
    )
    print(f"Replaying inventory item {event.inventory_item_id} on {event.shop} (available={event.available})...")
    result = engine.restock_handler.handle(event)
    print(json.dumps(result.to_dict(), indent=2))
    if result.to_dict().get("failedCount"):
        sys.exit(1)


if __name__ == "__main__":
    main()
