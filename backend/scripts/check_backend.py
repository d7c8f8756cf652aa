#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from backend/:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    # 1) .env
    env_file = backend_dir / ".env"
    if not env_file.exists():
        errors.append("backend/.env missing. Copy from backend/.env.example and set DATABASE_URL, etc.")
    else:
        print("OK  .env exists")

    # 2) DB connection and tables
    try:
        from sqlalchemy import inspect, text

        from backinstock.db.session import engine
        from backinstock.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = [t for t in ALL_TABLE_NAMES if not inspect(engine).has_table(t)]
        if missing:
            errors.append(f"Missing tables {missing}. Run: alembic upgrade head")
            print("FAIL Tables missing:", ", ".join(missing))
        else:
            print("OK  Tables present")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) Email backend and catalog credentials
    from backinstock.config import settings

    if settings.email_backend == "smtp" and not (settings.smtp_user and settings.smtp_password):
        errors.append("EMAIL_BACKEND=smtp but SMTP_USER / SMTP_PASSWORD not set.")
        print("FAIL SMTP credentials missing")
    else:
        print(f"OK  Email backend: {settings.email_backend}")
    if not settings.shopify_access_token:
        print("WARN SHOPIFY_ACCESS_TOKEN not set; inventory webhooks will not resolve products")

    # 4) App import (catches missing deps, bad imports)
    try:
        from backinstock.main import app  # noqa: F401
        print("OK  App import (backinstock.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    # 5) Port 8000
    try:
        import socket
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        print("\nThen start backend: uvicorn backinstock.main:app --reload --port 8000")
        return 1

    print("\nAll checks passed. Start with: uvicorn backinstock.main:app --reload --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
