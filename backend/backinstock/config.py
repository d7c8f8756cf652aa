"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env next to backend/ (parent of backinstock/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./backinstock.db"
    log_level: str = "INFO"
    # Email transport: "log" only logs the rendered message, "smtp" delivers it
    email_backend: str = "log"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    notify_from: str = ""
    # Shopify Admin API (CatalogClient). Token is per-install; one shop per deployment.
    shopify_api_version: str = "2024-10"
    shopify_access_token: str = ""
    catalog_timeout_seconds: float = 10.0
    # Per-batch fan-out for NotificationDispatcher; 1 = sequential
    dispatch_max_workers: int = 4
    cors_origins: str = ""

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("email_backend", mode="after")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        return (v or "log").strip().lower()

    @field_validator("dispatch_max_workers", mode="after")
    @classmethod
    def at_least_one_worker(cls, v: int) -> int:
        return max(1, v)


settings = Settings()
