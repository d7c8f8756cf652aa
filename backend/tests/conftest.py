import threading
from uuid import uuid4

import pytest

from backinstock.db.base import Base
from backinstock.db.session import make_engine, make_session_factory
from backinstock.models import BackInStockSettings, NotificationRecord, Subscription  # noqa: F401
from backinstock.services.catalog import CatalogVariant, StaticCatalogClient
from backinstock.services.email.base import SendResult
from backinstock.services.match_resolver import MatchResolver
from backinstock.services.notification_dispatcher import NotificationDispatcher
from backinstock.services.restock_handler import RestockEventHandler
from backinstock.services.subscription_intake import SubscriptionIntake
from backinstock.services.subscription_store import SqlSubscriptionStore
from backinstock.services.types import ResolvedRestock

SHOP = "acme.myshopify.com"
INVENTORY_ITEM = "808950810"
PRODUCT_ID = "632910392"
VARIANT_ID = "39072856"


class FakeEmailSender:
    """Records sent messages in memory. Thread-safe so the dispatcher pool can share it."""

    def __init__(self):
        self._lock = threading.Lock()
        self.sent_emails: list[dict] = []
        self.attempts: list[str] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.fail_for: set[str] = set()
        self.raise_for: set[str] = set()

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, to: str, subject: str, html_body: str, text_body: str) -> SendResult:
        with self._lock:
            self.attempts.append(to)
        if to in self.raise_for:
            raise ConnectionError("smtp connection reset")
        if not self.should_succeed or to in self.fail_for:
            return SendResult.failure(self.failure_reason)
        message_id = f"email-{uuid4().hex[:12]}"
        with self._lock:
            self.sent_emails.append(
                {"message_id": message_id, "to": to, "subject": subject, "html_body": html_body, "body": text_body}
            )
        return SendResult.success(message_id=message_id)

    def reset(self):
        with self._lock:
            self.sent_emails.clear()
            self.attempts.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.fail_for.clear()
        self.raise_for.clear()


@pytest.fixture()
def db_engine(tmp_path):
    # File database so worker threads share one schema
    engine = make_engine(f"sqlite:///{tmp_path / 'backinstock.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return make_session_factory(db_engine)


@pytest.fixture()
def store(session_factory):
    return SqlSubscriptionStore(session_factory)


@pytest.fixture()
def sender():
    return FakeEmailSender()


@pytest.fixture()
def catalog():
    client = StaticCatalogClient()
    client.add_variant(
        SHOP,
        INVENTORY_ITEM,
        CatalogVariant(
            product_id=PRODUCT_ID,
            variant_id=VARIANT_ID,
            product_title="Widget",
            product_handle="widget",
            product_image_url="https://cdn.example.com/widget.png",
        ),
    )
    client.add_shop(SHOP, "Acme", "acme.example.com")
    return client


@pytest.fixture()
def enabled_shop(store):
    return store.upsert_settings(SHOP, enabled=True)


@pytest.fixture()
def restock():
    return ResolvedRestock(
        shop=SHOP,
        product_id=PRODUCT_ID,
        variant_id=VARIANT_ID,
        product_title="Widget",
        product_handle="widget",
        product_image_url=None,
        shop_name="Acme",
        shop_domain="acme.example.com",
    )


@pytest.fixture()
def intake(store):
    return SubscriptionIntake(store)


@pytest.fixture()
def dispatcher(store, sender):
    return NotificationDispatcher(store, sender, max_workers=1)


@pytest.fixture()
def handler(store, catalog, sender):
    dispatcher = NotificationDispatcher(store, sender, max_workers=4)
    return RestockEventHandler(store, catalog, MatchResolver(store), dispatcher)
