"""
Wiring: build the store, matcher, dispatcher, intake and restock handler from Settings.

Collaborators can be passed in (tests, scripts); otherwise they come from config.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker

from backinstock.config import Settings
from backinstock.services.catalog import CatalogClient, ShopifyCatalogClient
from backinstock.services.email import EmailSender, get_email_sender
from backinstock.services.match_resolver import MatchResolver
from backinstock.services.notification_dispatcher import NotificationDispatcher
from backinstock.services.restock_handler import RestockEventHandler
from backinstock.services.subscription_intake import SubscriptionIntake
from backinstock.services.subscription_store import SqlSubscriptionStore

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    store: SqlSubscriptionStore
    catalog: CatalogClient
    sender: EmailSender
    matcher: MatchResolver
    dispatcher: NotificationDispatcher
    intake: SubscriptionIntake
    restock_handler: RestockEventHandler


def build_engine(
    settings: Settings,
    session_factory: sessionmaker,
    *,
    catalog: CatalogClient | None = None,
    sender: EmailSender | None = None,
) -> Engine:
    store = SqlSubscriptionStore(session_factory)
    if catalog is None:
        catalog = ShopifyCatalogClient(
            settings.shopify_access_token,
            api_version=settings.shopify_api_version,
            timeout=settings.catalog_timeout_seconds,
        )
        if not catalog.is_configured():
            logger.warning("SHOPIFY_ACCESS_TOKEN not set; inventory events will not resolve")
    if sender is None:
        sender = get_email_sender(settings)
    matcher = MatchResolver(store)
    dispatcher = NotificationDispatcher(store, sender, max_workers=settings.dispatch_max_workers)
    return Engine(
        store=store,
        catalog=catalog,
        sender=sender,
        matcher=matcher,
        dispatcher=dispatcher,
        intake=SubscriptionIntake(store),
        restock_handler=RestockEventHandler(store, catalog, matcher, dispatcher),
    )
