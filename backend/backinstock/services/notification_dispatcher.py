"""
NotificationDispatcher: render -> claim -> send -> record, once per eligible subscription.

Each subscription is processed on its own and yields one SubscriberOutcome; outcomes are
merged into a DispatchReport. One subscriber's failure (render, send or store) never stops
the rest of the batch.

The claim is SubscriptionStore.conditional_mark_notified, taken before the send. Only the
caller whose update applied sends mail, so two overlapping dispatches for the same restock
cannot both email the same subscriber. A failed send releases the claim, leaving the
subscription eligible for the next restock event.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from backinstock.core import constants
from backinstock.core.errors import DeliveryError, StoreWriteError
from backinstock.services.email.base import EmailSender, SendResult
from backinstock.services.subscription_store import SubscriptionStore
from backinstock.services.template_renderer import RenderedEmail, render_email
from backinstock.services.types import (
    DispatchReport,
    NotificationSettings,
    ResolvedRestock,
    SubscriberOutcome,
    SubscriptionRef,
)

logger = logging.getLogger(__name__)

SKIP_ALREADY_NOTIFIED = "already notified"
SKIP_WRONG_TARGET = "subscription does not match restock"


class NotificationDispatcher:
    def __init__(self, store: SubscriptionStore, sender: EmailSender, *, max_workers: int = 1) -> None:
        self._store = store
        self._sender = sender
        self._max_workers = max(1, max_workers)

    def dispatch(
        self,
        shop: str,
        restock: ResolvedRestock,
        settings: NotificationSettings,
        subscriptions: list[SubscriptionRef],
    ) -> DispatchReport:
        """Notify every subscription in the batch. Never raises for per-subscriber problems."""
        report = DispatchReport()
        if not settings.enabled:
            logger.warning("Dispatch called for %s with notifications disabled; nothing sent", shop)
            return report
        batch = tuple(subscriptions)
        if not batch:
            return report

        if self._max_workers == 1 or len(batch) == 1:
            outcomes = [self._process_safely(shop, restock, settings, sub) for sub in batch]
        else:
            workers = min(self._max_workers, len(batch))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dispatch") as executor:
                futures = [executor.submit(self._process_safely, shop, restock, settings, sub) for sub in batch]
                outcomes = [f.result() for f in futures]

        for outcome in outcomes:
            report.add(outcome)
        logger.info(
            "Dispatch for shop=%s product=%s variant=%s: sent=%s failed=%s skipped=%s",
            shop,
            restock.product_id,
            restock.variant_id,
            report.sent_count,
            report.failed_count,
            report.skipped_count,
        )
        return report

    def _process_safely(
        self,
        shop: str,
        restock: ResolvedRestock,
        settings: NotificationSettings,
        sub: SubscriptionRef,
    ) -> SubscriberOutcome:
        try:
            return self._process_one(shop, restock, settings, sub)
        except Exception as e:
            logger.exception("Unexpected error notifying %s (subscription %s)", sub.email, sub.id)
            return SubscriberOutcome(sub.id, sub.email, constants.STATUS_FAILED, f"unexpected error: {e}")

    def _process_one(
        self,
        shop: str,
        restock: ResolvedRestock,
        settings: NotificationSettings,
        sub: SubscriptionRef,
    ) -> SubscriberOutcome:
        if sub.shop != shop or sub.product_id != restock.product_id:
            return SubscriberOutcome(sub.id, sub.email, constants.STATUS_SKIPPED, SKIP_WRONG_TARGET)

        # 1. Render
        try:
            message = render_email(settings, restock, sub.email)
        except Exception as e:
            reason = f"render error: {e}"
            logger.warning("Rendering failed for %s: %s", sub.email, e)
            return self._failed(sub, reason)

        # 2. Claim
        claimed_at = datetime.now(timezone.utc)
        try:
            claimed = self._store.conditional_mark_notified(sub.id, claimed_at)
        except StoreWriteError as e:
            logger.error("Could not claim subscription %s for %s: %s", sub.id, sub.email, e)
            return SubscriberOutcome(sub.id, sub.email, constants.STATUS_FAILED, str(e))
        if not claimed:
            logger.info("Subscription %s (%s) already notified; skipping", sub.id, sub.email)
            return SubscriberOutcome(sub.id, sub.email, constants.STATUS_SKIPPED, SKIP_ALREADY_NOTIFIED)

        # 3. Send
        result = self._send(sub.email, message)

        # 4. Record
        if result.ok:
            try:
                self._store.append_notification_record(sub, constants.STATUS_SENT)
            except StoreWriteError as e:
                logger.error("Email sent to %s but audit record failed: %s", sub.email, e)
                return SubscriberOutcome(sub.id, sub.email, constants.STATUS_SENT, f"audit record not written: {e}")
            logger.info("Notification sent to %s for product %s", sub.email, restock.product_id)
            return SubscriberOutcome(sub.id, sub.email, constants.STATUS_SENT)

        reason = result.error or "delivery failed"
        logger.warning("Notification failed for %s: %s", sub.email, reason)
        try:
            released = self._store.release_notified(sub.id, claimed_at)
        except StoreWriteError as e:
            logger.error("Could not release subscription %s after failed send: %s", sub.id, e)
            reason = f"{reason}; release failed: {e}"
        else:
            if not released:
                logger.warning("Claim on subscription %s changed before release", sub.id)
        return self._failed(sub, reason)

    def _send(self, to: str, message: RenderedEmail) -> SendResult:
        try:
            result = self._sender.send(to, message.subject, message.html_body, message.text_body)
        except DeliveryError as e:
            return SendResult.failure(str(e))
        except Exception as e:
            return SendResult.failure(f"{type(e).__name__}: {e}")
        if result is None:
            return SendResult.failure("email sender returned no result")
        return result

    def _failed(self, sub: SubscriptionRef, reason: str) -> SubscriberOutcome:
        try:
            self._store.append_notification_record(sub, constants.STATUS_FAILED, reason)
        except StoreWriteError as e:
            logger.error("Failed-delivery record for %s not written: %s", sub.email, e)
            reason = f"{reason}; audit record not written: {e}"
        return SubscriberOutcome(sub.id, sub.email, constants.STATUS_FAILED, reason)
