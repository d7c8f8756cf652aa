"""
SubscriptionStore: durable repository for subscriptions, settings and notification records.

Every method runs in its own session and transaction, so one store instance is safe
to share between the dispatcher's worker threads. The "has this been sent" gate is
conditional_mark_notified: a single UPDATE ... WHERE notified = false whose rowcount
says whether this caller won.
"""
import logging
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from backinstock.core import constants
from backinstock.core.errors import StoreConflict, StoreWriteError, ValidationError
from backinstock.models.notification_record import NotificationRecord
from backinstock.models.notification_settings import BackInStockSettings
from backinstock.models.subscription import Subscription
from backinstock.services.types import NotificationSettings, SubscriptionRef

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_ref(row: Subscription) -> SubscriptionRef:
    return SubscriptionRef(
        id=row.id,
        shop=row.shop,
        email=row.email,
        product_id=row.product_id,
        variant_id=row.variant_id,
        quantity=row.quantity,
        notified=bool(row.notified),
        notified_at=row.notified_at,
        created_at=row.created_at,
    )


def to_settings(row: BackInStockSettings) -> NotificationSettings:
    return NotificationSettings(
        enabled=bool(row.enabled),
        email_subject=row.email_subject,
        email_template=row.email_template,
        button_text=row.button_text,
        success_message=row.success_message,
    )


class SubscriptionStore(Protocol):
    """Operations the engine requires from persistence."""

    def find_by_identity(self, shop: str, email: str, product_id: str, variant_id: str) -> SubscriptionRef | None: ...

    def create(self, shop: str, email: str, product_id: str, variant_id: str, quantity: int = 1) -> SubscriptionRef: ...

    def reactivate(self, subscription_id: int) -> bool: ...

    def conditional_mark_notified(self, subscription_id: int, notified_at: datetime | None = None) -> bool: ...

    def release_notified(self, subscription_id: int, notified_at: datetime) -> bool: ...

    def query_eligible(self, shop: str, product_id: str, variant_id: str) -> list[SubscriptionRef]: ...

    def append_notification_record(
        self, subscription: SubscriptionRef, status: str, error: str | None = None
    ) -> int: ...

    def get_settings(self, shop: str) -> NotificationSettings | None: ...


class SqlSubscriptionStore:
    """SubscriptionStore on SQLAlchemy (Postgres in production, SQLite in tests)."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    # --- Subscriptions ---

    def find_by_identity(self, shop: str, email: str, product_id: str, variant_id: str) -> SubscriptionRef | None:
        with self._session_factory() as db:
            row = db.execute(
                select(Subscription).where(
                    Subscription.shop == shop,
                    Subscription.email == email,
                    Subscription.product_id == product_id,
                    Subscription.variant_id == variant_id,
                )
            ).scalar_one_or_none()
            return to_ref(row) if row else None

    def get_subscription(self, subscription_id: int) -> SubscriptionRef | None:
        with self._session_factory() as db:
            row = db.get(Subscription, subscription_id)
            return to_ref(row) if row else None

    def create(self, shop: str, email: str, product_id: str, variant_id: str, quantity: int = 1) -> SubscriptionRef:
        row = Subscription(
            shop=shop,
            email=email,
            product_id=product_id,
            variant_id=variant_id,
            quantity=quantity,
            notified=False,
            notified_at=None,
            created_at=_utcnow(),
        )
        try:
            with self._session_factory.begin() as db:
                db.add(row)
                db.flush()
                return to_ref(row)
        except IntegrityError as e:
            raise StoreConflict(f"subscription already exists for {email} / {product_id} / {variant_id!r}") from e
        except SQLAlchemyError as e:
            raise StoreWriteError(f"create subscription failed: {e}") from e

    def reactivate(self, subscription_id: int) -> bool:
        """Reset a notified subscription to pending with a fresh created_at. False if it was not notified."""
        stmt = (
            update(Subscription)
            .where(Subscription.id == subscription_id, Subscription.notified.is_(True))
            .values(notified=False, notified_at=None, created_at=_utcnow())
        )
        return self._conditional_update(stmt, "reactivate", subscription_id)

    def conditional_mark_notified(self, subscription_id: int, notified_at: datetime | None = None) -> bool:
        """notified false -> true. Returns True only for the single caller whose update applied."""
        stmt = (
            update(Subscription)
            .where(Subscription.id == subscription_id, Subscription.notified.is_(False))
            .values(notified=True, notified_at=notified_at or _utcnow())
        )
        return self._conditional_update(stmt, "mark notified", subscription_id)

    def release_notified(self, subscription_id: int, notified_at: datetime) -> bool:
        """Undo a claim made with conditional_mark_notified(notified_at=...) after a failed send."""
        stmt = (
            update(Subscription)
            .where(
                Subscription.id == subscription_id,
                Subscription.notified.is_(True),
                Subscription.notified_at == notified_at,
            )
            .values(notified=False, notified_at=None)
        )
        return self._conditional_update(stmt, "release", subscription_id)

    def _conditional_update(self, stmt, action: str, subscription_id: int) -> bool:
        try:
            with self._session_factory.begin() as db:
                result = db.execute(stmt.execution_options(synchronize_session=False))
                return result.rowcount == 1
        except SQLAlchemyError as e:
            raise StoreWriteError(f"{action} failed for subscription {subscription_id}: {e}") from e

    def query_eligible(self, shop: str, product_id: str, variant_id: str) -> list[SubscriptionRef]:
        """Unnotified subscriptions for the variant or for all variants, oldest first."""
        variants = {variant_id, constants.ALL_VARIANTS}
        with self._session_factory() as db:
            rows = db.execute(
                select(Subscription)
                .where(
                    Subscription.shop == shop,
                    Subscription.product_id == product_id,
                    Subscription.variant_id.in_(variants),
                    Subscription.notified.is_(False),
                )
                .order_by(Subscription.created_at.asc(), Subscription.id.asc())
            ).scalars().all()
            return [to_ref(r) for r in rows]

    # --- Notification records ---

    def append_notification_record(self, subscription: SubscriptionRef, status: str, error: str | None = None) -> int:
        row = NotificationRecord(
            subscription_id=subscription.id,
            shop=subscription.shop,
            email=subscription.email,
            product_id=subscription.product_id,
            variant_id=subscription.variant_id,
            status=status,
            error=error,
            created_at=_utcnow(),
        )
        try:
            with self._session_factory.begin() as db:
                db.add(row)
                db.flush()
                return row.id
        except SQLAlchemyError as e:
            raise StoreWriteError(f"append notification record failed for {subscription.email}: {e}") from e

    def list_notification_records(self, shop: str, subscription_id: int | None = None) -> list[NotificationRecord]:
        with self._session_factory() as db:
            q = select(NotificationRecord).where(NotificationRecord.shop == shop)
            if subscription_id is not None:
                q = q.where(NotificationRecord.subscription_id == subscription_id)
            return list(db.execute(q.order_by(NotificationRecord.id.asc())).scalars().all())

    # --- Settings ---

    def get_settings(self, shop: str) -> NotificationSettings | None:
        with self._session_factory() as db:
            row = db.execute(select(BackInStockSettings).where(BackInStockSettings.shop == shop)).scalar_one_or_none()
            return to_settings(row) if row else None

    def upsert_settings(self, shop: str, **fields) -> NotificationSettings:
        """Create or update a shop's settings. Only the given fields change."""
        allowed = {"enabled", "email_subject", "email_template", "button_text", "success_message"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValidationError(f"Unknown settings fields: {sorted(unknown)}")
        try:
            with self._session_factory.begin() as db:
                row = db.execute(
                    select(BackInStockSettings).where(BackInStockSettings.shop == shop)
                ).scalar_one_or_none()
                if row is None:
                    row = BackInStockSettings(shop=shop, **{k: v for k, v in fields.items() if v is not None})
                    db.add(row)
                else:
                    for key, value in fields.items():
                        if value is not None:
                            setattr(row, key, value)
                db.flush()
                return to_settings(row)
        except SQLAlchemyError as e:
            raise StoreWriteError(f"save settings failed for {shop}: {e}") from e

    def toggle_enabled(self, shop: str) -> NotificationSettings:
        current = self.get_settings(shop) or NotificationSettings()
        return self.upsert_settings(shop, enabled=not current.enabled)

    # --- Admin listing ---

    def list_subscriptions(
        self,
        shop: str,
        *,
        page: int = 1,
        search: str = "",
        status: str = "all",
        page_size: int = constants.SUBSCRIPTIONS_PAGE_SIZE,
    ) -> tuple[list[SubscriptionRef], int]:
        """Newest first. status: all | active (not notified) | notified. Returns (page rows, total)."""
        if status not in constants.SUBSCRIPTION_STATUS_FILTERS:
            raise ValidationError(f"Invalid status filter {status!r}. Use one of {constants.SUBSCRIPTION_STATUS_FILTERS}.")
        page = max(1, page)
        conditions = [Subscription.shop == shop]
        search = (search or "").strip()
        if search:
            conditions.append(
                or_(
                    func.lower(Subscription.email).contains(search.lower(), autoescape=True),
                    Subscription.product_id.contains(search, autoescape=True),
                )
            )
        if status == "active":
            conditions.append(Subscription.notified.is_(False))
        elif status == "notified":
            conditions.append(Subscription.notified.is_(True))
        with self._session_factory() as db:
            total = db.execute(select(func.count()).select_from(Subscription).where(*conditions)).scalar_one()
            rows = db.execute(
                select(Subscription)
                .where(*conditions)
                .order_by(Subscription.created_at.desc(), Subscription.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            ).scalars().all()
            return [to_ref(r) for r in rows], total

    def stats(self, shop: str) -> dict[str, int]:
        with self._session_factory() as db:
            total = db.execute(
                select(func.count()).select_from(Subscription).where(Subscription.shop == shop)
            ).scalar_one()
            active = db.execute(
                select(func.count())
                .select_from(Subscription)
                .where(Subscription.shop == shop, Subscription.notified.is_(False))
            ).scalar_one()
            sent = db.execute(
                select(func.count())
                .select_from(NotificationRecord)
                .where(NotificationRecord.shop == shop, NotificationRecord.status == constants.STATUS_SENT)
            ).scalar_one()
        return {"total": total, "active": active, "sent": sent}

    def delete_subscription(self, shop: str, subscription_id: int) -> bool:
        try:
            with self._session_factory.begin() as db:
                result = db.execute(
                    delete(Subscription).where(Subscription.id == subscription_id, Subscription.shop == shop)
                )
                return result.rowcount == 1
        except SQLAlchemyError as e:
            raise StoreWriteError(f"delete subscription {subscription_id} failed: {e}") from e

    def mark_notified(self, shop: str, subscription_id: int) -> bool:
        """Admin override: mark notified without sending. False if missing or already notified."""
        current = self.get_subscription(subscription_id)
        if current is None or current.shop != shop:
            return False
        return self.conditional_mark_notified(subscription_id)
