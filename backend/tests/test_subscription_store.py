from datetime import datetime, timezone

import pytest

from backinstock.core.errors import StoreConflict, ValidationError
from backinstock.services.types import NotificationSettings

from conftest import PRODUCT_ID, SHOP, VARIANT_ID

OTHER_SHOP = "other.myshopify.com"


class TestCreateAndClaim:
    def test_create_duplicate_identity_conflicts(self, store):
        store.create(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        with pytest.raises(StoreConflict):
            store.create(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)

    def test_conditional_mark_notified_applies_once(self, store):
        sub = store.create(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        assert store.conditional_mark_notified(sub.id) is True
        assert store.conditional_mark_notified(sub.id) is False
        marked = store.get_subscription(sub.id)
        assert marked.notified is True
        assert marked.notified_at is not None

    def test_release_requires_matching_claim(self, store):
        sub = store.create(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        claimed_at = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        assert store.conditional_mark_notified(sub.id, claimed_at) is True

        assert store.release_notified(sub.id, datetime(2026, 1, 2, tzinfo=timezone.utc)) is False
        assert store.release_notified(sub.id, claimed_at) is True
        assert store.get_subscription(sub.id).notified is False

    def test_reactivate_only_notified(self, store):
        sub = store.create(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        assert store.reactivate(sub.id) is False
        store.conditional_mark_notified(sub.id)
        assert store.reactivate(sub.id) is True
        assert store.get_subscription(sub.id).notified is False


class TestQueryEligible:
    def test_variant_and_all_variant_rows_oldest_first(self, store):
        first = store.create(SHOP, "first@x.com", PRODUCT_ID, "")
        second = store.create(SHOP, "second@x.com", PRODUCT_ID, VARIANT_ID)
        store.create(SHOP, "other-variant@x.com", PRODUCT_ID, "999")
        store.create(SHOP, "other-product@x.com", "111", VARIANT_ID)
        store.create(OTHER_SHOP, "other-shop@x.com", PRODUCT_ID, VARIANT_ID)
        notified = store.create(SHOP, "done@x.com", PRODUCT_ID, VARIANT_ID)
        store.conditional_mark_notified(notified.id)

        eligible = store.query_eligible(SHOP, PRODUCT_ID, VARIANT_ID)

        assert [s.id for s in eligible] == [first.id, second.id]


class TestNotificationRecords:
    def test_append_and_list(self, store):
        sub = store.create(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        store.append_notification_record(sub, "failed", "SMTP error")
        store.append_notification_record(sub, "sent")

        records = store.list_notification_records(SHOP, sub.id)

        assert [r.status for r in records] == ["failed", "sent"]
        assert records[0].error == "SMTP error"
        assert records[1].email == "a@x.com"
        assert store.list_notification_records(OTHER_SHOP) == []


class TestSettings:
    def test_missing_settings_is_none(self, store):
        assert store.get_settings(SHOP) is None

    def test_upsert_creates_with_defaults(self, store):
        saved = store.upsert_settings(SHOP, enabled=True)
        defaults = NotificationSettings()
        assert saved.enabled is True
        assert saved.email_subject == defaults.email_subject
        assert saved.button_text == defaults.button_text

    def test_upsert_changes_only_given_fields(self, store):
        store.upsert_settings(SHOP, enabled=True, email_subject="First")
        saved = store.upsert_settings(SHOP, email_subject="Second")
        assert saved.enabled is True
        assert saved.email_subject == "Second"
        assert store.get_settings(SHOP).email_subject == "Second"

    def test_upsert_rejects_unknown_field(self, store):
        with pytest.raises(ValidationError):
            store.upsert_settings(SHOP, colour="red")

    def test_toggle(self, store):
        assert store.toggle_enabled(SHOP).enabled is True
        assert store.toggle_enabled(SHOP).enabled is False


class TestAdminListing:
    @pytest.fixture()
    def populated(self, store):
        subs = [store.create(SHOP, f"user{i}@x.com", PRODUCT_ID if i % 2 else "555", "") for i in range(30)]
        for sub in subs[:4]:
            store.conditional_mark_notified(sub.id)
        store.create(OTHER_SHOP, "user0@x.com", PRODUCT_ID, "")
        return subs

    def test_paginates_newest_first(self, store, populated):
        rows, total = store.list_subscriptions(SHOP, page=1)
        assert total == 30
        assert len(rows) == 25
        assert rows[0].id == populated[-1].id
        rows, _ = store.list_subscriptions(SHOP, page=2)
        assert len(rows) == 5

    def test_status_filters(self, store, populated):
        assert store.list_subscriptions(SHOP, status="notified")[1] == 4
        assert store.list_subscriptions(SHOP, status="active")[1] == 26

    def test_invalid_status(self, store):
        with pytest.raises(ValidationError):
            store.list_subscriptions(SHOP, status="pending")

    def test_search_email_case_insensitive(self, store, populated):
        rows, total = store.list_subscriptions(SHOP, search="USER1@")
        assert total == 1
        assert rows[0].email == "user1@x.com"

    def test_search_product_id(self, store, populated):
        assert store.list_subscriptions(SHOP, search="555")[1] == 15

    def test_stats(self, store, populated):
        store.append_notification_record(populated[0], "sent")
        store.append_notification_record(populated[1], "failed", "boom")
        assert store.stats(SHOP) == {"total": 30, "active": 26, "sent": 1}

    def test_delete_scoped_to_shop(self, store, populated):
        assert store.delete_subscription(OTHER_SHOP, populated[0].id) is False
        assert store.delete_subscription(SHOP, populated[0].id) is True
        assert store.get_subscription(populated[0].id) is None

    def test_mark_notified(self, store, populated):
        pending = populated[10]
        assert store.mark_notified(OTHER_SHOP, pending.id) is False
        assert store.mark_notified(SHOP, pending.id) is True
        assert store.mark_notified(SHOP, pending.id) is False
