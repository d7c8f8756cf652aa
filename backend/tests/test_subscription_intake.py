import pytest

from backinstock.core.errors import FeatureDisabledError, ValidationError
from backinstock.services.subscription_intake import normalize_variant_id

from conftest import PRODUCT_ID, SHOP, VARIANT_ID


class TestNormalizeVariantId:
    def test_none_is_all_variants(self):
        assert normalize_variant_id(None) == ""

    def test_numbers_become_strings(self):
        assert normalize_variant_id(39072856) == "39072856"


class TestSubscribe:
    def test_creates_pending_subscription(self, intake, store, enabled_shop):
        result = intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)

        assert result.created is True
        assert result.already_subscribed is False
        assert result.message == enabled_shop.success_message
        sub = store.find_by_identity(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        assert sub is not None
        assert sub.notified is False
        assert sub.notified_at is None
        assert sub.quantity == 1

    def test_missing_variant_subscribes_to_all_variants(self, intake, store, enabled_shop):
        intake.subscribe(SHOP, "a@x.com", PRODUCT_ID)
        assert store.find_by_identity(SHOP, "a@x.com", PRODUCT_ID, "") is not None

    def test_duplicate_is_already_subscribed(self, intake, store, enabled_shop):
        intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        result = intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)

        assert result.created is False
        assert result.already_subscribed is True
        rows, total = store.list_subscriptions(SHOP)
        assert total == 1

    def test_resubscribe_after_notification_reactivates(self, intake, store, enabled_shop):
        intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        sub = store.find_by_identity(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        assert store.conditional_mark_notified(sub.id) is True

        result = intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)

        assert result.already_subscribed is True
        again = store.get_subscription(sub.id)
        assert again.notified is False
        assert again.notified_at is None
        assert again.created_at >= sub.created_at

    def test_variant_and_all_variants_are_separate(self, intake, store, enabled_shop):
        intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
        result = intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, None)
        assert result.created is True
        _, total = store.list_subscriptions(SHOP)
        assert total == 2

    def test_custom_success_message(self, intake, store):
        store.upsert_settings(SHOP, enabled=True, success_message="We'll email you.")
        assert intake.subscribe(SHOP, "a@x.com", PRODUCT_ID).message == "We'll email you."

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b", "a b@x.com"])
    def test_invalid_email_rejected(self, intake, store, enabled_shop, email):
        with pytest.raises(ValidationError):
            intake.subscribe(SHOP, email, PRODUCT_ID, VARIANT_ID)
        _, total = store.list_subscriptions(SHOP)
        assert total == 0

    def test_missing_product_rejected(self, intake, enabled_shop):
        with pytest.raises(ValidationError, match="Missing required fields"):
            intake.subscribe(SHOP, "a@x.com", "")

    def test_missing_shop_rejected(self, intake):
        with pytest.raises(ValidationError):
            intake.subscribe("", "a@x.com", PRODUCT_ID)

    def test_zero_quantity_rejected(self, intake, enabled_shop):
        with pytest.raises(ValidationError):
            intake.subscribe(SHOP, "a@x.com", PRODUCT_ID, quantity=0)

    def test_disabled_shop_rejected(self, intake, store):
        store.upsert_settings(SHOP, enabled=False)
        with pytest.raises(FeatureDisabledError):
            intake.subscribe(SHOP, "a@x.com", PRODUCT_ID)
        assert store.find_by_identity(SHOP, "a@x.com", PRODUCT_ID, "") is None

    def test_shop_without_settings_is_disabled(self, intake):
        with pytest.raises(FeatureDisabledError):
            intake.subscribe(SHOP, "a@x.com", PRODUCT_ID)
