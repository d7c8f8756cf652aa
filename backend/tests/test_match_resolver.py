from dataclasses import replace

from backinstock.services.match_resolver import MatchResolver

from conftest import PRODUCT_ID, SHOP, VARIANT_ID


class StaleStore:
    """Returns whatever rows it was given, including ones that are no longer eligible."""

    def __init__(self, rows):
        self.rows = rows

    def query_eligible(self, shop, product_id, variant_id):
        return self.rows


def test_exact_variant_and_all_variants(store):
    exact = store.create(SHOP, "exact@x.com", PRODUCT_ID, VARIANT_ID)
    wildcard = store.create(SHOP, "any@x.com", PRODUCT_ID, "")
    store.create(SHOP, "other@x.com", PRODUCT_ID, "777")

    eligible = MatchResolver(store).find_eligible(SHOP, PRODUCT_ID, VARIANT_ID)

    assert [s.id for s in eligible] == [exact.id, wildcard.id]


def test_nothing_matches(store):
    store.create(SHOP, "a@x.com", "111", "")
    assert MatchResolver(store).find_eligible(SHOP, PRODUCT_ID, VARIANT_ID) == []


def test_notified_and_foreign_rows_dropped(store):
    good = store.create(SHOP, "a@x.com", PRODUCT_ID, VARIANT_ID)
    rows = [
        good,
        replace(good, id=2, notified=True),
        replace(good, id=3, shop="other.myshopify.com"),
        replace(good, id=4, product_id="111"),
    ]
    assert MatchResolver(StaleStore(rows)).find_eligible(SHOP, PRODUCT_ID, VARIANT_ID) == [good]
