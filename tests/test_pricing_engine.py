"""
Order aggregation tests.

Tests:
1-3. Totals from mixed-mode items (subtotal, discount, VAT, grand total)
4-5. VAT rate defaulting (unset vs explicit zero)
6-7. Negative net total policy
8-10. Worked examples, item order
11-13. Currency-precision sign check, default VAT rate
"""

import pytest

from backend.measurement import LineItem
from backend.pricing_engine import NegativeNetTotalError, OrderAggregator


def _mixed_items():
    return [
        LineItem(width=60, length=300, quantity=1, measure_type="m2", unit_price=200),   # 360
        LineItem(length=250, quantity=2, measure_type="mtul", unit_price=100),           # 500
        LineItem(quantity=3, measure_type="none", unit_price=50),                        # 150
    ]


@pytest.fixture
def aggregator():
    return OrderAggregator(default_vat_rate=20.0)


# ============================================================
# 1-3. Totals
# ============================================================

def test_price_order_mixed_modes(aggregator):
    priced, totals = aggregator.price_order(_mixed_items(), discount_amount=10, vat_rate=20)
    assert [round(i.total_price, 2) for i in priced] == [360.0, 500.0, 150.0]
    assert totals.subtotal == pytest.approx(1010.0)
    assert totals.total == pytest.approx(1000.0)
    assert totals.vat_amount == pytest.approx(200.0)
    assert totals.grand_total == pytest.approx(1200.0)


def test_totals_match_identities(aggregator):
    _, totals = aggregator.price_order(_mixed_items(), discount_amount=123.45, vat_rate=18)
    assert totals.total == pytest.approx(totals.subtotal - totals.discount_amount)
    assert totals.vat_amount == pytest.approx(totals.total * 18 / 100)
    assert totals.grand_total == pytest.approx(totals.total + totals.vat_amount)


def test_empty_order(aggregator):
    priced, totals = aggregator.price_order([], vat_rate=20)
    assert priced == []
    assert totals.subtotal == 0
    assert totals.grand_total == 0


def test_row_order_preserved(aggregator):
    items = _mixed_items()
    priced, _ = aggregator.price_order(items)
    assert [i.measure_type for i in priced] == [i.measure_type for i in items]


def test_malformed_discount_is_zero(aggregator):
    _, totals = aggregator.price_order(_mixed_items(), discount_amount="abc")
    assert totals.discount_amount == 0.0
    assert totals.total == pytest.approx(1010.0)


# ============================================================
# 4-5. VAT rate
# ============================================================

def test_unset_vat_rate_uses_default(aggregator):
    totals = aggregator.calculate(
        [LineItem(quantity=1, unit_price=410, total_price=410)], vat_rate=None,
    )
    assert totals.vat_rate == 20.0
    assert totals.vat_amount == pytest.approx(82.0)
    assert totals.grand_total == pytest.approx(492.0)


def test_explicit_zero_vat_is_kept(aggregator):
    _, totals = aggregator.price_order(_mixed_items(), vat_rate=0)
    assert totals.vat_rate == 0
    assert totals.vat_amount == 0
    assert totals.grand_total == pytest.approx(1010.0)


# ============================================================
# 6-7. Negative net total
# ============================================================

def test_negative_net_is_reported(aggregator):
    _, totals = aggregator.price_order(_mixed_items(), discount_amount=2000)
    assert totals.net_total_negative
    assert totals.total == pytest.approx(-990.0)


def test_ensure_non_negative_raises(aggregator):
    _, totals = aggregator.price_order(_mixed_items(), discount_amount=2000)
    with pytest.raises(NegativeNetTotalError) as exc:
        aggregator.ensure_non_negative(totals)
    assert exc.value.totals is totals


def test_ensure_non_negative_passes_through(aggregator):
    _, totals = aggregator.price_order(_mixed_items(), discount_amount=1010)
    assert aggregator.ensure_non_negative(totals) is totals
    assert totals.grand_total == pytest.approx(0.0)


# ============================================================
# Worked examples
# ============================================================

def _sample_slab_and_pieces():
    return [
        LineItem(width=30, length=600, quantity=2, measure_type="m2", unit_price=100),
        LineItem(quantity=3, measure_type="none", unit_price=50),
    ]


def test_worked_example_without_discount(aggregator):
    priced, totals = aggregator.price_order(_sample_slab_and_pieces(), discount_amount=0, vat_rate=20)
    assert [round(i.total_price, 2) for i in priced] == [360.0, 150.0]
    assert totals.subtotal == pytest.approx(510.0)
    assert totals.vat_amount == pytest.approx(102.0)
    assert totals.grand_total == pytest.approx(612.0)


def test_worked_example_with_discount(aggregator):
    _, totals = aggregator.price_order(_sample_slab_and_pieces(), discount_amount=100, vat_rate=20)
    assert totals.total == pytest.approx(410.0)
    assert totals.vat_amount == pytest.approx(82.0)
    assert totals.grand_total == pytest.approx(492.0)


def test_reordering_items_keeps_totals(aggregator):
    items = _mixed_items()
    _, forward = aggregator.price_order(items, discount_amount=10, vat_rate=20)
    _, backward = aggregator.price_order(list(reversed(items)), discount_amount=10, vat_rate=20)
    assert forward.grand_total == pytest.approx(backward.grand_total)


# ============================================================
# 11-12. Currency precision, defaults
# ============================================================

def test_discount_equal_to_subtotal_with_float_noise(aggregator):
    """0.7 × 3 = 2.0999999999999996, displayed as 2,10."""
    _, totals = aggregator.price_order(
        [LineItem(length=70, quantity=1, measure_type="mtul", unit_price=3)], discount_amount=2.10,
    )
    assert totals.total < 0
    assert not totals.net_total_negative
    assert aggregator.ensure_non_negative(totals) is totals


def test_one_cent_over_is_still_negative(aggregator):
    _, totals = aggregator.price_order(
        [LineItem(length=70, quantity=1, measure_type="mtul", unit_price=3)], discount_amount=2.11,
    )
    assert totals.net_total_negative


def test_totals_default_vat_rate_follows_settings():
    from backend.config import settings
    from backend.pricing_engine import OrderTotals

    assert OrderTotals().vat_rate == settings.DEFAULT_VAT_RATE
