"""
Line-item measurement tests.

Tests:
1-4.   Input coercion (dimensions, prices, quantities, measure type)
5-8.   Per-mode calculation (M², Mtül, per piece, missing dimensions)
9-13.  Field edits (recompute, mode switch in both directions, non-editable fields)
"""

import pytest

from backend.measurement import (
    LineItem,
    LineItemInput,
    MeasureType,
    MeasurementCalculator,
    parse_dimension,
    parse_measure_type,
    parse_price,
    parse_quantity,
)


calc = MeasurementCalculator()


def _area_item(**overrides):
    data = {
        "stone_type_name": "Mermer",
        "thickness": 2,
        "width": 60,
        "length": 300,
        "quantity": 1,
        "measure_type": "m2",
        "unit_price": 200,
    }
    data.update(overrides)
    return LineItem(**data)


# ============================================================
# 1-4. Input coercion
# ============================================================

def test_dimension_parsing():
    """Malformed or negative dimensions are absent, decimal commas are accepted."""
    assert parse_dimension("60") == 60.0
    assert parse_dimension("12,5") == 12.5
    assert parse_dimension("abc") is None
    assert parse_dimension(-5) is None
    assert parse_dimension(None) is None
    assert parse_dimension("") is None


def test_price_parsing():
    """Malformed or negative prices become 0."""
    assert parse_price("199.90") == 199.9
    assert parse_price("x") == 0.0
    assert parse_price(-10) == 0.0
    assert parse_price(None) == 0.0


def test_quantity_parsing():
    """Unset quantity defaults to 1; junk becomes 0; fractions truncate."""
    assert parse_quantity(None) == 1
    assert parse_quantity("3") == 3
    assert parse_quantity("2.9") == 2
    assert parse_quantity("abc") == 0
    assert parse_quantity(-1) == 0


def test_measure_type_parsing():
    assert parse_measure_type("m2") == MeasureType.AREA
    assert parse_measure_type("MTUL") == MeasureType.LENGTH
    assert parse_measure_type("none") == MeasureType.COUNT
    assert parse_measure_type(None) == MeasureType.COUNT
    with pytest.raises(ValueError):
        parse_measure_type("cubic")


def test_line_item_input_coerces_fields():
    item = LineItemInput(width="abc", length="250", quantity=None, unit_price="-3")
    assert item.width is None
    assert item.length == 250.0
    assert item.quantity == 1
    assert item.unit_price == 0.0
    assert item.measure_type == MeasureType.COUNT


# ============================================================
# 5-8. Per-mode calculation
# ============================================================

def test_area_mode():
    """60 × 300 cm = 1.8 m² × 1 × 200 = 360."""
    item = calc.calculate(_area_item())
    assert item.square_meter == pytest.approx(1.8)
    assert item.linear_meter is None
    assert item.total_price == pytest.approx(360.0)


def test_area_mode_thirty_by_six_hundred():
    item = calc.calculate(_area_item(width=30, length=600))
    assert item.square_meter == pytest.approx(1.8)
    assert item.total_price == pytest.approx(360.0)


def test_length_mode():
    """250 cm = 2.5 Mtül × 2 × 100 = 500."""
    item = calc.calculate(LineItem(length=250, quantity=2, measure_type="mtul", unit_price=100))
    assert item.linear_meter == pytest.approx(2.5)
    assert item.square_meter is None
    assert item.total_price == pytest.approx(500.0)


def test_count_mode_ignores_dimensions():
    item = calc.calculate(LineItem(width=60, length=300, quantity=3, measure_type="none", unit_price=50))
    assert item.square_meter is None
    assert item.linear_meter is None
    assert item.total_price == pytest.approx(150.0)


def test_missing_dimension_gives_zero_measure():
    """A half-filled row is still consistent: measure 0, total 0."""
    item = calc.calculate(_area_item(width=None))
    assert item.square_meter == 0.0
    assert item.total_price == 0.0


def test_calculate_accepts_raw_input():
    item = calc.calculate(LineItemInput(length=100, measure_type="mtul", unit_price=40, quantity=3))
    assert isinstance(item, LineItem)
    assert item.total_price == pytest.approx(120.0)


def test_calculate_does_not_mutate_input():
    original = _area_item()
    calc.calculate(original)
    assert original.total_price == 0.0


# ============================================================
# 9-13. Field edits
# ============================================================

def test_apply_change_recomputes():
    item = calc.calculate(_area_item())
    updated = calc.apply_change(item, "quantity", "2")
    assert updated.quantity == 2
    assert updated.total_price == pytest.approx(720.0)


def test_apply_change_coerces_malformed_value():
    item = calc.calculate(_area_item())
    updated = calc.apply_change(item, "width", "abc")
    assert updated.width is None
    assert updated.square_meter == 0.0
    assert updated.total_price == 0.0


def test_mode_switch_clears_other_measure():
    item = calc.calculate(_area_item())
    switched = calc.apply_change(item, "measure_type", "mtul")
    assert switched.square_meter is None
    assert switched.linear_meter == pytest.approx(3.0)
    assert switched.total_price == pytest.approx(600.0)

    to_count = calc.apply_change(switched, "measure_type", "none")
    assert to_count.square_meter is None
    assert to_count.linear_meter is None
    assert to_count.total_price == pytest.approx(200.0)


def test_derived_fields_are_not_editable():
    item = calc.calculate(_area_item())
    for field in ("total_price", "square_meter", "linear_meter", "unknown"):
        with pytest.raises(ValueError):
            calc.apply_change(item, field, 1)


def test_switch_to_area_from_count_or_length():
    """Result depends only on the new mode, never on the previous one."""
    count_item = calc.calculate(_area_item(measure_type="none"))
    from_count = calc.apply_change(count_item, "measure_type", "m2")
    assert from_count.square_meter == pytest.approx(1.8)
    assert from_count.linear_meter is None
    assert from_count.total_price == pytest.approx(360.0)

    length_item = calc.calculate(_area_item(measure_type="mtul"))
    assert length_item.linear_meter == pytest.approx(3.0)
    from_length = calc.apply_change(length_item, "measure_type", "m2")
    assert from_length.square_meter == pytest.approx(1.8)
    assert from_length.linear_meter is None
    assert from_length.total_price == pytest.approx(360.0)

    assert from_count == from_length
