"""
Line-item measurement: derives the billable quantity of one order row.

A row is billed per square meter (M²), per running meter (Mtül) or per piece.
Dimensions are entered in centimeters. The derived per-piece measure and the
line total are recomputed eagerly on every change, so a half-filled row is
always in a consistent, displayable state.

Malformed numbers never raise here: they are coerced by the parse_* helpers
(non-numeric / negative dimensions become absent, prices become 0).
"""

import enum
import logging
import math
from typing import Optional

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)


class MeasureType(str, enum.Enum):
    AREA = "m2"
    LENGTH = "mtul"
    COUNT = "none"


MEASURE_UNITS = {
    MeasureType.AREA: "M²",
    MeasureType.LENGTH: "Mtül",
}

_MEASURE_ALIASES = {
    "area": MeasureType.AREA,
    "length": MeasureType.LENGTH,
    "count": MeasureType.COUNT,
    "piece": MeasureType.COUNT,
    "adet": MeasureType.COUNT,
}


def _to_float(value) -> Optional[float]:
    """Parse user input into a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        # "12,5" typed with a decimal comma
        if "," in value and "." not in value:
            value = value.replace(",", ".")
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_dimension(value) -> Optional[float]:
    """Dimension in cm. Missing, malformed or negative → None (absent)."""
    number = _to_float(value)
    if number is None or number < 0:
        return None
    return number


def parse_price(value) -> float:
    """Unit price. Missing, malformed or negative → 0.0."""
    number = _to_float(value)
    if number is None or number < 0:
        return 0.0
    return number


def parse_quantity(value, default: int = 1) -> int:
    """Piece count. Unset → default; malformed or negative → 0; fractions truncate."""
    if value is None:
        return default
    number = _to_float(value)
    if number is None or number < 0:
        return 0
    return int(number)


def parse_measure_type(value) -> MeasureType:
    if isinstance(value, MeasureType):
        return value
    if value is None:
        return MeasureType.COUNT
    text = str(value).strip().lower()
    if text in _MEASURE_ALIASES:
        return _MEASURE_ALIASES[text]
    return MeasureType(text)


class LineItemInput(BaseModel):
    """Raw, user-editable fields of an order row. Derived values are not accepted."""
    stone_type_id: Optional[int] = None
    stone_type_name: Optional[str] = None
    stone_feature_id: Optional[int] = None
    stone_feature_name: Optional[str] = None
    thickness: Optional[float] = None
    width: Optional[float] = None
    length: Optional[float] = None
    quantity: int = 1
    measure_type: MeasureType = MeasureType.COUNT
    unit_price: float = 0.0
    notes: Optional[str] = None

    @field_validator("thickness", "width", "length", mode="before")
    @classmethod
    def _coerce_dimension(cls, value):
        return parse_dimension(value)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _coerce_price(cls, value):
        return parse_price(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value):
        return parse_quantity(value)

    @field_validator("measure_type", mode="before")
    @classmethod
    def _coerce_measure_type(cls, value):
        return parse_measure_type(value)


class LineItem(LineItemInput):
    """
    One priced row of an order.

    square_meter / linear_meter / total_price are derived by
    MeasurementCalculator. At most one of the two measures is set, matching
    measure_type.
    """
    square_meter: Optional[float] = None
    linear_meter: Optional[float] = None
    total_price: float = 0.0


class MeasurementCalculator:
    """Computes derived measure and line total for a single LineItem."""

    CM2_PER_M2 = 10000.0
    CM_PER_M = 100.0

    EDITABLE_FIELDS = (
        "stone_type_id",
        "stone_type_name",
        "stone_feature_id",
        "stone_feature_name",
        "thickness",
        "width",
        "length",
        "quantity",
        "measure_type",
        "unit_price",
        "notes",
    )

    def square_meter(self, width: Optional[float], length: Optional[float]) -> float:
        """Per-piece area in m² from two cm dimensions. Missing dimension → 0."""
        if not width or not length:
            return 0.0
        return (width * length) / self.CM2_PER_M2

    def linear_meter(self, length: Optional[float]) -> float:
        """Per-piece running length in m from a cm length. Missing → 0."""
        if not length:
            return 0.0
        return length / self.CM_PER_M

    def calculate(self, item: LineItem) -> LineItem:
        """
        Return a copy of item with the derived measure and total_price
        recomputed for its measure_type. The other mode's measure is cleared.
        """
        if not isinstance(item, LineItem):
            item = LineItem.model_validate(item.model_dump())

        quantity = item.quantity or 0
        unit_price = item.unit_price or 0.0

        if item.measure_type == MeasureType.AREA:
            area = self.square_meter(item.width, item.length)
            return item.model_copy(update={
                "square_meter": area,
                "linear_meter": None,
                "total_price": area * quantity * unit_price,
            })

        if item.measure_type == MeasureType.LENGTH:
            running = self.linear_meter(item.length)
            return item.model_copy(update={
                "square_meter": None,
                "linear_meter": running,
                "total_price": running * quantity * unit_price,
            })

        return item.model_copy(update={
            "square_meter": None,
            "linear_meter": None,
            "total_price": quantity * unit_price,
        })

    def apply_change(self, item: LineItem, field: str, value) -> LineItem:
        """
        Apply one user edit and recompute. The value goes through the same
        coercion as a freshly built item.

        Raises:
            ValueError: field is derived or unknown.
        """
        if field not in self.EDITABLE_FIELDS:
            raise ValueError(f"Field '{field}' is not editable")

        data = item.model_dump()
        data[field] = value
        updated = LineItem.model_validate(data)

        if updated.measure_type != item.measure_type:
            logger.debug(
                "Measure type %s -> %s, clearing derived measures",
                item.measure_type.value, updated.measure_type.value,
            )
            updated = updated.model_copy(update={"square_meter": None, "linear_meter": None})

        return self.calculate(updated)
