"""
Order pricing: aggregates line items into order totals.

Pure math. Every call recomputes all four totals from the full item list:
    subtotal    = Σ line totals
    total (net) = subtotal - discount_amount
    vat_amount  = total × vat_rate / 100
    grand_total = total + vat_amount

Input: list of LineItem (or anything with a total_price attribute) + discount + VAT rate
Output: OrderTotals
"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel

from .config import settings
from .measurement import LineItem, MeasurementCalculator, parse_price

logger = logging.getLogger(__name__)


class NegativeNetTotalError(ValueError):
    """Discount exceeds subtotal; the order cannot be saved as-is."""

    def __init__(self, totals: "OrderTotals"):
        self.totals = totals
        super().__init__(
            f"Discount {totals.discount_amount:.2f} exceeds subtotal {totals.subtotal:.2f}"
        )


class OrderTotals(BaseModel):
    subtotal: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    vat_rate: float = settings.DEFAULT_VAT_RATE
    vat_amount: float = 0.0
    grand_total: float = 0.0

    @property
    def net_total_negative(self) -> bool:
        # Compared at currency precision: 0.7 * 3 sums to 2.0999999999999996
        return round(self.total, 2) < 0


class OrderAggregator:
    """
    Sums priced line items into order-level totals.
    The calculator is shared so price_order can recompute rows first.
    """

    def __init__(self, calculator: Optional[MeasurementCalculator] = None, default_vat_rate: Optional[float] = None):
        self.calculator = calculator or MeasurementCalculator()
        self.default_vat_rate = (
            default_vat_rate if default_vat_rate is not None else settings.DEFAULT_VAT_RATE
        )

    def resolve_vat_rate(self, vat_rate) -> float:
        """
        None (unset) → default rate. An explicit 0 is kept: defaulting it
        would silently add tax to a tax-free order.
        """
        if vat_rate is None:
            return self.default_vat_rate
        return parse_price(vat_rate)

    def calculate(self, items: list, discount_amount=0.0, vat_rate=None) -> OrderTotals:
        """Recompute subtotal / net / VAT / grand total from the full item list."""
        subtotal = sum((getattr(item, "total_price", 0) or 0) for item in items)
        discount = parse_price(discount_amount)
        rate = self.resolve_vat_rate(vat_rate)

        net = subtotal - discount
        vat_amount = net * rate / 100.0

        return OrderTotals(
            subtotal=subtotal,
            discount_amount=discount,
            total=net,
            vat_rate=rate,
            vat_amount=vat_amount,
            grand_total=net + vat_amount,
        )

    def price_order(
        self,
        items: List[LineItem],
        discount_amount=0.0,
        vat_rate=None,
    ) -> Tuple[List[LineItem], OrderTotals]:
        """Recalculate every row, then the order totals. Row order is preserved."""
        priced = [self.calculator.calculate(item) for item in items]
        return priced, self.calculate(priced, discount_amount, vat_rate)

    def ensure_non_negative(self, totals: OrderTotals) -> OrderTotals:
        """
        Raises:
            NegativeNetTotalError: discount exceeds subtotal.
        """
        if totals.net_total_negative:
            logger.warning(
                "Rejected order totals: discount %.2f > subtotal %.2f",
                totals.discount_amount, totals.subtotal,
            )
            raise NegativeNetTotalError(totals)
        return totals
