"""
Spreadsheet (delimited text) export of an order.

Semicolon-separated, "\\n"-terminated, prefixed with a UTF-8 byte-order mark
so Excel shows Turkish characters correctly. Amounts use the locale number
format with the currency label appended: "1.234,56 TL".
"""

import csv
import io
from typing import Optional

from .currency import CurrencyFormatter, get_formatter
from .order_document import (
    COLUMNS,
    LABEL_CUSTOMER,
    LABEL_DATE,
    LABEL_DISCOUNT,
    LABEL_GRAND_TOTAL,
    LABEL_NOTES,
    LABEL_ORDER_NUMBER,
    LABEL_PHONE,
    LABEL_SUBTOTAL,
    OrderDocument,
)

BOM = "\ufeff"
DELIMITER = ";"
MEDIA_TYPE = "text/csv; charset=utf-8"

# Totals sit in the last two columns
_TOTALS_OFFSET = [""] * (len(COLUMNS) - 2)


def csv_filename(order_number: str) -> str:
    return f"{order_number}.csv"


def generate_order_csv(document: OrderDocument, formatter: Optional[CurrencyFormatter] = None) -> str:
    """Render the export model as delimited text (BOM included)."""
    formatter = formatter or get_formatter()
    money = formatter.format_currency

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=DELIMITER, lineterminator="\n")

    # Header block
    writer.writerow([document.company_name])
    writer.writerow([])
    writer.writerow([LABEL_ORDER_NUMBER, document.order_number])
    writer.writerow([LABEL_DATE, document.order_date])
    writer.writerow([LABEL_CUSTOMER, document.customer_name])
    writer.writerow([LABEL_PHONE, document.customer_phone])
    writer.writerow([])

    # Items
    writer.writerow(COLUMNS)
    for row in document.rows:
        writer.writerow([
            row.index,
            row.stone_type,
            row.feature,
            row.thickness,
            row.width,
            row.length,
            row.quantity,
            row.measure,
            money(row.unit_price),
            money(row.line_total),
        ])

    # Totals
    writer.writerow([])
    writer.writerow(_TOTALS_OFFSET + [LABEL_SUBTOTAL, money(document.subtotal)])
    if document.has_discount:
        writer.writerow(_TOTALS_OFFSET + [LABEL_DISCOUNT, f"-{money(document.discount_amount)}"])
    writer.writerow(_TOTALS_OFFSET + [document.vat_label, money(document.vat_amount)])
    writer.writerow(_TOTALS_OFFSET + [LABEL_GRAND_TOTAL, money(document.grand_total)])

    if document.notes:
        writer.writerow([])
        writer.writerow([LABEL_NOTES, document.notes])

    return BOM + buffer.getvalue()
