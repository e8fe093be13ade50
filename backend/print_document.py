"""
Print-ready HTML rendition of an order document.

Sections: header (company + title), info block, item table, totals
(subtotal, optional discount, VAT, grand total), optional notes. The page
opens the browser print dialog on load, so the user never has to look for
print controls.
"""

import html
from typing import Optional

from .currency import CurrencyFormatter, get_formatter
from .order_document import (
    COLUMNS,
    LABEL_ADDRESS,
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

MEDIA_TYPE = "text/html; charset=utf-8"

STYLE = """
  @page { size: A4; margin: 15mm; }
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: 'Segoe UI', Arial, sans-serif; padding: 40px; color: #333; }
  .header { text-align: center; margin-bottom: 30px; border-bottom: 2px solid #1e40af; padding-bottom: 20px; }
  .company-name { font-size: 24px; font-weight: bold; color: #1e40af; }
  .order-info { display: flex; justify-content: space-between; margin-bottom: 20px; }
  .customer-info { background: #f8fafc; padding: 15px; border-radius: 8px; margin-bottom: 20px; }
  table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
  th { background: #1e40af; color: white; padding: 10px; text-align: left; font-size: 12px; }
  td { padding: 8px 10px; border-bottom: 1px solid #e2e8f0; font-size: 12px; }
  tr:nth-child(even) { background: #f8fafc; }
  .totals { text-align: right; margin-top: 20px; }
  .total-row { display: flex; justify-content: flex-end; margin: 5px 0; }
  .total-label { width: 150px; text-align: right; margin-right: 20px; }
  .discount { color: #dc2626; }
  .grand-total { font-size: 18px; font-weight: bold; color: #16a34a; background: #dcfce7; padding: 10px; }
  .notes { margin-top: 30px; padding: 15px; background: #fef3c7; border-radius: 8px; }
  @media print { body { padding: 0; } }
"""

PRINT_SCRIPT = "window.addEventListener('load', function () { window.print(); });"


def _e(value) -> str:
    return html.escape(str(value))


def _total_row(label: str, amount_html: str, css_class: str = "") -> str:
    classes = f"total-row {css_class}".strip()
    return (
        f'<div class="{classes}">'
        f'<span class="total-label">{_e(label)}:</span>'
        f"<span>{amount_html}</span>"
        f"</div>"
    )


def generate_print_html(
    document: OrderDocument,
    formatter: Optional[CurrencyFormatter] = None,
    auto_print: bool = True,
) -> str:
    """
    Render the export model as a self-contained HTML page.

    Args:
        document: OrderDocument from build_order_document
        formatter: locale formatter (defaults to the process-wide one)
        auto_print: open the print dialog once the page has loaded
    """
    formatter = formatter or get_formatter()
    money = formatter.format_currency_markup

    header_cells = "".join(f"<th>{_e(label)}</th>" for label in COLUMNS)
    body_rows = []
    for row in document.rows:
        cells = [
            row.index, row.stone_type, row.feature, row.thickness, row.width,
            row.length, row.quantity, row.measure,
        ]
        body_rows.append(
            "<tr>"
            + "".join(f"<td>{_e(cell)}</td>" for cell in cells)
            + f"<td>{money(row.unit_price)}</td>"
            + f"<td>{money(row.line_total)}</td>"
            + "</tr>"
        )

    customer_lines = [f"<strong>{_e(LABEL_CUSTOMER)}:</strong> {_e(document.customer_name)}<br>"]
    customer_lines.append(f"<strong>{_e(LABEL_PHONE)}:</strong> {_e(document.customer_phone)}<br>")
    if document.customer_address:
        customer_lines.append(f"<strong>{_e(LABEL_ADDRESS)}:</strong> {_e(document.customer_address)}")

    totals = [_total_row(LABEL_SUBTOTAL, money(document.subtotal))]
    if document.has_discount:
        totals.append(_total_row(LABEL_DISCOUNT, f"-{money(document.discount_amount)}", "discount"))
    totals.append(_total_row(document.vat_label, money(document.vat_amount)))
    totals.append(_total_row(LABEL_GRAND_TOTAL, money(document.grand_total), "grand-total"))

    notes_html = ""
    if document.notes:
        notes_html = (
            f'<div class="notes"><strong>{_e(LABEL_NOTES)}:</strong> {_e(document.notes)}</div>'
        )

    script_html = f"<script>{PRINT_SCRIPT}</script>" if auto_print else ""
    customer_html = "".join(customer_lines)
    rows_html = "\n".join(body_rows)
    totals_html = "".join(totals)

    return f"""<!DOCTYPE html>
<html lang="tr">
<head>
<meta charset="UTF-8">
<title>{_e(document.title)} {_e(document.order_number)}</title>
<style>{STYLE}</style>
</head>
<body>
<div class="header">
  <div class="company-name">{_e(document.company_name)}</div>
  <p>{_e(document.title)}</p>
</div>
<div class="order-info">
  <div><strong>{_e(LABEL_ORDER_NUMBER)}:</strong> {_e(document.order_number)}</div>
  <div><strong>{_e(LABEL_DATE)}:</strong> {_e(document.order_date)}</div>
</div>
<div class="customer-info">
  {customer_html}
</div>
<table>
  <thead><tr>{header_cells}</tr></thead>
  <tbody>
{rows_html}
  </tbody>
</table>
<div class="totals">
{totals_html}
</div>
{notes_html}
{script_html}
</body>
</html>
"""
