"""
PDF rendition of the print document.

Generates a paginated order quote from an OrderDocument.
Uses fpdf2 (pure Python, no system dependencies).

Sections always present:
1. Header (company name + document title)
2. Order info (number, date, customer, phone, address)
3. Item table
4. Totals (subtotal, discount when nonzero, VAT, grand total)
Notes block only when the order has notes.

Built-in PDF fonts are latin-1 only. Set PDF_FONT_PATH to a Unicode TTF to
keep Turkish characters; otherwise they are transliterated (ş → s, İ → I).
"""

import logging
from typing import Optional

from fpdf import FPDF

from .config import settings
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

logger = logging.getLogger(__name__)

MEDIA_TYPE = "application/pdf"

# Widths in mm for COLUMNS, sum = printable width of A4 with 10mm margins
COLUMN_WIDTHS = [8, 28, 28, 14, 15, 15, 10, 22, 25, 25]

_TRANSLITERATE = str.maketrans({
    "ş": "s", "Ş": "S",
    "ğ": "g", "Ğ": "G",
    "ı": "i", "İ": "I",
    "₺": "TL",
    "•": "-",     # bullet
    "—": " - ",   # em dash
    "–": "-",     # en dash
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
})


def _safe(text) -> str:
    """Make text renderable by the built-in (latin-1) PDF fonts."""
    if text is None:
        return ""
    return (
        str(text)
        .translate(_TRANSLITERATE)
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def pdf_filename(order_number: str) -> str:
    return f"{order_number}.pdf"


class OrderPDF(FPDF):
    """PDF layout for order quotes."""

    def __init__(self, company_name="", font_path=""):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.company_name = company_name
        self.base_font = "Helvetica"
        self.unicode_font = False
        if font_path:
            self.add_font("OrderFont", "", font_path)
            self.add_font("OrderFont", "B", font_path)
            self.add_font("OrderFont", "I", font_path)
            self.base_font = "OrderFont"
            self.unicode_font = True
        self.set_margins(10, 10, 10)
        self.set_auto_page_break(auto=True, margin=20)

    def safe_text(self, value) -> str:
        """Pass text through unchanged with a Unicode font, transliterate otherwise."""
        if self.unicode_font:
            return "" if value is None else str(value)
        return _safe(value)

    def header(self):
        pass  # We handle headers manually on the first page

    def footer(self):
        self.set_y(-15)
        self.set_font(self.base_font, "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, self.safe_text(f"{self.company_name} - Sayfa {self.page_no()}/{{nb}}"), align="C")

    def table_header(self):
        """Column header row; repeated after page breaks by the caller."""
        self.set_font(self.base_font, "B", 8)
        self.set_fill_color(30, 64, 175)
        self.set_text_color(255, 255, 255)
        for label, width in zip(COLUMNS, COLUMN_WIDTHS):
            self.cell(width, 7, self.safe_text(label), fill=True)
        self.ln()
        self.set_text_color(0, 0, 0)

    def table_row(self, values, shaded=False):
        """Render one item row. Amount columns are right-aligned."""
        self.set_font(self.base_font, "", 8)
        self.set_fill_color(248, 250, 252)
        last = len(COLUMN_WIDTHS) - 1
        for i, (val, width) in enumerate(zip(values, COLUMN_WIDTHS)):
            align = "R" if i >= last - 1 else "L"
            self.cell(width, 6, self.safe_text(val), border="B", align=align, fill=shaded)
        self.ln()

    def total_row(self, label, amount_text, bold=False):
        """Label + amount pair aligned to the right edge of the table."""
        if bold:
            self.set_font(self.base_font, "B", 12)
        else:
            self.set_font(self.base_font, "", 10)
        self.cell(140, 7, self.safe_text(label), align="R")
        self.cell(50, 7, self.safe_text(amount_text), align="R")
        self.ln()


def generate_order_pdf(document: OrderDocument, formatter: Optional[CurrencyFormatter] = None) -> bytes:
    """
    Generate a PDF document for one order.

    Args:
        document: OrderDocument from build_order_document
        formatter: locale formatter (defaults to the process-wide one)

    Returns:
        PDF bytes
    """
    formatter = formatter or get_formatter()
    money = formatter.format_currency

    pdf = OrderPDF(company_name=document.company_name, font_path=settings.PDF_FONT_PATH)
    pdf.alias_nb_pages()
    pdf.add_page()
    pw = pdf.w - pdf.l_margin - pdf.r_margin  # printable width

    # ── Header ──
    pdf.set_font(pdf.base_font, "B", 18)
    pdf.set_text_color(30, 64, 175)
    pdf.cell(pw, 10, pdf.safe_text(document.company_name), align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.set_font(pdf.base_font, "", 11)
    pdf.cell(pw, 6, pdf.safe_text(document.title), align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.set_draw_color(30, 64, 175)
    pdf.line(pdf.l_margin, pdf.get_y() + 2, pdf.w - pdf.r_margin, pdf.get_y() + 2)
    pdf.set_draw_color(0, 0, 0)
    pdf.ln(6)

    # ── Order info ──
    pdf.set_font(pdf.base_font, "B", 10)
    pdf.cell(pw / 2, 6, pdf.safe_text(f"{LABEL_ORDER_NUMBER}: {document.order_number}"))
    pdf.cell(pw / 2, 6, pdf.safe_text(f"{LABEL_DATE}: {document.order_date}"), align="R",
             new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)

    pdf.set_font(pdf.base_font, "", 10)
    pdf.set_fill_color(248, 250, 252)
    pdf.cell(pw, 6, pdf.safe_text(f"{LABEL_CUSTOMER}: {document.customer_name}"), fill=True,
             new_x="LMARGIN", new_y="NEXT")
    pdf.cell(pw, 6, pdf.safe_text(f"{LABEL_PHONE}: {document.customer_phone}"), fill=True,
             new_x="LMARGIN", new_y="NEXT")
    if document.customer_address:
        pdf.multi_cell(pw, 6, pdf.safe_text(f"{LABEL_ADDRESS}: {document.customer_address}"), fill=True,
                       new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── Items ──
    pdf.table_header()
    for i, row in enumerate(document.rows):
        if pdf.will_page_break(6):
            pdf.add_page()
            pdf.table_header()
        pdf.table_row(
            [
                row.index, row.stone_type, row.feature, row.thickness, row.width,
                row.length, row.quantity, row.measure,
                money(row.unit_price), money(row.line_total),
            ],
            shaded=bool(i % 2),
        )
    pdf.ln(4)

    # ── Totals ──
    pdf.total_row(f"{LABEL_SUBTOTAL}:", money(document.subtotal))
    if document.has_discount:
        pdf.set_text_color(220, 38, 38)
        pdf.total_row(f"{LABEL_DISCOUNT}:", f"-{money(document.discount_amount)}")
        pdf.set_text_color(0, 0, 0)
    pdf.total_row(f"{document.vat_label}:", money(document.vat_amount))
    pdf.ln(1)
    pdf.set_text_color(22, 163, 74)
    pdf.total_row(f"{LABEL_GRAND_TOTAL}:", money(document.grand_total), bold=True)
    pdf.set_text_color(0, 0, 0)

    # ── Notes ──
    if document.notes:
        pdf.ln(8)
        pdf.set_fill_color(254, 243, 199)
        pdf.set_font(pdf.base_font, "B", 10)
        pdf.cell(pw, 6, pdf.safe_text(f"{LABEL_NOTES}:"), fill=True, new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(pdf.base_font, "", 9)
        pdf.multi_cell(pw, 5, pdf.safe_text(document.notes), fill=True, new_x="LMARGIN", new_y="NEXT")

    logger.info("Rendered PDF for order %s (%d rows)", document.order_number, len(document.rows))
    return bytes(pdf.output())
