"""
Shared document model for order exports.

build_order_document() turns one stored order (dict, see
routers.orders.order_to_dict) into an OrderDocument: header fields, one
DocumentRow per line item and the order totals. Every serializer
(spreadsheet, print HTML, PDF) renders this model and never recomputes a
number, so all formats agree.
"""

from typing import List, Optional

from pydantic import BaseModel

from .config import settings
from .currency import CurrencyFormatter, get_formatter
from .measurement import MEASURE_UNITS, MeasureType

PLACEHOLDER = "-"

COLUMNS = [
    "#",
    "Taş Cinsi",
    "Özellik",
    "Kalınlık",
    "Genişlik",
    "Uzunluk",
    "Adet",
    "M²/Mtül",
    "Birim Fiyat",
    "Tutar",
]

LABEL_ORDER_NUMBER = "Sipariş No"
LABEL_DATE = "Tarih"
LABEL_CUSTOMER = "Müşteri"
LABEL_PHONE = "Telefon"
LABEL_ADDRESS = "Adres"
LABEL_SUBTOTAL = "Ara Toplam"
LABEL_DISCOUNT = "İskonto"
LABEL_GRAND_TOTAL = "GENEL TOPLAM"
LABEL_NOTES = "Notlar"


class DocumentRow(BaseModel):
    index: int
    stone_type: str
    feature: str
    thickness: str
    width: str
    length: str
    quantity: str
    measure: str
    unit_price: float
    line_total: float


class OrderDocument(BaseModel):
    company_name: str
    title: str
    order_number: str
    order_date: str
    customer_name: str
    customer_phone: str
    customer_address: Optional[str] = None
    rows: List[DocumentRow] = []
    subtotal: float = 0.0
    discount_amount: float = 0.0
    vat_rate: str = "0"
    vat_amount: float = 0.0
    grand_total: float = 0.0
    notes: Optional[str] = None

    @property
    def has_discount(self) -> bool:
        return bool(self.discount_amount)

    @property
    def vat_label(self) -> str:
        return f"KDV (%{self.vat_rate})"


def plain_number(value) -> str:
    """20.0 → '20', 2.5 → '2.5'. Absent or zero → '-'."""
    if not value:
        return PLACEHOLDER
    try:
        number = float(value)
    except (ValueError, TypeError):
        return str(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _name(catalog_entry, fallback) -> str:
    """Catalog name, then free-text name, then '-'."""
    if catalog_entry and catalog_entry.get("name"):
        return catalog_entry["name"]
    return fallback or PLACEHOLDER


def _measure_type(item: dict) -> MeasureType:
    value = item.get("measure_type")
    if value:
        return MeasureType(value)
    # Rows stored without a tag: infer from which measure is filled
    if item.get("linear_meter"):
        return MeasureType.LENGTH
    if item.get("square_meter"):
        return MeasureType.AREA
    return MeasureType.COUNT


def measure_text(item: dict, formatter: CurrencyFormatter) -> str:
    """'1.80 M²', '2.50 Mtül', or '-' for per-piece rows."""
    mode = _measure_type(item)
    if mode == MeasureType.AREA:
        value = item.get("square_meter")
    elif mode == MeasureType.LENGTH:
        value = item.get("linear_meter")
    else:
        return PLACEHOLDER
    return f"{formatter.format_fixed(value or 0)} {MEASURE_UNITS[mode]}"


def build_rows(items: list, formatter: CurrencyFormatter) -> List[DocumentRow]:
    rows = []
    for index, item in enumerate(items, start=1):
        rows.append(DocumentRow(
            index=index,
            stone_type=_name(item.get("stone_type"), item.get("stone_type_name")),
            feature=_name(item.get("stone_feature"), item.get("stone_feature_name")),
            thickness=plain_number(item.get("thickness")),
            width=plain_number(item.get("width")),
            length=plain_number(item.get("length")),
            quantity=str(item.get("quantity") or 0),
            measure=measure_text(item, formatter),
            unit_price=item.get("unit_price") or 0.0,
            line_total=item.get("total_price") or 0.0,
        ))
    return rows


def build_order_document(order: dict, formatter: Optional[CurrencyFormatter] = None) -> OrderDocument:
    """
    Build the export model from a fully loaded order.

    Args:
        order: order dict with "customer" and "order_items" populated and
               totals as stored (subtotal, discount_amount, vat_rate,
               vat_amount, grand_total)
        formatter: locale formatter (defaults to the process-wide one)
    """
    formatter = formatter or get_formatter()
    customer = order.get("customer") or {}

    return OrderDocument(
        company_name=settings.COMPANY_NAME,
        title=settings.DOCUMENT_TITLE,
        order_number=str(order.get("order_number") or PLACEHOLDER),
        order_date=formatter.format_date(order.get("order_date")),
        customer_name=customer.get("name") or PLACEHOLDER,
        customer_phone=customer.get("phone") or PLACEHOLDER,
        customer_address=customer.get("address") or None,
        rows=build_rows(order.get("order_items") or [], formatter),
        subtotal=order.get("subtotal") or 0.0,
        discount_amount=order.get("discount_amount") or 0.0,
        vat_rate=plain_number(order.get("vat_rate")) if order.get("vat_rate") else "0",
        vat_amount=order.get("vat_amount") or 0.0,
        grand_total=order.get("grand_total") or 0.0,
        notes=order.get("notes") or None,
    )
