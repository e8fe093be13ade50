"""
Order document downloads.

GET /api/orders/{order_id}/excel  (semicolon-separated text, BOM, .csv)
GET /api/orders/{order_id}/print  (HTML that opens the print dialog)
GET /api/orders/{order_id}/pdf    (application/pdf)

All three are rendered from the same OrderDocument, built from the stored
order. Totals are never recomputed here.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..order_document import OrderDocument, build_order_document
from ..pdf_generator import MEDIA_TYPE as PDF_MEDIA_TYPE, generate_order_pdf, pdf_filename
from ..print_document import generate_print_html
from ..spreadsheet_export import MEDIA_TYPE as CSV_MEDIA_TYPE, csv_filename, generate_order_csv
from .orders import get_order_or_404, order_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["exports"])


def _load_document(order_id: int, db: Session) -> OrderDocument:
    order = get_order_or_404(order_id, db)
    document = build_order_document(order_to_dict(order))
    if document.rows and not document.subtotal:
        logger.warning("Order %s has items but a zero subtotal", document.order_number)
    return document


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{order_id}/excel")
def download_spreadsheet(order_id: int, db: Session = Depends(get_db)):
    document = _load_document(order_id, db)
    text = generate_order_csv(document)
    logger.info("Exported order %s as spreadsheet", document.order_number)
    return _attachment(text.encode("utf-8"), CSV_MEDIA_TYPE, csv_filename(document.order_number))


@router.get("/{order_id}/print", response_class=HTMLResponse)
def print_view(order_id: int, db: Session = Depends(get_db)):
    """Printable page, opened in a new window by the frontend."""
    document = _load_document(order_id, db)
    logger.info("Rendered print view for order %s", document.order_number)
    return HTMLResponse(content=generate_print_html(document))


@router.get("/{order_id}/pdf")
def download_pdf(order_id: int, db: Session = Depends(get_db)):
    document = _load_document(order_id, db)
    pdf_bytes = generate_order_pdf(document)
    return _attachment(pdf_bytes, PDF_MEDIA_TYPE, pdf_filename(document.order_number))
