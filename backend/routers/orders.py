import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import settings
from ..database import get_db
from ..measurement import LineItem, LineItemInput, MeasurementCalculator
from ..pricing_engine import NegativeNetTotalError, OrderAggregator, OrderTotals

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

calculator = MeasurementCalculator()
aggregator = OrderAggregator(calculator)

ORDER_NUMBER_ATTEMPTS = 2


def generate_order_number(db: Session) -> str:
    """SP-2026-0001. Numbering restarts every year; numbers freed by deletion are not reused."""
    prefix = f"{settings.ORDER_NUMBER_PREFIX}-{datetime.utcnow().year}-"
    number = db.query(models.Order).filter(models.Order.order_number.like(f"{prefix}%")).count() + 1
    while db.query(models.Order).filter(models.Order.order_number == f"{prefix}{str(number).zfill(4)}").first():
        number += 1
    return f"{prefix}{str(number).zfill(4)}"


def get_order_or_404(order_id: int, db: Session) -> models.Order:
    order = db.query(models.Order).filter(models.Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def resolve_items(items: List[LineItemInput], db: Session) -> List[LineItem]:
    """
    Check catalog references and fill catalog default prices.
    A feature's default_price is used only when the row sent no unit_price.
    """
    resolved = []
    for item in items:
        data = item.model_dump()
        if item.stone_type_id is not None:
            stone_type = db.query(models.StoneType).filter(models.StoneType.id == item.stone_type_id).first()
            if not stone_type:
                raise HTTPException(status_code=404, detail="Stone type not found")
        if item.stone_feature_id is not None:
            feature = db.query(models.StoneFeature).filter(models.StoneFeature.id == item.stone_feature_id).first()
            if not feature:
                raise HTTPException(status_code=404, detail="Stone feature not found")
            if "unit_price" not in item.model_fields_set and feature.default_price is not None:
                data["unit_price"] = feature.default_price
        resolved.append(LineItem.model_validate(data))
    return resolved


def _check_customer(customer_id: int, db: Session):
    customer = db.query(models.Customer).filter(models.Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")


def _checked_totals(totals: OrderTotals) -> OrderTotals:
    try:
        return aggregator.ensure_non_negative(totals)
    except NegativeNetTotalError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _apply_totals(order: models.Order, totals: OrderTotals):
    """All totals are written together, never a partial update."""
    order.discount_amount = totals.discount_amount
    order.vat_rate = totals.vat_rate
    order.subtotal = totals.subtotal
    order.total = totals.total
    order.vat_amount = totals.vat_amount
    order.grand_total = totals.grand_total


def _replace_items(order: models.Order, items: List[LineItem]):
    rows = []
    for position, item in enumerate(items):
        data = item.model_dump()
        data["measure_type"] = item.measure_type.value
        rows.append(models.OrderItem(position=position, **data))
    order.items = rows


def _totals_out(totals: OrderTotals) -> schemas.OrderTotalsOut:
    return schemas.OrderTotalsOut(
        **totals.model_dump(),
        net_total_negative=totals.net_total_negative,
    )


def _catalog_ref(entry) -> Optional[dict]:
    if entry is None:
        return None
    return {"id": entry.id, "name": entry.name}


def _item_to_dict(item: models.OrderItem) -> dict:
    return {
        "id": item.id,
        "position": item.position,
        "stone_type_id": item.stone_type_id,
        "stone_type_name": item.stone_type_name,
        "stone_type": _catalog_ref(item.stone_type),
        "stone_feature_id": item.stone_feature_id,
        "stone_feature_name": item.stone_feature_name,
        "stone_feature": _catalog_ref(item.stone_feature),
        "thickness": item.thickness,
        "width": item.width,
        "length": item.length,
        "quantity": item.quantity,
        "measure_type": item.measure_type,
        "square_meter": item.square_meter,
        "linear_meter": item.linear_meter,
        "unit_price": item.unit_price,
        "total_price": item.total_price,
        "notes": item.notes,
    }


def order_to_dict(order: models.Order, include_items: bool = True) -> dict:
    """Order with nested customer (and items). Exports are built from this shape."""
    customer = None
    if order.customer:
        customer = {
            "id": order.customer.id,
            "name": order.customer.name,
            "phone": order.customer.phone,
            "email": order.customer.email,
            "address": order.customer.address,
        }
    data = {
        "id": order.id,
        "order_number": order.order_number,
        "customer_id": order.customer_id,
        "customer": customer,
        "order_date": order.order_date.isoformat() if order.order_date else None,
        "status": order.status.value if order.status else None,
        "discount_rate": order.discount_rate,
        "discount_amount": order.discount_amount,
        "vat_rate": order.vat_rate,
        "subtotal": order.subtotal,
        "total": order.total,
        "vat_amount": order.vat_amount,
        "grand_total": order.grand_total,
        "notes": order.notes,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }
    if include_items:
        data["order_items"] = [_item_to_dict(item) for item in order.items]
    return data


# --- Live pricing (no persistence) ---

@router.post("/preview", response_model=schemas.OrderPreview)
def preview_order(payload: schemas.OrderPreviewRequest, db: Session = Depends(get_db)):
    """Price an order that is still being composed. Negative net totals are reported, not rejected."""
    items = resolve_items(payload.items, db)
    priced, totals = aggregator.price_order(items, payload.discount_amount, payload.vat_rate)
    return schemas.OrderPreview(items=priced, totals=_totals_out(totals))


@router.post("/preview/item", response_model=LineItem)
def preview_item_change(payload: schemas.ItemChangeRequest):
    """Apply one field edit to one row and return the row recomputed."""
    try:
        return calculator.apply_change(payload.item, payload.field, payload.value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# --- CRUD ---

@router.post("/")
def create_order(payload: schemas.OrderCreate, db: Session = Depends(get_db)):
    _check_customer(payload.customer_id, db)

    items = resolve_items(payload.items, db)
    priced, totals = aggregator.price_order(items, payload.discount_amount, payload.vat_rate)
    totals = _checked_totals(totals)

    # A concurrent create can take the same number; retry once with a fresh one
    for attempt in range(ORDER_NUMBER_ATTEMPTS):
        order_number = generate_order_number(db)
        db_order = models.Order(
            order_number=order_number,
            customer_id=payload.customer_id,
            order_date=payload.order_date or date.today(),
            status=payload.status,
            notes=payload.notes,
            discount_rate=payload.discount_rate,
        )
        _apply_totals(db_order, totals)
        _replace_items(db_order, priced)
        db.add(db_order)
        try:
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            logger.warning("Order number %s already taken (attempt %d)", order_number, attempt + 1)
    else:
        raise HTTPException(status_code=409, detail="Could not allocate an order number, try again")
    db.refresh(db_order)

    logger.info(
        "Created order %s: %d items, grand total %.2f",
        db_order.order_number, len(priced), totals.grand_total,
    )
    return order_to_dict(db_order)


@router.get("/")
def list_orders(
    status: Optional[models.OrderStatus] = None,
    customer_id: Optional[int] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
):
    query = db.query(models.Order)
    if status:
        query = query.filter(models.Order.status == status)
    if customer_id:
        query = query.filter(models.Order.customer_id == customer_id)
    if search:
        query = query.filter(models.Order.order_number.ilike(f"%{search}%"))
    orders = query.order_by(models.Order.created_at.desc(), models.Order.id.desc()).offset(skip).limit(limit).all()
    return [order_to_dict(o, include_items=False) for o in orders]


@router.get("/{order_id}")
def get_order(order_id: int, db: Session = Depends(get_db)):
    return order_to_dict(get_order_or_404(order_id, db))


@router.put("/{order_id}")
def update_order(order_id: int, payload: schemas.OrderUpdate, db: Session = Depends(get_db)):
    """
    Update order fields. Totals are recomputed on every update: from the
    replacement items when sent, from the stored items otherwise.
    """
    order = get_order_or_404(order_id, db)
    sent = payload.model_fields_set

    if payload.customer_id is not None:
        _check_customer(payload.customer_id, db)

    for field in ("customer_id", "order_date", "status", "notes", "discount_rate"):
        if field in sent and getattr(payload, field) is not None:
            setattr(order, field, getattr(payload, field))
    if "notes" in sent and payload.notes is None:
        order.notes = None

    discount = payload.discount_amount if payload.discount_amount is not None else order.discount_amount
    vat_rate = payload.vat_rate if "vat_rate" in sent else order.vat_rate

    if payload.items is not None:
        priced, totals = aggregator.price_order(resolve_items(payload.items, db), discount, vat_rate)
        totals = _checked_totals(totals)
        _replace_items(order, priced)
    else:
        totals = _checked_totals(aggregator.calculate(order.items, discount, vat_rate))

    _apply_totals(order, totals)
    db.commit()
    db.refresh(order)

    logger.info("Updated order %s, grand total %.2f", order.order_number, totals.grand_total)
    return order_to_dict(order)


@router.patch("/{order_id}/status")
def update_order_status(order_id: int, payload: schemas.OrderStatusUpdate, db: Session = Depends(get_db)):
    order = get_order_or_404(order_id, db)
    order.status = payload.status
    db.commit()
    db.refresh(order)
    return order_to_dict(order, include_items=False)


@router.delete("/{order_id}")
def delete_order(order_id: int, db: Session = Depends(get_db)):
    order = get_order_or_404(order_id, db)
    order_number = order.order_number
    db.delete(order)
    db.commit()
    logger.info("Deleted order %s", order_number)
    return {"deleted": True, "id": order_id}
