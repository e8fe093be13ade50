from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..database import get_db

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _revenue(db: Session, since: date = None) -> float:
    """Sum of grand totals, cancelled orders excluded."""
    query = db.query(func.coalesce(func.sum(models.Order.grand_total), 0.0)).filter(
        models.Order.status != models.OrderStatus.CANCELLED
    )
    if since:
        query = query.filter(models.Order.order_date >= since)
    return float(query.scalar() or 0.0)


@router.get("/stats")
def dashboard_stats(db: Session = Depends(get_db)):
    orders = db.query(models.Order)
    return {
        "total_orders": orders.count(),
        "pending_orders": orders.filter(models.Order.status == models.OrderStatus.PENDING).count(),
        "completed_orders": orders.filter(models.Order.status == models.OrderStatus.COMPLETED).count(),
        "total_revenue": _revenue(db),
        "monthly_revenue": _revenue(db, since=date.today().replace(day=1)),
        "total_customers": db.query(models.Customer).count(),
    }
