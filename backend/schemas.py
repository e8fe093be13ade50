from pydantic import BaseModel, field_validator
from typing import Any, Optional, List
from datetime import date, datetime
from .measurement import LineItem, LineItemInput, parse_price
from .models import OrderStatus


class CustomerBase(BaseModel):
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    tax_office: Optional[str] = None
    tax_number: Optional[str] = None
    notes: Optional[str] = None

class CustomerCreate(CustomerBase):
    pass

class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    tax_office: Optional[str] = None
    tax_number: Optional[str] = None
    notes: Optional[str] = None

class Customer(CustomerBase):
    id: int
    created_at: datetime
    class Config:
        from_attributes = True

class StoneTypeCreate(BaseModel):
    name: str

class StoneType(StoneTypeCreate):
    id: int
    is_active: bool
    class Config:
        from_attributes = True

class StoneFeatureCreate(BaseModel):
    name: str
    default_price: Optional[float] = None

class StoneFeature(StoneFeatureCreate):
    id: int
    is_active: bool
    class Config:
        from_attributes = True


# --- Orders ---

class _OrderMoneyFields(BaseModel):
    discount_rate: Optional[float] = None
    discount_amount: float = 0.0
    vat_rate: Optional[float] = None  # None → default rate, 0 is honored

    @field_validator("discount_amount", mode="before")
    @classmethod
    def _coerce_discount(cls, value):
        return parse_price(value)

class OrderCreate(_OrderMoneyFields):
    customer_id: int
    order_date: Optional[date] = None
    status: OrderStatus = OrderStatus.PENDING
    notes: Optional[str] = None
    items: List[LineItemInput] = []

class OrderUpdate(BaseModel):
    customer_id: Optional[int] = None
    order_date: Optional[date] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None
    discount_rate: Optional[float] = None
    discount_amount: Optional[float] = None
    vat_rate: Optional[float] = None
    items: Optional[List[LineItemInput]] = None  # None → keep stored items

    @field_validator("discount_amount", mode="before")
    @classmethod
    def _coerce_discount(cls, value):
        return None if value is None else parse_price(value)

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class OrderPreviewRequest(_OrderMoneyFields):
    items: List[LineItemInput] = []

class ItemChangeRequest(BaseModel):
    item: LineItem
    field: str
    value: Any = None

class OrderTotalsOut(BaseModel):
    subtotal: float
    discount_amount: float
    total: float
    vat_rate: float
    vat_amount: float
    grand_total: float
    net_total_negative: bool = False

class OrderPreview(BaseModel):
    items: List[LineItem]
    totals: OrderTotalsOut
