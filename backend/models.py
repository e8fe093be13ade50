from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, ForeignKey, Enum, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, date
from .database import Base
import enum


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String)
    email = Column(String)
    address = Column(Text)
    tax_office = Column(String)
    tax_number = Column(String)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    orders = relationship("Order", back_populates="customer")


class StoneType(Base):
    """Catalog: marble, granite, travertine..."""
    __tablename__ = "stone_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class StoneFeature(Base):
    """Catalog: finish / cut / edge profile, optionally with a default unit price."""
    __tablename__ = "stone_features"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    default_price = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    order_date = Column(Date, default=date.today)
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING)
    notes = Column(Text)

    # Discount amount is authoritative; the rate is kept for display only
    discount_rate = Column(Float, nullable=True)
    discount_amount = Column(Float, default=0.0)
    vat_rate = Column(Float, default=20.0)

    # Totals, always written together by OrderAggregator
    subtotal = Column(Float, default=0.0)
    total = Column(Float, default=0.0)
    vat_amount = Column(Float, default=0.0)
    grand_total = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    customer = relationship("Customer", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    position = Column(Integer, default=0)  # entry order, 0-based

    stone_type_id = Column(Integer, ForeignKey("stone_types.id"), nullable=True)
    stone_type_name = Column(String, nullable=True)  # free text when not in catalog
    stone_feature_id = Column(Integer, ForeignKey("stone_features.id"), nullable=True)
    stone_feature_name = Column(String, nullable=True)

    # Dimensions (cm)
    thickness = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    length = Column(Float, nullable=True)

    quantity = Column(Integer, default=1)
    measure_type = Column(String, default="none")
    square_meter = Column(Float, nullable=True)
    linear_meter = Column(Float, nullable=True)
    unit_price = Column(Float, default=0.0)
    total_price = Column(Float, default=0.0)
    notes = Column(Text)

    order = relationship("Order", back_populates="items")
    stone_type = relationship("StoneType")
    stone_feature = relationship("StoneFeature")
