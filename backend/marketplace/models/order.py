from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from marketplace.db import Base
from marketplace.models.order_status import OrderStatus


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, autoincrement=True)
    client_profile_id = Column(
        Integer, ForeignKey("client_profiles.id"), nullable=False, index=True
    )
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    delivery_address_id = Column(Integer, ForeignKey("addresses.id"), nullable=False)

    # copied from the cart at checkout, never recomputed
    subtotal_cents = Column(Integer, nullable=False, default=0)
    delivery_fee_cents = Column(Integer, nullable=False, default=0)
    total_cents = Column(Integer, nullable=False, default=0)

    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    order_datetime = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    delivery_datetime = Column(DateTime, nullable=True)

    payment_method = Column(String(64), nullable=True)
    payment_status = Column(String(32), nullable=False, default="PENDING")
    payment_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    client_profile = relationship("ClientProfile")
    store = relationship("Store")
    delivery_address = relationship("Address")


class OrderItem(Base):
    """Line snapshot taken at checkout; independent of later catalog changes."""

    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(Integer, nullable=True)  # informational, not a live join
    product_name = Column(String(256), nullable=False)
    product_description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(Integer, nullable=False)
    total_price_cents = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")
