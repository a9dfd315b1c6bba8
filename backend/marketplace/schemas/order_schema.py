from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from marketplace.models.order_status import OrderStatus


class CreateOrderIn(BaseModel):
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class UpdateOrderIn(BaseModel):
    notes: Optional[str] = None


class UpdateOrderStatusIn(BaseModel):
    status: OrderStatus


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_id: Optional[int] = None
    product_name: str
    product_description: Optional[str] = None
    quantity: int
    unit_price_cents: int
    total_price_cents: int


class AddressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    street: str
    number: str
    complement: Optional[str] = None
    city: str
    state: str
    postal_code: str


class StoreOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    description: Optional[str] = None


class ClientProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    status: OrderStatus
    subtotal_cents: int
    delivery_fee_cents: int
    total_cents: int
    order_datetime: datetime
    delivery_datetime: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_status: str
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None
    items: List[OrderItemOut] = []
    delivery_address: Optional[AddressOut] = None
    store: Optional[StoreOut] = None
    client_profile: Optional[ClientProfileOut] = None


class OrderEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    order_id: int
    event_type: str
    from_status: Optional[str] = None
    to_status: Optional[str] = None
    label: str
    meta: Optional[Dict[str, Any]] = None
    created_by: str
    created_at: datetime
