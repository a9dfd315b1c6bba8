from typing import List

from pydantic import BaseModel, ConfigDict, Field


class AddItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class UpdateItemIn(BaseModel):
    quantity: int = Field(..., ge=1)


class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_id: int
    quantity: int
    unit_price_cents: int
    total_price_cents: int


class CartOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    items: List[CartItemOut] = []
    subtotal_cents: int
    delivery_fee_cents: int
    total_cents: int
