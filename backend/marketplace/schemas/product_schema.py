from typing import List, Optional
from pydantic import BaseModel
from pydantic import ConfigDict

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    store_id: int
    name: str
    description: Optional[str] = None
    price_cents: int
    image: Optional[str] = None
    category: Optional[str] = None
    active: bool


class ProductPage(BaseModel):
    items: List[ProductOut]
    total: int
