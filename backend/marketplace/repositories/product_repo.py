from typing import List, Optional, Tuple

from marketplace.models.product import Product
from sqlalchemy import func
from sqlalchemy.orm import Session


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: int, active_only: bool = True) -> Optional[Product]:
        qry = self.db.query(Product).filter(Product.id == product_id)
        if active_only:
            qry = qry.filter(Product.active == True)  # noqa: E712
        return qry.first()

    def list(
        self,
        q: Optional[str] = None,
        store_id: Optional[int] = None,
        page: int = 1,
        size: int = 20,
    ) -> Tuple[List[Product], int]:
        query = self.db.query(Product).filter(Product.active == True)  # noqa: E712
        if store_id is not None:
            query = query.filter(Product.store_id == store_id)
        if q:
            like = f"%{q}%"
            query = query.filter(
                (Product.name.ilike(like)) | (Product.description.ilike(like))
            )
        total = query.with_entities(func.count()).scalar() or 0
        items = query.order_by(Product.name).offset((page - 1) * size).limit(size).all()
        return items, total

    def create(
        self,
        store_id: int,
        name: str,
        price_cents: int,
        description: str = None,
        image: str = None,
        category: str = None,
    ) -> Product:
        p = Product(
            store_id=store_id,
            name=name,
            price_cents=price_cents,
            description=description,
            image=image,
            category=category,
        )
        self.db.add(p)
        self.db.flush()
        return p
