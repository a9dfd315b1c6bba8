from typing import List, Optional

from sqlalchemy.orm import Session

from marketplace.models.order import Order
from marketplace.models.order_event import OrderEvent


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, order_id: int, for_update: bool = False) -> Optional[Order]:
        qry = self.db.query(Order).filter(Order.id == order_id)
        if for_update:
            qry = qry.with_for_update()
        return qry.first()

    def add(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        return order

    def delete(self, order: Order):
        self.db.delete(order)
        self.db.flush()

    def list_by_client(self, client_profile_id: int) -> List[Order]:
        return (
            self.db.query(Order)
            .filter(Order.client_profile_id == client_profile_id)
            .order_by(Order.order_datetime.desc(), Order.id.desc())
            .all()
        )

    def list_by_store(self, store_id: int) -> List[Order]:
        return (
            self.db.query(Order)
            .filter(Order.store_id == store_id)
            .order_by(Order.order_datetime.desc(), Order.id.desc())
            .all()
        )

    def list_all(self, limit: int = 100) -> List[Order]:
        return (
            self.db.query(Order)
            .order_by(Order.order_datetime.desc(), Order.id.desc())
            .limit(limit)
            .all()
        )

    def events_for(self, order_id: int) -> List[OrderEvent]:
        return (
            self.db.query(OrderEvent)
            .filter(OrderEvent.order_id == order_id)
            .order_by(OrderEvent.created_at, OrderEvent.id)
            .all()
        )
