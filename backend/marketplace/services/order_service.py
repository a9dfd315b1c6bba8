import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from marketplace.config import settings
from marketplace.models.order import Order, OrderItem
from marketplace.models.order_event import OrderEvent
from marketplace.models.order_status import OrderStatus, can_transition
from marketplace.repositories.cart_repo import CartRepository
from marketplace.repositories.order_repo import OrderRepository
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.services.audit_service import log_order_event
from marketplace.services.cart_service import CartService
from marketplace.services.errors import InvalidRequestError, NotFoundError
from marketplace.utils.locks import cart_lock, order_lock
from marketplace.utils.transactions import smart_transaction

log = logging.getLogger("marketplace.orders")


def _status_value(status: Union[OrderStatus, str]) -> OrderStatus:
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(str(status).upper())
    except ValueError:
        raise InvalidRequestError(f"Unknown order status: {status}")


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.order_repo = OrderRepository(db)
        self.cart_repo = CartRepository(db)
        self.profiles = ProfileRepository(db)
        self.cart_service = CartService(db)

    def _client_profile(self, user_id: int):
        profile = self.profiles.get_client_profile(user_id)
        if not profile:
            raise NotFoundError(f"Client profile not found for user {user_id}")
        return profile

    def _get_order(self, order_id: int, for_update: bool = False) -> Order:
        order = self.order_repo.get(order_id, for_update=for_update)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def _check_owner(self, order: Order, user_id: Optional[int]):
        # a client may only act on its own orders; report others as missing
        if user_id is None:
            return
        profile = self._client_profile(user_id)
        if order.client_profile_id != profile.id:
            raise NotFoundError(f"Order {order.id} not found")

    def _transition(
        self,
        order: Order,
        new_status: OrderStatus,
        event_type: str,
        actor: Optional[str] = None,
    ) -> Order:
        current = order.status
        if not can_transition(current, new_status):
            raise InvalidRequestError(
                f"{current.value} → {new_status.value} not allowed"
            )
        order.status = new_status
        if new_status == OrderStatus.DELIVERED:
            order.delivery_datetime = datetime.now(timezone.utc)
        log_order_event(
            self.db,
            order.id,
            event_type,
            f"Status changed from {current.value} to {new_status.value}",
            from_status=current.value,
            to_status=new_status.value,
            created_by=actor,
        )
        self.db.flush()
        return order

    def create(
        self,
        user_id: int,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Checkout: turn the client's cart into a PENDING order.

        Runs under the cart lock in a single transaction covering the cart read,
        the order and item inserts and the cart clear. Validation (empty cart,
        single store, delivery address) happens before anything is written, and
        any failure leaves the cart untouched.
        """
        log.info("Creating order for user %s", user_id)
        with cart_lock(user_id):
            with smart_transaction(self.db):
                profile = self._client_profile(user_id)
                cart = self.cart_repo.get_for_checkout(profile.id)
                if cart is None:
                    raise NotFoundError(f"Cart not found for user {user_id}")
                items = list(cart.items)
                if not items:
                    raise InvalidRequestError("Cart is empty")

                store_id = items[0].product.store_id
                if any(it.product.store_id != store_id for it in items[1:]):
                    raise InvalidRequestError("All items must belong to the same store")

                address = self.profiles.get_address_for_client(profile.id)
                if not address:
                    raise NotFoundError(
                        f"Delivery address not found for user {user_id}"
                    )

                order = Order(
                    client_profile_id=profile.id,
                    store_id=store_id,
                    delivery_address_id=address.id,
                    subtotal_cents=cart.subtotal_cents,
                    delivery_fee_cents=cart.delivery_fee_cents,
                    total_cents=cart.total_cents,
                    status=OrderStatus.PENDING,
                    payment_method=payment_method or settings.DEFAULT_PAYMENT_METHOD,
                    payment_status="PENDING",
                    notes=notes,
                )
                for it in items:
                    order.items.append(
                        OrderItem(
                            product_id=it.product_id,
                            product_name=it.product.name,
                            product_description=it.product.description,
                            quantity=it.quantity,
                            unit_price_cents=it.unit_price_cents,
                            total_price_cents=it.total_price_cents,
                        )
                    )
                self.order_repo.add(order)

                self.cart_service.empty(cart)

                log_order_event(
                    self.db,
                    order.id,
                    "created",
                    f"Order placed with {len(items)} item(s)",
                    to_status=OrderStatus.PENDING.value,
                    created_by=f"user:{user_id}",
                    meta={
                        "store_id": store_id,
                        "total_cents": order.total_cents,
                        "payment_method": order.payment_method,
                    },
                )
                self.db.flush()
                order_id = order.id
        log.info("Order %s created for user %s", order_id, user_id)
        return self._get_order(order_id)

    def update_status(
        self,
        order_id: int,
        new_status: Union[OrderStatus, str],
        actor: Optional[str] = None,
    ) -> Order:
        new_status = _status_value(new_status)
        with order_lock(order_id):
            with smart_transaction(self.db):
                order = self._get_order(order_id, for_update=True)
                self._transition(order, new_status, "status_changed", actor=actor)
        log.info("Order %s status changed to %s", order_id, new_status.value)
        return order

    def cancel_order(self, order_id: int, user_id: Optional[int] = None) -> Order:
        """
        Cancel an order. Allowed from the same states as update_status(CANCELED):
        PENDING and CONFIRMED.
        """
        with order_lock(order_id):
            with smart_transaction(self.db):
                order = self._get_order(order_id, for_update=True)
                self._check_owner(order, user_id)
                actor = f"user:{user_id}" if user_id is not None else None
                self._transition(order, OrderStatus.CANCELED, "canceled", actor=actor)
        log.info("Order %s canceled", order_id)
        return order

    def remove(self, order_id: int, user_id: Optional[int] = None) -> None:
        """Hard delete; only a PENDING order can be removed."""
        with order_lock(order_id):
            with smart_transaction(self.db):
                order = self._get_order(order_id, for_update=True)
                self._check_owner(order, user_id)
                if order.status != OrderStatus.PENDING:
                    raise InvalidRequestError("Only PENDING orders can be removed")
                log_order_event(
                    self.db,
                    order.id,
                    "removed",
                    "Order removed",
                    from_status=order.status.value,
                    created_by=f"user:{user_id}" if user_id is not None else None,
                )
                self.order_repo.delete(order)
        log.info("Order %s removed", order_id)

    def update(
        self, order_id: int, notes: Optional[str], user_id: Optional[int] = None
    ) -> Order:
        """Edit the order notes. Items and totals are never touched."""
        with order_lock(order_id):
            with smart_transaction(self.db):
                order = self._get_order(order_id, for_update=True)
                self._check_owner(order, user_id)
                order.notes = notes
                log_order_event(
                    self.db,
                    order.id,
                    "updated",
                    "Order notes updated",
                    created_by=f"user:{user_id}" if user_id is not None else None,
                )
                self.db.flush()
        return order

    def find_by_id(self, order_id: int) -> Order:
        return self._get_order(order_id)

    def find_by_client(self, user_id: int) -> List[Order]:
        profile = self._client_profile(user_id)
        return self.order_repo.list_by_client(profile.id)

    def find_by_store(self, store_id: int) -> List[Order]:
        if not self.profiles.get_store(store_id):
            raise NotFoundError(f"Store {store_id} not found")
        return self.order_repo.list_by_store(store_id)

    def find_by_store_owner(self, user_id: int) -> List[Order]:
        store = self.profiles.get_store_for_owner(user_id)
        if not store:
            raise NotFoundError(f"Store not found for user {user_id}")
        return self.order_repo.list_by_store(store.id)

    def find_all(self, limit: int = 100) -> List[Order]:
        return self.order_repo.list_all(limit=limit)

    def history(self, order_id: int) -> List[OrderEvent]:
        events = self.order_repo.events_for(order_id)
        if not events and not self.order_repo.get(order_id):
            raise NotFoundError(f"Order {order_id} not found")
        return events
