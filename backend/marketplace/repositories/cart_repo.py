from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from marketplace.models.cart import Cart
from marketplace.models.cart_item import CartItem
from marketplace.models.product import Product
from marketplace.services.errors import ConflictError


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_client(self, client_profile_id: int, for_update: bool = False) -> Optional[Cart]:
        qry = self.db.query(Cart).filter(Cart.client_profile_id == client_profile_id)
        if for_update:
            # lock only the cart row; items are loaded separately below
            qry = qry.with_for_update()
        return qry.first()

    def get_for_checkout(self, client_profile_id: int) -> Optional[Cart]:
        """Cart row locked, with items, their products and stores loaded."""
        cart = self.get_by_client(client_profile_id, for_update=True)
        if cart is None:
            return None
        self.db.query(CartItem).options(
            selectinload(CartItem.product).selectinload(Product.store)
        ).filter(CartItem.cart_id == cart.id).all()
        return cart

    def create_for_client(self, client_profile_id: int) -> Cart:
        c = Cart(
            client_profile_id=client_profile_id,
            subtotal_cents=0,
            delivery_fee_cents=0,
            total_cents=0,
        )
        self.db.add(c)
        try:
            self.db.flush()
        except IntegrityError:
            raise ConflictError(
                f"A cart already exists for client profile {client_profile_id}"
            )
        return c

    def find_item(self, cart: Cart, item_id: int) -> Optional[CartItem]:
        return next((it for it in cart.items if it.id == item_id), None)

    def find_item_for_product(self, cart: Cart, product_id: int) -> Optional[CartItem]:
        return next((it for it in cart.items if it.product_id == product_id), None)

    def add_item(self, cart: Cart, product: Product, quantity: int) -> CartItem:
        item = CartItem(
            product_id=product.id,
            quantity=quantity,
            unit_price_cents=product.price_cents,
            total_price_cents=product.price_cents * quantity,
        )
        cart.items.append(item)
        self.db.flush()
        return item

    def remove_item(self, cart: Cart, item: CartItem):
        # delete-orphan cascade removes the row on flush
        cart.items.remove(item)
        self.db.flush()

    def delete_all_items(self, cart: Cart) -> int:
        result = self.db.execute(
            delete(CartItem)
            .where(CartItem.cart_id == cart.id)
            .execution_options(synchronize_session="fetch")
        )
        self.db.expire(cart, ["items"])
        return result.rowcount or 0
