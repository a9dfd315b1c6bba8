import logging

from sqlalchemy.orm import Session

from marketplace.models.cart import Cart
from marketplace.repositories.cart_repo import CartRepository
from marketplace.repositories.product_repo import ProductRepository
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.services.errors import InvalidRequestError, NotFoundError
from marketplace.services.pricing import calculate_totals
from marketplace.utils.locks import cart_lock
from marketplace.utils.transactions import smart_transaction

log = logging.getLogger("marketplace.cart")


class CartService:
    """
    One basket per client profile. Every mutation runs under the client's cart
    lock and inside one transaction that also rewrites the derived totals, so
    items and totals are never observed out of step.
    """

    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.product_repo = ProductRepository(db)
        self.profiles = ProfileRepository(db)

    def _client_profile_id(self, user_id: int) -> int:
        profile = self.profiles.get_client_profile(user_id)
        if not profile:
            raise NotFoundError(f"Client profile not found for user {user_id}")
        return profile.id

    def _load_cart(self, user_id: int) -> Cart:
        client_profile_id = self._client_profile_id(user_id)
        cart = self.cart_repo.get_by_client(client_profile_id, for_update=True)
        if cart is None:
            cart = self.cart_repo.create_for_client(client_profile_id)
            log.info("Created cart %s for client profile %s", cart.id, client_profile_id)
        return cart

    @staticmethod
    def _check_quantity(quantity: int):
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidRequestError("Quantity must be a whole number")
        if quantity < 1:
            raise InvalidRequestError("Quantity must be at least 1")

    def get_or_create_cart(self, user_id: int) -> Cart:
        with cart_lock(user_id):
            with smart_transaction(self.db):
                cart = self._load_cart(user_id)
        return cart

    def get_cart(self, user_id: int) -> Cart:
        return self.get_or_create_cart(user_id)

    def add_item(self, user_id: int, product_id: int, quantity: int) -> Cart:
        self._check_quantity(quantity)
        with cart_lock(user_id):
            with smart_transaction(self.db):
                product = self.product_repo.get(product_id)
                if not product:
                    raise NotFoundError(f"Product with id {product_id} not found")
                cart = self._load_cart(user_id)
                item = self.cart_repo.find_item_for_product(cart, product_id)
                if item:
                    item.quantity += quantity
                    item.total_price_cents = item.quantity * item.unit_price_cents
                else:
                    self.cart_repo.add_item(cart, product, quantity)
                self.recalculate(cart)
                log.debug(
                    "user=%s added product=%s qty=%s total=%s",
                    user_id,
                    product_id,
                    quantity,
                    cart.total_cents,
                )
        return cart

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Cart:
        self._check_quantity(quantity)
        with cart_lock(user_id):
            with smart_transaction(self.db):
                cart = self._load_cart(user_id)
                item = self.cart_repo.find_item(cart, item_id)
                if not item:
                    raise NotFoundError(f"Cart item with id {item_id} not found")
                item.quantity = quantity
                item.total_price_cents = quantity * item.unit_price_cents
                self.recalculate(cart)
        log.debug("user=%s set item=%s qty=%s", user_id, item_id, quantity)
        return cart

    def remove_item(self, user_id: int, item_id: int) -> Cart:
        with cart_lock(user_id):
            with smart_transaction(self.db):
                cart = self._load_cart(user_id)
                item = self.cart_repo.find_item(cart, item_id)
                if not item:
                    raise NotFoundError(f"Cart item with id {item_id} not found")
                self.cart_repo.remove_item(cart, item)
                self.recalculate(cart)
        log.debug("user=%s removed item=%s", user_id, item_id)
        return cart

    def clear(self, user_id: int) -> Cart:
        with cart_lock(user_id):
            with smart_transaction(self.db):
                cart = self._load_cart(user_id)
                self.empty(cart)
        return cart

    def empty(self, cart: Cart) -> Cart:
        """
        Delete every item in one statement and zero the totals.
        Caller must already hold the cart lock and an open transaction
        (checkout uses this directly).
        """
        removed = self.cart_repo.delete_all_items(cart)
        cart.subtotal_cents = 0
        cart.delivery_fee_cents = 0
        cart.total_cents = 0
        self.db.flush()
        log.debug("cart=%s cleared (%s items)", cart.id, removed)
        return cart

    def recalculate(self, cart: Cart) -> Cart:
        totals = calculate_totals(it.total_price_cents for it in cart.items)
        cart.subtotal_cents = totals["subtotal_cents"]
        cart.delivery_fee_cents = totals["delivery_fee_cents"]
        cart.total_cents = totals["total_cents"]
        self.db.flush()
        return cart
