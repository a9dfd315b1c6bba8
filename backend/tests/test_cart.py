import threading

import pytest

from marketplace.models.product import Product
from marketplace.services.cart_service import CartService
from marketplace.services.errors import InvalidRequestError, NotFoundError


def assert_consistent(cart):
    subtotal = sum(it.total_price_cents for it in cart.items)
    for it in cart.items:
        assert it.total_price_cents == it.quantity * it.unit_price_cents
    assert cart.subtotal_cents == subtotal
    expected_fee = 0 if subtotal == 0 or subtotal >= 5000 else 500
    assert cart.delivery_fee_cents == expected_fee
    assert cart.total_cents == cart.subtotal_cents + cart.delivery_fee_cents


def test_new_cart_is_empty(db, seed):
    cart = CartService(db).get_or_create_cart(seed.client_user_id)
    assert cart.items == []
    assert (cart.subtotal_cents, cart.delivery_fee_cents, cart.total_cents) == (0, 0, 0)

    # same cart on the next access
    again = CartService(db).get_cart(seed.client_user_id)
    assert again.id == cart.id


def test_cart_requires_client_profile(db, seed):
    with pytest.raises(NotFoundError):
        CartService(db).get_cart(seed.producer_a_user_id)


def test_add_first_item_below_free_delivery(db, seed):
    cart = CartService(db).add_item(seed.client_user_id, seed.tomatoes_id, 2)

    assert len(cart.items) == 1
    item = cart.items[0]
    assert item.product_id == seed.tomatoes_id
    assert item.quantity == 2
    assert item.unit_price_cents == 1000
    assert item.total_price_cents == 2000
    assert cart.subtotal_cents == 2000
    assert cart.delivery_fee_cents == 500
    assert cart.total_cents == 2500


def test_crossing_threshold_makes_delivery_free(db, seed):
    svc = CartService(db)
    svc.add_item(seed.client_user_id, seed.tomatoes_id, 2)
    cart = svc.add_item(seed.client_user_id, seed.honey_id, 4)

    assert cart.subtotal_cents == 6000
    assert cart.delivery_fee_cents == 0
    assert cart.total_cents == 6000
    assert_consistent(cart)


def test_repeated_add_increments_single_line(db, seed):
    svc = CartService(db)
    svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)
    cart = svc.add_item(seed.client_user_id, seed.tomatoes_id, 3)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 4
    assert cart.items[0].total_price_cents == 4000
    assert_consistent(cart)


@pytest.mark.parametrize("qty", [0, -1])
def test_add_rejects_non_positive_quantity(db, seed, qty):
    svc = CartService(db)
    with pytest.raises(InvalidRequestError):
        svc.add_item(seed.client_user_id, seed.tomatoes_id, qty)
    assert svc.get_cart(seed.client_user_id).items == []


def test_add_unknown_or_inactive_product(db, seed):
    svc = CartService(db)
    with pytest.raises(NotFoundError):
        svc.add_item(seed.client_user_id, 9999, 1)
    with pytest.raises(NotFoundError):
        svc.add_item(seed.client_user_id, seed.retired_id, 1)


def test_unit_price_is_kept_when_catalog_price_changes(db, seed):
    svc = CartService(db)
    svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)

    product = db.get(Product, seed.tomatoes_id)
    product.price_cents = 9999
    db.commit()

    cart = svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)
    assert cart.items[0].unit_price_cents == 1000
    assert cart.items[0].total_price_cents == 2000
    assert_consistent(cart)


def test_update_item_sets_quantity(db, seed):
    svc = CartService(db)
    cart = svc.add_item(seed.client_user_id, seed.cheese_id, 2)
    item_id = cart.items[0].id

    cart = svc.update_item(seed.client_user_id, item_id, 8)
    assert cart.items[0].quantity == 8
    assert cart.subtotal_cents == 6000
    assert cart.delivery_fee_cents == 0
    assert_consistent(cart)


def test_update_to_same_quantity_leaves_totals(db, seed):
    svc = CartService(db)
    svc.add_item(seed.client_user_id, seed.tomatoes_id, 2)
    cart = svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)
    before = (cart.subtotal_cents, cart.delivery_fee_cents, cart.total_cents)
    item_id = cart.items[0].id

    cart = svc.update_item(seed.client_user_id, item_id, 3)
    assert (cart.subtotal_cents, cart.delivery_fee_cents, cart.total_cents) == before


def test_update_rejects_bad_quantity_and_foreign_item(db, seed):
    svc = CartService(db)
    cart = svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)
    item_id = cart.items[0].id

    with pytest.raises(InvalidRequestError):
        svc.update_item(seed.client_user_id, item_id, 0)
    # another client cannot reach this item
    with pytest.raises(NotFoundError):
        svc.update_item(seed.homeless_user_id, item_id, 2)
    with pytest.raises(NotFoundError):
        svc.update_item(seed.client_user_id, 9999, 2)


def test_remove_last_item_zeroes_totals(db, seed):
    svc = CartService(db)
    cart = svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)
    item_id = cart.items[0].id

    cart = svc.remove_item(seed.client_user_id, item_id)
    assert cart.items == []
    assert (cart.subtotal_cents, cart.delivery_fee_cents, cart.total_cents) == (0, 0, 0)

    with pytest.raises(NotFoundError):
        svc.remove_item(seed.client_user_id, item_id)


def test_remove_one_of_two_items(db, seed):
    svc = CartService(db)
    svc.add_item(seed.client_user_id, seed.tomatoes_id, 3)
    cart = svc.add_item(seed.client_user_id, seed.honey_id, 3)
    assert cart.delivery_fee_cents == 0

    honey_line = next(it for it in cart.items if it.product_id == seed.honey_id)
    cart = svc.remove_item(seed.client_user_id, honey_line.id)
    assert [it.product_id for it in cart.items] == [seed.tomatoes_id]
    assert cart.subtotal_cents == 3000
    assert cart.delivery_fee_cents == 500
    assert_consistent(cart)


def test_clear_is_idempotent(db, seed):
    svc = CartService(db)
    svc.add_item(seed.client_user_id, seed.tomatoes_id, 2)
    svc.add_item(seed.client_user_id, seed.honey_id, 1)

    first = svc.clear(seed.client_user_id)
    assert first.items == []
    assert (first.subtotal_cents, first.delivery_fee_cents, first.total_cents) == (0, 0, 0)

    second = svc.clear(seed.client_user_id)
    assert second.id == first.id
    assert second.items == []
    assert (second.subtotal_cents, second.delivery_fee_cents, second.total_cents) == (0, 0, 0)


def test_concurrent_adds_are_serialized(session_factory, seed):
    workers = 6
    errors = []

    def add_one():
        s = session_factory()
        try:
            CartService(s).add_item(seed.client_user_id, seed.cheese_id, 1)
        except Exception as e:  # surfaced through the assertion below
            errors.append(e)
        finally:
            s.close()

    threads = [threading.Thread(target=add_one) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    s = session_factory()
    try:
        cart = CartService(s).get_cart(seed.client_user_id)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == workers
        assert cart.subtotal_cents == 750 * workers
        assert_consistent(cart)
    finally:
        s.close()


def test_add_rejects_fractional_quantity(db, seed):
    svc = CartService(db)
    with pytest.raises(InvalidRequestError):
        svc.add_item(seed.client_user_id, seed.tomatoes_id, 1.5)

    cart = svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)
    with pytest.raises(InvalidRequestError):
        svc.update_item(seed.client_user_id, cart.items[0].id, 2.5)
    assert svc.get_cart(seed.client_user_id).items[0].quantity == 1


def test_cart_changes_are_committed(session_factory, seed):
    s = session_factory()
    try:
        svc = CartService(s)
        cart = svc.add_item(seed.client_user_id, seed.tomatoes_id, 1)
        # reading opens a transaction on the session before the next call
        assert cart.total_cents == 1500
        svc.add_item(seed.client_user_id, seed.honey_id, 2)
    finally:
        s.close()

    s = session_factory()
    try:
        cart = CartService(s).get_cart(seed.client_user_id)
        lines = {it.product_id: it.quantity for it in cart.items}
        assert lines == {seed.tomatoes_id: 1, seed.honey_id: 2}
        assert (cart.subtotal_cents, cart.delivery_fee_cents, cart.total_cents) == (3000, 500, 3500)
    finally:
        s.close()


def test_cleared_cart_is_committed(session_factory, seed):
    s = session_factory()
    try:
        svc = CartService(s)
        cart = svc.add_item(seed.client_user_id, seed.cheese_id, 2)
        assert len(cart.items) == 1
        svc.clear(seed.client_user_id)
    finally:
        s.close()

    s = session_factory()
    try:
        cart = CartService(s).get_cart(seed.client_user_id)
        assert cart.items == []
        assert (cart.subtotal_cents, cart.delivery_fee_cents, cart.total_cents) == (0, 0, 0)
    finally:
        s.close()
