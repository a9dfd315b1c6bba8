import pytest

from marketplace.services.pricing import calculate_totals, delivery_fee_for


@pytest.mark.parametrize(
    "subtotal,fee",
    [(0, 0), (1, 500), (2000, 500), (4999, 500), (5000, 0), (6000, 0)],
)
def test_delivery_fee_threshold(subtotal, fee):
    assert delivery_fee_for(subtotal) == fee


def test_delivery_fee_overrides():
    assert delivery_fee_for(900, threshold_cents=1000, fee_cents=250) == 250
    assert delivery_fee_for(1000, threshold_cents=1000, fee_cents=250) == 0


def test_calculate_totals():
    assert calculate_totals([2000]) == {
        "subtotal_cents": 2000,
        "delivery_fee_cents": 500,
        "total_cents": 2500,
    }
    assert calculate_totals([2000, 4000]) == {
        "subtotal_cents": 6000,
        "delivery_fee_cents": 0,
        "total_cents": 6000,
    }
    assert calculate_totals([]) == {
        "subtotal_cents": 0,
        "delivery_fee_cents": 0,
        "total_cents": 0,
    }
