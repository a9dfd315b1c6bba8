from typing import Dict, Iterable, Optional

from marketplace.config import settings


def delivery_fee_for(
    subtotal_cents: int,
    threshold_cents: Optional[int] = None,
    fee_cents: Optional[int] = None,
) -> int:
    """
    Flat-rate delivery with a free-shipping threshold.
    An empty basket (subtotal 0) pays nothing.
    """
    threshold_cents = (
        settings.FREE_DELIVERY_THRESHOLD_CENTS if threshold_cents is None else threshold_cents
    )
    fee_cents = settings.DELIVERY_FEE_CENTS if fee_cents is None else fee_cents
    if subtotal_cents <= 0 or subtotal_cents >= threshold_cents:
        return 0
    return fee_cents


def calculate_totals(line_totals_cents: Iterable[int]) -> Dict[str, int]:
    """
    Totals of a basket from its line totals:
    subtotal = sum of lines, delivery fee per delivery_fee_for, total = subtotal + fee.
    """
    subtotal = sum(int(t or 0) for t in line_totals_cents)
    fee = delivery_fee_for(subtotal)
    return {
        "subtotal_cents": subtotal,
        "delivery_fee_cents": fee,
        "total_cents": subtotal + fee,
    }
