import enum
from typing import Dict, FrozenSet


class OrderStatus(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PREPARATION = "IN_PREPARATION"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


# next states reachable from each status; the single source of truth for
# update_status and cancel_order
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELED}),
    OrderStatus.CONFIRMED: frozenset(
        {OrderStatus.IN_PREPARATION, OrderStatus.CANCELED}
    ),
    OrderStatus.IN_PREPARATION: frozenset({OrderStatus.READY_FOR_PICKUP}),
    OrderStatus.READY_FOR_PICKUP: frozenset({OrderStatus.IN_TRANSIT}),
    OrderStatus.IN_TRANSIT: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, nxt in ALLOWED_TRANSITIONS.items() if not nxt)


def allowed_next(status: OrderStatus) -> FrozenSet[OrderStatus]:
    return ALLOWED_TRANSITIONS.get(status, frozenset())


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in allowed_next(current)


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES
