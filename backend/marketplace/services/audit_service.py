import logging
from typing import Optional

from sqlalchemy.orm import Session

from marketplace.models.order_event import OrderEvent

log = logging.getLogger("marketplace.audit")


def log_order_event(
    session: Session,
    order_id: int,
    event_type: str,
    label: str,
    from_status: Optional[str] = None,
    to_status: Optional[str] = None,
    created_by: Optional[str] = None,
    meta: Optional[dict] = None,
) -> OrderEvent:
    """
    Append an entry to the order timeline and mirror it to the audit logger.
    Runs inside the caller's transaction, so it is rolled back with the change it describes.
    """
    event = OrderEvent(
        order_id=order_id,
        event_type=event_type,
        label=label,
        from_status=from_status,
        to_status=to_status,
        meta=meta,
        created_by=created_by or "system",
    )
    session.add(event)
    log.info(
        "order=%s event=%s from=%s to=%s by=%s %s",
        order_id,
        event_type,
        from_status,
        to_status,
        event.created_by,
        label,
    )
    return event
