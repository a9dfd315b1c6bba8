from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String

from marketplace.db import Base


class OrderEvent(Base):
    """Append-only order timeline. order_id is not a foreign key so entries outlive a removed order."""

    __tablename__ = "order_events"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, nullable=False, index=True)
    event_type = Column(
        String(32), nullable=False, index=True
    )  # created, status_changed, canceled, removed, updated
    from_status = Column(String(32), nullable=True)
    to_status = Column(String(32), nullable=True)
    label = Column(String(255), nullable=False)
    meta = Column(JSON, nullable=True)
    created_by = Column(String(64), nullable=False, default="system")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
