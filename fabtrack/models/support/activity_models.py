from sqlalchemy import Column, Integer, String, Boolean, Index
from fabtrack.core.db import Base
from fabtrack.models.base.mixins import TimestampMixin


class OrderActivity(Base, TimestampMixin):
    """Immutable audit log. APPEND-ONLY. Never updated, never deleted."""

    __tablename__ = "order_activity"

    id = Column(Integer, primary_key=True)
    actor_email = Column(String(255), nullable=False, index=True)
    actor_role = Column(String(20), nullable=False)
    order_id = Column(String(32), nullable=True, index=True)
    code = Column(String(50), nullable=False)
    message = Column(String, nullable=False)
    is_override = Column(Boolean, default=False, nullable=False)

    __table_args__ = (Index("ix_order_activity_order_created", "order_id", "created_at"),)

    def __repr__(self):
        return f"<OrderActivity id={self.id} actor={self.actor_email} code={self.code}>"
