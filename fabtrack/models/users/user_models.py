from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from fabtrack.core.db import Base
from fabtrack.models.base.mixins import TimestampMixin


class AdminCredential(Base, TimestampMixin):
    """The single administrator login. Clients have no stored credential."""

    __tablename__ = "admin_credentials"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)

    def __repr__(self):
        return f"<AdminCredential id={self.id} email={self.email}>"


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_seen_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<UserSession id={self.id[:8]} email={self.email} role={self.role}>"
