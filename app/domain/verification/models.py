from sqlalchemy import Boolean, Column, DateTime, String

from app.core.clock import utcnow
from app.core.database import Base


class VerificationCode(Base):
    """Outstanding one-time code for an email; at most one row per email."""

    __tablename__ = "verification_codes"

    email = Column(String, primary_key=True)
    code_hash = Column(String, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


__all__ = ["VerificationCode"]
