from sqlalchemy import JSON, Column, DateTime, Integer, String

from app.core.clock import utcnow
from app.core.database import Base


class Parent(Base):
    """Registered parent; the identity a verification code authenticates."""

    __tablename__ = "parents"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)  # stored normalized
    phone = Column(String, nullable=True)
    children = Column(JSON, nullable=False, default=list)
    children_details = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Parent id={self.id}>"


__all__ = ["Parent"]
