import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    """Customer model. One customer row per vehicle."""

    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    customer_name = Column(String(255), nullable=False)
    mobile = Column(String(50))
    company_name = Column(String(255))
    email = Column(String(255), index=True)
    abn = Column(String(50))

    # Vehicle
    rego = Column(String(20), nullable=False, unique=True, index=True)
    vehicle_make = Column(String(100))
    vehicle_model = Column(String(100))
    vehicle_month = Column(String(20))
    vehicle_year = Column(Integer)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Customer {self.customer_name} ({self.rego})>"
