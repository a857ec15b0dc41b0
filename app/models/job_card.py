import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, Float, JSON, Numeric

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobCard(Base):
    """Job card model.

    Customer and vehicle fields are a snapshot taken when the card is
    created; there is no foreign key back to ``customers``.
    """

    __tablename__ = "job_cards"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    job_number = Column(String(32), nullable=False, unique=True, index=True)

    # Customer snapshot
    customer_name = Column(String(255))
    company_name = Column(String(255))
    abn = Column(String(50))
    mobile = Column(String(50))
    email = Column(String(255))

    # Vehicle snapshot
    vehicle_make = Column(String(100))
    vehicle_model = Column(String(100))
    vehicle_month = Column(String(20))
    vehicle_year = Column(Integer)
    vehicle_kms = Column(Integer)
    fuel_type = Column(String(20))
    vin = Column(String(50))
    rego = Column(String(20), index=True)
    vehicle_state = Column(String(10))
    tyre_size = Column(String(50))
    next_service_kms = Column(Integer)
    vehicle_type = Column(JSON)  # list of vehicle type tags
    service_selection = Column(String(20))

    # Scheduling
    job_start_date = Column(DateTime(timezone=True))
    expected_completion_date = Column(Date)
    completed_date = Column(Date)

    # Assignment
    assigned_worker = Column(String(50), index=True)
    assigned_parts = Column(String(50), index=True)
    is_worker_assigned_complete = Column(Boolean, default=False, nullable=False)
    is_parts_assigned_complete = Column(Boolean, default=False, nullable=False)

    # Lifecycle
    is_archived = Column(Boolean, default=False, nullable=False, index=True)
    payment_status = Column(String(10), default="unpaid", nullable=False)

    # Customer declaration
    customer_declaration_authorized = Column(Boolean, default=False)
    customer_signature = Column(Text)

    # Checklists and line items (stored as JSON)
    service_progress = Column(JSON)
    trailer_progress = Column(JSON)
    other_progress = Column(JSON)
    parts_and_consumables = Column(JSON)
    lubricants_used = Column(JSON)

    # Mechanic
    handover_valuables_to_customer = Column(Text)
    check_all_tyres = Column(Text)
    total_hours = Column(Float)
    future_work_notes = Column(Text)

    # Financial
    total_a = Column(Numeric(12, 2))
    grand_total = Column(Numeric(12, 2))
    approximate_cost = Column(Numeric(12, 2))
    invoice_number = Column(String(50))
    invoice_date = Column(Date)
    invoice_value = Column(Numeric(12, 2))
    part_location = Column(Text)
    issue_counter_sale = Column(Text)

    # Images and signatures are opaque text (data URLs)
    image_front = Column(Text)
    image_back = Column(Text)
    image_right_side = Column(Text)
    image_left_side = Column(Text)
    supervisor_signature = Column(Text)

    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<JobCard {self.job_number}>"
