from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from app.config import settings
from app.data.task_lists import (
    SERVICE_TASKS,
    VEHICLE_TYPES,
    FUEL_TYPES,
    VEHICLE_STATES,
    WORKERS,
    PARTS_HANDLERS,
)
from app.schemas.checklist import ServiceTask, TrailerProgress, OtherProgress, ChecklistSummary
from app.schemas.line_items import PartsAndConsumables, LubricantsUsed
from app.schemas.types import UUIDStr, OptionalText, Money, MAX_AMOUNT
from app.services.checklists import summarize


class PaymentStatus(str, Enum):
    paid = "paid"
    unpaid = "unpaid"


def _one_of(value, allowed, label: str):
    if value is not None and value not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return value


def _digits(value, width: int, label: str) -> str:
    text = str(value).strip()
    if not text.isdigit() or len(text) > width:
        raise ValueError(f"{label} must be a number with at most {width} digits")
    return text.zfill(width)


class JobCardFields(BaseModel):
    """Editable job card fields. Everything is optional."""

    model_config = ConfigDict(use_enum_values=True)

    # Customer snapshot
    customer_name: OptionalText = Field(None, max_length=255)
    company_name: OptionalText = Field(None, max_length=255)
    abn: OptionalText = Field(None, max_length=50)
    mobile: OptionalText = Field(None, max_length=50)
    email: OptionalText = Field(None, max_length=255)

    # Vehicle
    vehicle_make: OptionalText = Field(None, max_length=100)
    vehicle_model: OptionalText = Field(None, max_length=100)
    vehicle_month: OptionalText = Field(None, max_length=20)
    vehicle_year: Optional[int] = Field(None, ge=1900, le=2100)
    vehicle_kms: Optional[int] = Field(None, ge=0)
    fuel_type: OptionalText = None
    vin: OptionalText = Field(None, max_length=50)
    rego: OptionalText = Field(None, max_length=20)
    vehicle_state: OptionalText = None
    tyre_size: OptionalText = Field(None, max_length=50)
    next_service_kms: Optional[int] = Field(None, ge=0)
    vehicle_type: Optional[list[str]] = None
    service_selection: OptionalText = None

    # Scheduling
    job_start_date: Optional[datetime] = None
    expected_completion_date: Optional[date] = None
    completed_date: Optional[date] = None

    # Assignment
    assigned_worker: OptionalText = None
    assigned_parts: OptionalText = None

    # Declaration
    customer_declaration_authorized: Optional[bool] = None
    customer_signature: OptionalText = None

    # Checklists and line items
    service_progress: Optional[list[ServiceTask]] = None
    trailer_progress: Optional[TrailerProgress] = None
    other_progress: Optional[OtherProgress] = None
    parts_and_consumables: Optional[PartsAndConsumables] = None
    lubricants_used: Optional[LubricantsUsed] = None

    # Mechanic
    handover_valuables_to_customer: OptionalText = None
    check_all_tyres: OptionalText = None
    total_a: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    total_hours: Optional[float] = Field(None, ge=0)
    future_work_notes: OptionalText = None

    # Payments
    invoice_number: OptionalText = Field(None, max_length=50)
    invoice_date: Optional[date] = None
    invoice_value: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    part_location: OptionalText = None
    issue_counter_sale: OptionalText = None
    payment_status: Optional[PaymentStatus] = None

    # Images and signatures
    image_front: OptionalText = None
    image_back: OptionalText = None
    image_right_side: OptionalText = None
    image_left_side: OptionalText = None
    supervisor_signature: OptionalText = None

    @field_validator(
        "vehicle_year", "vehicle_kms", "next_service_kms", "job_start_date",
        "expected_completion_date", "completed_date", "total_a", "total_hours",
        "invoice_date", "invoice_value",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("vehicle_type")
    @classmethod
    def validate_vehicle_type(cls, v):
        if not v:
            return None
        seen = []
        for tag in v:
            _one_of(tag, VEHICLE_TYPES, "Vehicle type")
            if tag not in seen:
                seen.append(tag)
        return seen

    @field_validator("service_selection")
    @classmethod
    def validate_service_selection(cls, v):
        return _one_of(v, list(SERVICE_TASKS), "Service selection")

    @field_validator("fuel_type")
    @classmethod
    def validate_fuel_type(cls, v):
        return _one_of(v, FUEL_TYPES, "Fuel type")

    @field_validator("vehicle_state")
    @classmethod
    def validate_vehicle_state(cls, v):
        return _one_of(v, VEHICLE_STATES, "Vehicle state")

    @field_validator("assigned_worker")
    @classmethod
    def validate_worker(cls, v):
        return _one_of(v, WORKERS, "Assigned worker")

    @field_validator("assigned_parts")
    @classmethod
    def validate_parts(cls, v):
        return _one_of(v, PARTS_HANDLERS, "Assigned parts")

    @field_validator("job_start_date")
    @classmethod
    def localize_start(cls, v):
        # Naive start times are workshop local time; stored as UTC
        if v is None:
            return v
        if v.tzinfo is None:
            v = v.replace(tzinfo=settings.business_timezone)
        return v.astimezone(timezone.utc)


class JobCardCreate(JobCardFields):
    """Schema for creating a job card.

    Year and month default to the current workshop month. A missing
    sequence is allocated on insert; a typed one has at most three digits
    and is padded to three.
    """
    job_year: Optional[str] = None
    job_month: Optional[str] = None
    job_sequence: Optional[str] = None

    @field_validator("job_year")
    @classmethod
    def validate_year(cls, v):
        if v is None:
            return v
        text = str(v).strip()
        if len(text) != 4 or not text.isdigit():
            raise ValueError("Job year must be four digits")
        return text

    @field_validator("job_month")
    @classmethod
    def validate_month(cls, v):
        if v is None:
            return v
        text = _digits(v, 2, "Job month")
        if not 1 <= int(text) <= 12:
            raise ValueError("Job month must be between 01 and 12")
        return text

    @field_validator("job_sequence")
    @classmethod
    def validate_sequence(cls, v):
        text = "" if v is None else str(v).strip()
        if not text:
            return None
        return _digits(text, 3, "Job sequence")


class JobCardUpdate(JobCardFields):
    """Schema for updating a job card (all fields optional). The job number never changes."""
    is_archived: Optional[bool] = None
    is_worker_assigned_complete: Optional[bool] = None
    is_parts_assigned_complete: Optional[bool] = None


class JobCardResponse(BaseModel):
    """Schema for job card response."""
    id: UUIDStr
    job_number: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    customer_name: Optional[str] = None
    company_name: Optional[str] = None
    abn: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[str] = None

    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_month: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_kms: Optional[int] = None
    fuel_type: Optional[str] = None
    vin: Optional[str] = None
    rego: Optional[str] = None
    vehicle_state: Optional[str] = None
    tyre_size: Optional[str] = None
    next_service_kms: Optional[int] = None
    vehicle_type: Optional[list[str]] = None
    service_selection: Optional[str] = None

    job_start_date: Optional[datetime] = None
    expected_completion_date: Optional[date] = None
    completed_date: Optional[date] = None

    assigned_worker: Optional[str] = None
    assigned_parts: Optional[str] = None
    is_worker_assigned_complete: bool = False
    is_parts_assigned_complete: bool = False
    is_archived: bool = False
    payment_status: str = PaymentStatus.unpaid.value

    customer_declaration_authorized: Optional[bool] = None
    customer_signature: Optional[str] = None

    service_progress: Optional[list[ServiceTask]] = None
    trailer_progress: Optional[TrailerProgress] = None
    other_progress: Optional[OtherProgress] = None
    parts_and_consumables: Optional[PartsAndConsumables] = None
    lubricants_used: Optional[LubricantsUsed] = None

    handover_valuables_to_customer: Optional[str] = None
    check_all_tyres: Optional[str] = None
    total_a: Optional[Money] = None
    total_hours: Optional[float] = None
    future_work_notes: Optional[str] = None

    grand_total: Optional[Money] = None
    approximate_cost: Optional[Money] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    invoice_value: Optional[Money] = None
    part_location: Optional[str] = None
    issue_counter_sale: Optional[str] = None

    image_front: Optional[str] = None
    image_back: Optional[str] = None
    image_right_side: Optional[str] = None
    image_left_side: Optional[str] = None
    supervisor_signature: Optional[str] = None

    progress: Optional[ChecklistSummary] = None

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def attach_progress(self) -> "JobCardResponse":
        self.progress = summarize(self.service_progress, self.trailer_progress, self.other_progress)
        return self


class JobCardListResponse(BaseModel):
    """Paginated job card list response."""
    items: list[JobCardResponse]
    total: int
    page: int
    page_size: int


class DatabasePageResponse(JobCardListResponse):
    total_pages: int


class DashboardResponse(BaseModel):
    """Active job cards plus a short preview of the latest archived ones."""
    active: list[JobCardResponse]
    archived: list[JobCardResponse]


class NextNumberResponse(BaseModel):
    job_year: str
    job_month: str
    job_sequence: str
    job_number: str


class PortalColumn(BaseModel):
    name: str
    count: int
    job_cards: list[JobCardResponse]


class PortalResponse(BaseModel):
    columns: list[PortalColumn]
    total: int


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus
