from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from app.schemas.types import UUIDStr, OptionalText


class CustomerBase(BaseModel):
    """Base customer schema."""
    customer_name: OptionalText = Field(None, max_length=255)
    mobile: OptionalText = Field(None, max_length=50)
    company_name: OptionalText = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    abn: OptionalText = Field(None, max_length=50)
    rego: OptionalText = Field(None, max_length=20)
    vehicle_make: OptionalText = Field(None, max_length=100)
    vehicle_model: OptionalText = Field(None, max_length=100)
    vehicle_month: OptionalText = Field(None, max_length=20)
    vehicle_year: Optional[int] = Field(None, ge=1900, le=2100)

    @field_validator("email", "vehicle_year", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CustomerCreate(CustomerBase):
    """Schema for creating a customer. Name and REGO are mandatory."""

    @model_validator(mode="after")
    def require_name_and_rego(self) -> "CustomerCreate":
        if not self.customer_name:
            raise ValueError("Customer name is required.")
        if not self.rego:
            raise ValueError("Vehicle REGO is required.")
        return self


class CustomerUpdate(CustomerBase):
    """Schema for updating a customer (all fields optional).

    Name and REGO may be left out, but not blanked.
    """

    @field_validator("customer_name")
    @classmethod
    def keep_name(cls, v):
        if v is None:
            raise ValueError("Customer name is required.")
        return v

    @field_validator("rego")
    @classmethod
    def keep_rego(cls, v):
        if v is None:
            raise ValueError("Vehicle REGO is required.")
        return v


class CustomerResponse(CustomerBase):
    """Schema for customer response."""
    id: UUIDStr
    email: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerListResponse(BaseModel):
    """Paginated customer list response."""
    items: list[CustomerResponse]
    total: int
    page: int
    page_size: int
