from fastapi import APIRouter, status, Query
from sqlalchemy import select, func, or_
from typing import Optional
import logging

from app.api.deps import DbSession
from app.database import commit_or_raise
from app.exceptions import NotFoundError
from app.models.customer import Customer
from app.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse,
)
from app.schemas.form import JobCardFormState
from app.services.job_card_form import new_draft, prefill_from_customer
from app.services.job_number import current_year_month, next_sequence

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_CUSTOMER = "This customer and vehicle combination already exists in the database."


async def _get_customer(db, customer_id: str) -> Customer:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    customer = result.scalar_one_or_none()
    if not customer:
        raise NotFoundError("Customer", customer_id)
    return customer


@router.get("/", response_model=CustomerListResponse)
async def list_customers(
    db: DbSession,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500),
    search: Optional[str] = None,
):
    """List customers with pagination and search over name, REGO, mobile, company and email."""
    # Base query
    query = select(Customer)

    if search and search.strip():
        term = search.strip()
        search_filter = or_(
            Customer.customer_name.ilike(f"%{term}%"),
            Customer.rego.ilike(f"%{term}%"),
            Customer.mobile.ilike(f"%{term}%"),
            Customer.company_name.ilike(f"%{term}%"),
            Customer.email.ilike(f"%{term}%"),
        )
        query = query.where(search_filter)

    # Get total count
    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Apply pagination
    offset = (page - 1) * page_size
    query = query.order_by(Customer.created_at.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    customers = result.scalars().all()

    return CustomerListResponse(
        items=customers,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str, db: DbSession):
    """Get a single customer by ID."""
    return await _get_customer(db, customer_id)


@router.get("/{customer_id}/job-card-draft", response_model=JobCardFormState)
async def job_card_draft_for_customer(customer_id: str, db: DbSession):
    """New job card form pre-filled with this customer's details and the next free sequence."""
    customer = await _get_customer(db, customer_id)
    year, month = current_year_month()
    sequence = await next_sequence(db, year, month)
    return prefill_from_customer(new_draft(sequence), customer)


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(customer_data: CustomerCreate, db: DbSession):
    """Create a new customer."""
    customer = Customer(**customer_data.model_dump())
    db.add(customer)
    await commit_or_raise(db, DUPLICATE_CUSTOMER)
    await db.refresh(customer)
    logger.info(f"Created customer {customer.id} ({customer.rego})")
    return customer


@router.patch("/{customer_id}", response_model=CustomerResponse)
async def update_customer(customer_id: str, customer_data: CustomerUpdate, db: DbSession):
    """Update a customer."""
    customer = await _get_customer(db, customer_id)

    # Update only provided fields
    update_data = customer_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(customer, field, value)

    await commit_or_raise(db, DUPLICATE_CUSTOMER)
    await db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: str, db: DbSession):
    """Delete a customer. Job cards keep their own copy of the details."""
    customer = await _get_customer(db, customer_id)

    await db.delete(customer)
    await commit_or_raise(db, DUPLICATE_CUSTOMER)
    logger.info(f"Deleted customer {customer_id}")
