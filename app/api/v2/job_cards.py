"""
Job card endpoints.

Typed CRUD for API clients, lifecycle actions used by the portals, and
form endpoints that let a screen drive the job card form reducer and
submit string-typed form state.
"""

from fastapi import APIRouter, status, Query
from pydantic import ValidationError as PydanticValidationError
from typing import Literal, Optional
import logging

from app.api.deps import DbSession, JobCardFromPath
from app.exceptions import ValidationError
from app.schemas.form import JobCardFormState, FormChangeRequest
from app.schemas.job_card import (
    JobCardCreate,
    JobCardUpdate,
    JobCardResponse,
    JobCardListResponse,
    DatabasePageResponse,
    DashboardResponse,
    NextNumberResponse,
    PaymentStatus,
    PaymentStatusUpdate,
)
from app.services import job_card_service
from app.services.job_card_form import (
    apply_change,
    needs_new_sequence,
    new_draft,
    to_payload,
    from_record,
)
from app.services.job_card_views import DatabaseQuery, SearchField, DateFilter, PaymentFilter, SortOrder
from app.services.job_number import current_year_month, format_job_number, next_sequence

logger = logging.getLogger(__name__)

router = APIRouter()

JOB_NUMBER_FIELDS = {"job_year", "job_month", "job_sequence"}


def _invalid(e: Exception) -> ValidationError:
    return ValidationError(detail=str(e))


def _invalid_payload(e: PydanticValidationError) -> ValidationError:
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in e.errors()
    ]
    detail = errors[0]["message"].removeprefix("Value error, ") if errors else "Request validation failed"
    return ValidationError(detail=detail, errors=errors)


@router.get("/", response_model=JobCardListResponse)
async def list_job_cards(
    db: DbSession,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=500),
    search: Optional[str] = None,
    is_archived: Optional[bool] = None,
    assigned_worker: Optional[str] = None,
    assigned_parts: Optional[str] = None,
    is_worker_assigned_complete: Optional[bool] = None,
    is_parts_assigned_complete: Optional[bool] = None,
    payment_status: Optional[PaymentStatus] = None,
):
    """List job cards, newest first."""
    items, total = await job_card_service.list_job_cards(
        db,
        page=page,
        page_size=page_size,
        search=search,
        is_archived=is_archived,
        assigned_worker=assigned_worker,
        assigned_parts=assigned_parts,
        is_worker_assigned_complete=is_worker_assigned_complete,
        is_parts_assigned_complete=is_parts_assigned_complete,
        payment_status=payment_status.value if payment_status else None,
    )
    return JobCardListResponse(items=items, total=total, page=page, page_size=page_size)


@router.get("/next-number", response_model=NextNumberResponse)
async def get_next_number(
    db: DbSession,
    year: Optional[str] = Query(None, pattern=r"^\d{4}$"),
    month: Optional[str] = Query(None, pattern=r"^(0[1-9]|1[0-2])$"),
):
    """Next free job number for a month (default: the current workshop month). Nothing is reserved."""
    current_year, current_month = current_year_month()
    year = year or current_year
    month = month or current_month
    sequence = await next_sequence(db, year, month)
    return NextNumberResponse(
        job_year=year,
        job_month=month,
        job_sequence=sequence,
        job_number=format_job_number(year, month, sequence),
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(db: DbSession):
    """Active job cards and the latest archived ones."""
    active, archived = await job_card_service.dashboard(db)
    return DashboardResponse(active=active, archived=archived)


@router.get("/database", response_model=DatabasePageResponse)
async def get_archive_database(
    db: DbSession,
    search: Optional[str] = None,
    search_field: SearchField = SearchField.all,
    date_filter: DateFilter = DateFilter.all,
    year: Optional[str] = Query(None, pattern=r"^\d{4}$"),
    month: Optional[str] = Query(None, pattern=r"^(0[1-9]|1[0-2])$"),
    payment: PaymentFilter = PaymentFilter.all,
    sort: SortOrder = SortOrder.newest,
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=500),
):
    """Archived job cards: search, date and payment filters, job number sort, pages."""
    result = await job_card_service.archive_database(
        db,
        DatabaseQuery(
            search=search,
            search_field=search_field,
            date_filter=date_filter,
            year=year,
            month=month,
            payment=payment,
            sort=sort,
            page=page,
            page_size=page_size,
        ),
    )
    return DatabasePageResponse(
        items=result.items,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


# Form endpoints

@router.get("/form/draft", response_model=JobCardFormState)
async def get_form_draft(db: DbSession):
    """Blank job card form for the current month with the next free sequence."""
    year, month = current_year_month()
    return new_draft(await next_sequence(db, year, month))


@router.post("/form/change", response_model=JobCardFormState)
async def change_form(request: FormChangeRequest, db: DbSession):
    """Apply one change to a form state and return the next state.

    Changing the year or month allocates a fresh sequence for the new month.
    """
    try:
        state = apply_change(request.state, request.change)
    except (ValueError, IndexError) as e:
        raise _invalid(e)

    if needs_new_sequence(request.change):
        year, month = state.job_year, state.job_month
        if len(year) == 4 and year.isdigit() and len(month) == 2 and month.isdigit():
            state = state.model_copy(update={"job_sequence": await next_sequence(db, year, month)})
    return state


@router.post("/form", response_model=JobCardResponse, status_code=status.HTTP_201_CREATED)
async def create_from_form(state: JobCardFormState, db: DbSession):
    """Create a job card from a submitted form."""
    try:
        payload = JobCardCreate.model_validate(to_payload(state))
    except PydanticValidationError as e:
        raise _invalid_payload(e)
    except ValueError as e:
        raise _invalid(e)
    return await job_card_service.create_job_card(db, payload)


@router.get("/{job_card_id}/form", response_model=JobCardFormState)
async def get_form(card: JobCardFromPath):
    """Form state for an existing job card."""
    return from_record(card)


@router.put("/{job_card_id}/form", response_model=JobCardResponse)
async def update_from_form(state: JobCardFormState, card: JobCardFromPath, db: DbSession):
    """Save a submitted form over an existing job card. The job number is kept."""
    try:
        values = {k: v for k, v in to_payload(state).items() if k not in JOB_NUMBER_FIELDS}
        payload = JobCardUpdate.model_validate(values)
    except PydanticValidationError as e:
        raise _invalid_payload(e)
    except ValueError as e:
        raise _invalid(e)
    return await job_card_service.update_job_card(db, card, payload)


# Typed CRUD

@router.get("/{job_card_id}", response_model=JobCardResponse)
async def get_job_card(card: JobCardFromPath):
    """Get a single job card by ID."""
    return card


@router.post("/", response_model=JobCardResponse, status_code=status.HTTP_201_CREATED)
async def create_job_card(job_card_data: JobCardCreate, db: DbSession):
    """Create a job card. The sequence is allocated when none is given."""
    return await job_card_service.create_job_card(db, job_card_data)


@router.patch("/{job_card_id}", response_model=JobCardResponse)
async def update_job_card(job_card_data: JobCardUpdate, card: JobCardFromPath, db: DbSession):
    """Update the fields that were sent."""
    return await job_card_service.update_job_card(db, card, job_card_data)


@router.delete("/{job_card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job_card(card: JobCardFromPath, db: DbSession):
    """Delete a job card."""
    await job_card_service.delete_job_card(db, card)


# Lifecycle

@router.post("/{job_card_id}/archive", response_model=JobCardResponse)
async def archive_job_card(card: JobCardFromPath, db: DbSession):
    return await job_card_service.set_flags(db, card, is_archived=True)


@router.post("/{job_card_id}/reopen", response_model=JobCardResponse)
async def reopen_job_card(card: JobCardFromPath, db: DbSession):
    return await job_card_service.set_flags(db, card, is_archived=False)


@router.post("/{job_card_id}/assignments/{assignment}/toggle", response_model=JobCardResponse)
async def toggle_assignment(
    assignment: Literal["worker", "parts"],
    card: JobCardFromPath,
    db: DbSession,
):
    """Flip the worker or parts completion flag."""
    field = f"is_{assignment}_assigned_complete"
    return await job_card_service.set_flags(db, card, **{field: not getattr(card, field)})


@router.post("/{job_card_id}/worker-complete", response_model=JobCardResponse)
async def complete_worker(card: JobCardFromPath, db: DbSession):
    """Mark the worker assignment complete. 422 lists every unfinished checklist row."""
    return await job_card_service.complete_worker_assignment(db, card)


@router.post("/{job_card_id}/parts-complete", response_model=JobCardResponse)
async def complete_parts(card: JobCardFromPath, db: DbSession):
    return await job_card_service.set_flags(db, card, is_parts_assigned_complete=True)


@router.put("/{job_card_id}/payment-status", response_model=JobCardResponse)
async def update_payment_status(body: PaymentStatusUpdate, card: JobCardFromPath, db: DbSession):
    return await job_card_service.set_flags(db, card, payment_status=body.payment_status.value)
