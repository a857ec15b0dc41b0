"""
Job card persistence.

Every write recomputes the derived totals from their inputs before it is
committed, then pushes a change notification to live subscribers.
"""

import logging
from typing import Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import commit_or_raise
from app.data.task_lists import WORKERS, PARTS_HANDLERS, SERVICE_ELIGIBLE_VEHICLE_TYPES
from app.exceptions import NotFoundError, ValidationError
from app.models.job_card import JobCard
from app.schemas.checklist import ServiceTask, TrailerProgress, OtherProgress
from app.schemas.job_card import JobCardCreate, JobCardUpdate, JobCardResponse, PaymentStatus
from app.schemas.line_items import PartsAndConsumables, LubricantsUsed
from app.services import checklists, cost_rollup
from app.services.job_card_views import DatabaseQuery, Page, database_page, group_by_assignee
from app.services.job_number import next_sequence, format_job_number, current_year_month
from app.services.websocket_manager import manager

logger = logging.getLogger(__name__)

TABLE = "job_cards"
DOCUMENT_FIELDS = ("service_progress", "trailer_progress", "other_progress")
NOT_NULL_FIELDS = ("payment_status", "is_archived", "is_worker_assigned_complete", "is_parts_assigned_complete")


def serialize(card: JobCard) -> dict:
    return JobCardResponse.model_validate(card).model_dump(mode="json", exclude={"progress"})


async def _notify(event: str, new: Optional[dict] = None, old: Optional[dict] = None) -> None:
    sent = await manager.broadcast_change(TABLE, event, new=new, old=old)
    logger.debug(f"{TABLE}.{event} pushed to {sent} connections")


def _duplicate_detail(job_number: str) -> str:
    return f"Job number {job_number} already exists. Pick another sequence and try again."


# Documents and totals

def _checklist_records(service, trailer, other) -> dict:
    return {
        "service_progress": [t.to_record() for t in service] if service is not None else None,
        "trailer_progress": trailer.to_record() if trailer is not None else None,
        "other_progress": other.to_record() if other is not None else None,
    }


def _stored_service(card: JobCard) -> Optional[list[ServiceTask]]:
    if card.service_progress is None:
        return None
    return [ServiceTask.model_validate(t) for t in card.service_progress]


def _stored_trailer(card: JobCard) -> Optional[TrailerProgress]:
    return TrailerProgress.model_validate(card.trailer_progress) if card.trailer_progress else None


def _stored_other(card: JobCard) -> Optional[OtherProgress]:
    return OtherProgress.model_validate(card.other_progress) if card.other_progress else None


def recompute_totals(card: JobCard) -> None:
    """Line totals, Total B, Total C and the grand total, from their inputs."""
    parts = PartsAndConsumables.model_validate(card.parts_and_consumables) if card.parts_and_consumables else None
    lubricants = LubricantsUsed.model_validate(card.lubricants_used) if card.lubricants_used else None
    try:
        parts, lubricants, total = cost_rollup.rollup(card.total_a, parts, lubricants)
    except ValueError as e:
        raise ValidationError(title="Invalid Amount", detail=str(e))
    card.parts_and_consumables = parts.to_record() if parts else None
    card.lubricants_used = lubricants.to_record() if lubricants else None
    card.grand_total = total


# Reads

async def get_job_card(db: AsyncSession, job_card_id: str) -> JobCard:
    result = await db.execute(select(JobCard).where(JobCard.id == job_card_id))
    card = result.scalar_one_or_none()
    if not card:
        raise NotFoundError("Job card", job_card_id)
    return card


async def list_job_cards(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
    search: Optional[str] = None,
    is_archived: Optional[bool] = None,
    assigned_worker: Optional[str] = None,
    assigned_parts: Optional[str] = None,
    is_worker_assigned_complete: Optional[bool] = None,
    is_parts_assigned_complete: Optional[bool] = None,
    payment_status: Optional[str] = None,
) -> tuple[list[JobCard], int]:
    """Newest first, filtered in SQL."""
    query = select(JobCard)

    if search:
        query = query.where(
            or_(
                JobCard.job_number.ilike(f"%{search}%"),
                JobCard.customer_name.ilike(f"%{search}%"),
                JobCard.company_name.ilike(f"%{search}%"),
                JobCard.rego.ilike(f"%{search}%"),
                JobCard.mobile.ilike(f"%{search}%"),
                JobCard.invoice_number.ilike(f"%{search}%"),
            )
        )
    if is_archived is not None:
        query = query.where(JobCard.is_archived == is_archived)
    if assigned_worker:
        query = query.where(JobCard.assigned_worker == assigned_worker)
    if assigned_parts:
        query = query.where(JobCard.assigned_parts == assigned_parts)
    if is_worker_assigned_complete is not None:
        query = query.where(JobCard.is_worker_assigned_complete == is_worker_assigned_complete)
    if is_parts_assigned_complete is not None:
        query = query.where(JobCard.is_parts_assigned_complete == is_parts_assigned_complete)
    if payment_status:
        query = query.where(JobCard.payment_status == payment_status)

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar()

    offset = (page - 1) * page_size
    query = query.order_by(JobCard.created_at.desc()).offset(offset).limit(page_size)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def _all(db: AsyncSession, *conditions, limit: Optional[int] = None) -> list[JobCard]:
    query = select(JobCard).where(*conditions).order_by(JobCard.created_at.desc())
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def dashboard(db: AsyncSession) -> tuple[list[JobCard], list[JobCard]]:
    """Every active card plus the latest archived ones."""
    active = await _all(db, JobCard.is_archived.is_(False))
    archived = await _all(db, JobCard.is_archived.is_(True), limit=settings.ARCHIVED_PREVIEW_LIMIT)
    return active, archived


async def archive_database(db: AsyncSession, query: DatabaseQuery) -> Page:
    archived = await _all(db, JobCard.is_archived.is_(True))
    return database_page(archived, query)


async def mechanic_portal(db: AsyncSession) -> list[tuple[str, list[JobCard]]]:
    cards = await _all(
        db,
        JobCard.is_archived.is_(False),
        JobCard.is_worker_assigned_complete.is_(False),
    )
    return group_by_assignee(cards, WORKERS, "assigned_worker")


async def parts_portal(db: AsyncSession) -> list[tuple[str, list[JobCard]]]:
    cards = await _all(
        db,
        JobCard.is_archived.is_(False),
        JobCard.is_parts_assigned_complete.is_(False),
    )
    return group_by_assignee(cards, PARTS_HANDLERS, "assigned_parts")


# Writes

async def create_job_card(db: AsyncSession, payload: JobCardCreate) -> JobCard:
    """Insert a job card.

    Without a typed sequence the next free one is allocated. The new card
    starts active, unpaid, with ``approximate_cost`` equal to its grand total.
    """
    year, month = current_year_month()
    year = payload.job_year or year
    month = payload.job_month or month
    sequence = payload.job_sequence or await next_sequence(db, year, month)
    job_number = format_job_number(year, month, sequence)

    vehicle_type = payload.vehicle_type or []
    service = checklists.ensure_service_checklist(payload.service_progress, payload.service_selection)
    trailer, other = checklists.ensure_vehicle_checklists(vehicle_type, payload.trailer_progress, payload.other_progress)

    data = payload.model_dump(
        exclude={"job_year", "job_month", "job_sequence", *DOCUMENT_FIELDS, "parts_and_consumables", "lubricants_used"}
    )
    card = JobCard(
        **data,
        job_number=job_number,
        **_checklist_records(service, trailer, other),
        parts_and_consumables=payload.parts_and_consumables.to_record() if payload.parts_and_consumables else None,
        lubricants_used=payload.lubricants_used.to_record() if payload.lubricants_used else None,
    )
    card.is_archived = False
    card.is_worker_assigned_complete = False
    card.is_parts_assigned_complete = False
    card.payment_status = payload.payment_status or PaymentStatus.unpaid.value
    card.customer_declaration_authorized = bool(payload.customer_declaration_authorized)
    card.total_a = cost_rollup.quantize(payload.total_a)
    recompute_totals(card)
    card.approximate_cost = card.grand_total

    db.add(card)
    await commit_or_raise(db, _duplicate_detail(job_number))
    await db.refresh(card)

    logger.info(f"Created job card {card.job_number} ({card.id})")
    await _notify("INSERT", new=serialize(card))
    return card


async def update_job_card(db: AsyncSession, card: JobCard, payload: JobCardUpdate) -> JobCard:
    """Apply the fields that were sent.

    A new ``service_selection`` replaces the service checklist with a fresh
    one unless a checklist is sent alongside it. Vehicle type tags add or
    drop the trailer and other checklists; without a service-eligible type
    the service selection and its checklist are cleared. ``approximate_cost``
    follows the new grand total.
    """
    old = serialize(card)
    fields = payload.model_fields_set

    data = payload.model_dump(
        exclude_unset=True,
        exclude={*DOCUMENT_FIELDS, "parts_and_consumables", "lubricants_used"},
    )
    for key in NOT_NULL_FIELDS:
        if key in data and data[key] is None:
            del data[key]
    if "total_a" in data:
        data["total_a"] = cost_rollup.quantize(data["total_a"])

    service = payload.service_progress if "service_progress" in fields else _stored_service(card)
    trailer = payload.trailer_progress if "trailer_progress" in fields else _stored_trailer(card)
    other = payload.other_progress if "other_progress" in fields else _stored_other(card)

    if "service_selection" in fields and payload.service_selection != card.service_selection:
        if "service_progress" not in fields:
            service = checklists.build_service_checklist(payload.service_selection)
    if "vehicle_type" in fields:
        trailer, other = checklists.ensure_vehicle_checklists(payload.vehicle_type or [], trailer, other)
        if not any(t in SERVICE_ELIGIBLE_VEHICLE_TYPES for t in payload.vehicle_type or []):
            data["service_selection"] = None
            service = None

    for field, value in data.items():
        setattr(card, field, value)
    for field, value in _checklist_records(service, trailer, other).items():
        setattr(card, field, value)
    if "parts_and_consumables" in fields:
        card.parts_and_consumables = payload.parts_and_consumables.to_record() if payload.parts_and_consumables else None
    if "lubricants_used" in fields:
        card.lubricants_used = payload.lubricants_used.to_record() if payload.lubricants_used else None
    recompute_totals(card)
    card.approximate_cost = card.grand_total

    await commit_or_raise(db, _duplicate_detail(card.job_number))
    await db.refresh(card)

    logger.info(f"Updated job card {card.job_number}: {sorted(fields)}")
    await _notify("UPDATE", new=serialize(card), old=old)
    return card


async def set_flags(db: AsyncSession, card: JobCard, **flags) -> JobCard:
    """Update lifecycle flags (archive, completion, payment) only."""
    old = serialize(card)
    for field, value in flags.items():
        setattr(card, field, value)

    await commit_or_raise(db, _duplicate_detail(card.job_number))
    await db.refresh(card)

    logger.info(f"Job card {card.job_number} flags changed: {flags}")
    await _notify("UPDATE", new=serialize(card), old=old)
    return card


async def complete_worker_assignment(db: AsyncSession, card: JobCard) -> JobCard:
    """Mark the worker's part done, but only once every checklist row is filled in."""
    errors = checklists.completion_errors(_stored_service(card), _stored_trailer(card), _stored_other(card))
    if any(errors.values()):
        raise ValidationError(
            title="Incomplete Tasks",
            detail=checklists.completion_message(errors, card.service_selection),
            errors=[
                {"checklist": name, "message": message}
                for name, messages in errors.items()
                for message in messages
            ],
        )
    return await set_flags(db, card, is_worker_assigned_complete=True)


async def delete_job_card(db: AsyncSession, card: JobCard) -> None:
    old = serialize(card)
    await db.delete(card)
    await commit_or_raise(db, _duplicate_detail(card.job_number))

    logger.info(f"Deleted job card {old['job_number']}")
    await _notify("DELETE", old=old)
