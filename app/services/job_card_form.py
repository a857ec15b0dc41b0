"""
Job card form reducer and form <-> storage mapping.

``apply_change`` is pure: it takes a frozen ``JobCardFormState`` and one
``FormChange`` and returns the next state. Derived values (line totals,
``total_b``/``total_c`` and ``grand_total``) are recomputed after every
change. Sequence reallocation after a year/month change needs the
database and is left to the caller (see ``needs_new_sequence``).

Outbound (``to_payload``): blank strings become None, numeric strings are
parsed. Inbound (``from_record``): None becomes "" or [], numbers become
strings, and missing checklists are synthesized from the selections.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from app.config import settings
from app.data.task_lists import (
    SERVICE_ELIGIBLE_VEHICLE_TYPES,
    VEHICLE_TYPES,
    VEHICLE_TYPE_TRAILER,
    VEHICLE_TYPE_OTHER,
)
from app.schemas.checklist import ServiceTask, TrailerProgress, OtherProgress
from app.schemas.form import JobCardFormState, FormChange
from app.schemas.line_items import PartsAndConsumables, LubricantsUsed
from app.services import checklists, cost_rollup
from app.services.job_number import pad_sequence, split_job_number, current_year_month

logger = logging.getLogger(__name__)

DOCUMENT_FIELDS = {
    "service_progress",
    "trailer_progress",
    "other_progress",
    "parts_and_consumables",
    "lubricants_used",
}
DERIVED_FIELDS = {"grand_total"}
SETTABLE_FIELDS = set(JobCardFormState.model_fields) - DOCUMENT_FIELDS - DERIVED_FIELDS
SEQUENCE_TRIGGERS = {"job_year", "job_month"}

INT_FIELDS = ("vehicle_year", "vehicle_kms", "next_service_kms")
DATE_FIELDS = ("expected_completion_date", "completed_date", "invoice_date")
TEXT_FIELDS = (
    "customer_name", "company_name", "abn", "mobile", "email",
    "vehicle_make", "vehicle_model", "vehicle_month", "fuel_type", "vin", "rego",
    "vehicle_state", "tyre_size", "service_selection", "assigned_worker", "assigned_parts",
    "customer_signature", "handover_valuables_to_customer", "check_all_tyres",
    "future_work_notes", "invoice_number", "part_location", "issue_counter_sale",
    "image_front", "image_back", "image_right_side", "image_left_side",
    "supervisor_signature",
)
TRAILER_DETAIL_FIELDS = {"inspection_date", "kilometers", "plant_number"}
LOCAL_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


# Drafts

def local_now_input(now: Optional[datetime] = None) -> str:
    """Current workshop time formatted for a datetime-local input."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(settings.business_timezone).strftime(LOCAL_INPUT_FORMAT)


def new_draft(sequence: str = "001", now: Optional[datetime] = None) -> JobCardFormState:
    """Blank form for a new job card in the current workshop month."""
    year, month = current_year_month(now)
    return JobCardFormState(
        job_year=year,
        job_month=month,
        job_sequence=pad_sequence(sequence),
        job_start_date=local_now_input(now),
        lubricants_used=cost_rollup.default_lubricants(),
    )


def prefill_from_customer(state: JobCardFormState, customer) -> JobCardFormState:
    """Copy customer and vehicle details onto the form (copy-on-create)."""
    fields = (
        "customer_name", "company_name", "abn", "mobile", "email", "rego",
        "vehicle_make", "vehicle_model", "vehicle_month", "vehicle_year",
    )
    update = {}
    for field in fields:
        value = getattr(customer, field, None)
        update[field] = "" if value is None else str(value)
    return state.model_copy(update=update)


# Reducer

def needs_new_sequence(change: FormChange) -> bool:
    return change.action == "set" and change.field in SEQUENCE_TRIGGERS


def _checklist_tasks(state: JobCardFormState, name: Optional[str]) -> list[ServiceTask]:
    if name == "service_progress":
        tasks = state.service_progress
    elif name == "trailer_progress":
        tasks = state.trailer_progress.tasks if state.trailer_progress else None
    elif name == "other_progress":
        tasks = state.other_progress.tasks if state.other_progress else None
    else:
        raise ValueError(f"Unknown checklist: {name!r}")
    if tasks is None:
        raise ValueError(f"The {name.replace('_', ' ')} checklist is not active")
    return list(tasks)


def _with_tasks(state: JobCardFormState, name: str, tasks: list[ServiceTask]) -> JobCardFormState:
    if name == "service_progress":
        return state.model_copy(update={"service_progress": tasks})
    if name == "trailer_progress":
        return state.model_copy(update={"trailer_progress": state.trailer_progress.model_copy(update={"tasks": tasks})})
    return state.model_copy(update={"other_progress": state.other_progress.model_copy(update={"tasks": tasks})})


def _set_field(state: JobCardFormState, field: Optional[str], value) -> JobCardFormState:
    if field not in SETTABLE_FIELDS:
        raise ValueError(f"Field {field!r} cannot be set")

    if field == "service_selection":
        selection = value or ""
        return state.model_copy(update={
            "service_selection": selection,
            "service_progress": checklists.build_service_checklist(selection),
        })

    if field == "vehicle_type":
        types = []
        for tag in value or []:
            if tag not in VEHICLE_TYPES:
                raise ValueError(f"Unknown vehicle type: {tag!r}")
            if tag not in types:
                types.append(tag)
        trailer, other = checklists.ensure_vehicle_checklists(types, state.trailer_progress, state.other_progress)
        update = {"vehicle_type": types, "trailer_progress": trailer, "other_progress": other}
        if not any(t in SERVICE_ELIGIBLE_VEHICLE_TYPES for t in types):
            update.update(service_selection="", service_progress=None)
        return state.model_copy(update=update)

    if field == "job_sequence":
        return state.model_copy(update={"job_sequence": pad_sequence(value)})

    if field == "customer_declaration_authorized":
        return state.model_copy(update={field: bool(value)})

    return state.model_copy(update={field: "" if value is None else str(value)})


def _update_trailer_details(state: JobCardFormState, field: Optional[str], value) -> JobCardFormState:
    if state.trailer_progress is None:
        raise ValueError("The trailer progress checklist is not active")
    if field not in TRAILER_DETAIL_FIELDS:
        raise ValueError(f"Trailer field {field!r} cannot be edited")
    if value == "":
        value = None
    if field == "kilometers" and value is not None:
        value = float(value)
    trailer = TrailerProgress.model_validate({**state.trailer_progress.model_dump(), field: value})
    return state.model_copy(update={"trailer_progress": trailer})


def _index(change: FormChange) -> int:
    if change.index is None:
        raise ValueError(f"{change.action} needs an index")
    return change.index


def apply_change(state: JobCardFormState, change: FormChange) -> JobCardFormState:
    """Return the next form state. Raises ValueError/IndexError on a bad change."""
    action = change.action

    if action == "set":
        state = _set_field(state, change.field, change.value)

    elif action == "toggle_task_status":
        tasks = checklists.toggle_status(_checklist_tasks(state, change.checklist), _index(change), change.value)
        state = _with_tasks(state, change.checklist, tasks)

    elif action == "update_task":
        allowed = checklists.OTHER_EDITABLE_FIELDS if change.checklist == "other_progress" else checklists.EDITABLE_FIELDS
        tasks = checklists.update_task_field(
            _checklist_tasks(state, change.checklist), _index(change), change.field, change.value, allowed
        )
        state = _with_tasks(state, change.checklist, tasks)

    elif action in ("add_task", "remove_task"):
        if change.checklist != "other_progress":
            raise ValueError("Only the other checklist takes custom rows")
        tasks = _checklist_tasks(state, change.checklist)
        if action == "add_task":
            tasks = checklists.add_task(tasks, change.value or "")
        else:
            tasks = checklists.remove_task(tasks, _index(change))
        state = _with_tasks(state, change.checklist, tasks)

    elif action == "update_trailer_details":
        state = _update_trailer_details(state, change.field, change.value)

    elif action == "update_part":
        parts = state.parts_and_consumables or PartsAndConsumables()
        state = state.model_copy(update={
            "parts_and_consumables": cost_rollup.update_part_field(parts, _index(change), change.field, change.value)
        })
    elif action == "add_part":
        state = state.model_copy(update={"parts_and_consumables": cost_rollup.add_part(state.parts_and_consumables)})
    elif action == "remove_part":
        parts = state.parts_and_consumables or PartsAndConsumables()
        state = state.model_copy(update={"parts_and_consumables": cost_rollup.remove_part(parts, _index(change))})

    elif action == "update_lubricant":
        lubricants = state.lubricants_used or LubricantsUsed()
        state = state.model_copy(update={
            "lubricants_used": cost_rollup.update_lubricant_field(lubricants, _index(change), change.field, change.value)
        })
    elif action == "add_lubricant":
        state = state.model_copy(update={"lubricants_used": cost_rollup.add_lubricant(state.lubricants_used)})
    elif action == "remove_lubricant":
        lubricants = state.lubricants_used or LubricantsUsed()
        state = state.model_copy(update={"lubricants_used": cost_rollup.remove_lubricant(lubricants, _index(change))})

    else:
        raise ValueError(f"Unknown form action: {action!r}")

    return with_totals(state)


def with_totals(state: JobCardFormState) -> JobCardFormState:
    """Recompute line totals, Total B, Total C and the grand total."""
    parts, lubricants, total = cost_rollup.rollup(
        state.total_a or None, state.parts_and_consumables, state.lubricants_used
    )
    return state.model_copy(update={
        "parts_and_consumables": parts,
        "lubricants_used": lubricants,
        "grand_total": cost_rollup.format_money(total),
    })


# Outbound

def _text(value: str) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _int(value: str, field: str) -> Optional[int]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{field.replace('_', ' ').capitalize()} must be a whole number")


def _date(value: str, field: str) -> Optional[date]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValueError(f"{field.replace('_', ' ').capitalize()} must be a date (YYYY-MM-DD)")


def parse_start_date(value: str) -> Optional[datetime]:
    """A datetime-local value ("2025-03-04T09:15") in workshop time."""
    value = (value or "").strip()
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValueError("Job start date must look like YYYY-MM-DDTHH:MM")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=settings.business_timezone)
    return parsed


def _hours(value: str) -> float:
    value = (value or "").strip()
    if not value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        raise ValueError("Total hours must be a number")


def to_payload(state: JobCardFormState) -> dict:
    """Typed record for ``JobCardCreate``/``JobCardUpdate`` from a form state."""
    state = with_totals(state)
    payload = {
        "job_year": state.job_year,
        "job_month": state.job_month,
        "job_sequence": state.job_sequence,
        "job_start_date": parse_start_date(state.job_start_date),
        "vehicle_type": list(state.vehicle_type) or None,
        "customer_declaration_authorized": state.customer_declaration_authorized,
        "service_progress": state.service_progress,
        "trailer_progress": state.trailer_progress,
        "other_progress": state.other_progress,
        "parts_and_consumables": state.parts_and_consumables,
        "lubricants_used": state.lubricants_used,
        "total_a": cost_rollup.quantize(state.total_a),
        "total_hours": _hours(state.total_hours),
        "invoice_value": cost_rollup.to_decimal(state.invoice_value),
    }
    for field in TEXT_FIELDS:
        payload[field] = _text(getattr(state, field))
    for field in INT_FIELDS:
        payload[field] = _int(getattr(state, field), field)
    for field in DATE_FIELDS:
        payload[field] = _date(getattr(state, field), field)
    return payload


# Inbound

def _str(value) -> str:
    return "" if value is None else str(value)


def _start_input(value) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(settings.business_timezone).strftime(LOCAL_INPUT_FORMAT)


def _date_input(value) -> str:
    if not value:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)[:10]


def _money_input(value, default: str = "0.00") -> str:
    if value is None:
        return default
    return cost_rollup.format_money(value)


def from_record(card) -> JobCardFormState:
    """Form state for an existing job card.

    Stored checklists are used verbatim. Missing ones are synthesized: the
    service checklist from ``service_selection``, trailer and other
    checklists from the vehicle type tags, and the default lubricant rows.
    """
    parts = split_job_number(card.job_number)
    if parts is None:
        logger.warning(f"Malformed job number on card {card.id}: {card.job_number!r}")
        year, month = current_year_month()
        parts = (year, month, "001")
    year, month, sequence = parts

    vehicle_type = list(card.vehicle_type or [])
    service_progress = card.service_progress
    if service_progress is not None:
        service_progress = [ServiceTask.model_validate(t) for t in service_progress]
    trailer = TrailerProgress.model_validate(card.trailer_progress) if card.trailer_progress else None
    other = OtherProgress.model_validate(card.other_progress) if card.other_progress else None
    trailer, other = _synthesize_vehicle_checklists(vehicle_type, trailer, other)

    lubricants = card.lubricants_used
    lubricants = LubricantsUsed.model_validate(lubricants) if lubricants else cost_rollup.default_lubricants()
    parts_doc = card.parts_and_consumables
    parts_doc = PartsAndConsumables.model_validate(parts_doc) if parts_doc else None

    values = {
        "job_year": year,
        "job_month": month,
        "job_sequence": sequence,
        "job_start_date": _start_input(card.job_start_date),
        "expected_completion_date": _date_input(card.expected_completion_date),
        "completed_date": _date_input(card.completed_date),
        "invoice_date": _date_input(card.invoice_date),
        "approximate_cost": _money_input(card.approximate_cost),
        "vehicle_type": vehicle_type,
        "customer_declaration_authorized": bool(card.customer_declaration_authorized),
        "service_progress": checklists.ensure_service_checklist(service_progress, card.service_selection),
        "trailer_progress": trailer,
        "other_progress": other,
        "parts_and_consumables": parts_doc,
        "lubricants_used": lubricants,
        "total_a": _money_input(card.total_a),
        "total_hours": _str(card.total_hours) or "0.0",
        "invoice_value": _money_input(card.invoice_value, default=""),
        "grand_total": _money_input(card.grand_total),
    }
    for field in TEXT_FIELDS + INT_FIELDS:
        values[field] = _str(getattr(card, field))
    return JobCardFormState(**values)


def _synthesize_vehicle_checklists(
    vehicle_type: list[str],
    trailer: Optional[TrailerProgress],
    other: Optional[OtherProgress],
) -> tuple[Optional[TrailerProgress], Optional[OtherProgress]]:
    # Unlike a vehicle type edit, loading never drops a stored checklist
    if trailer is None and VEHICLE_TYPE_TRAILER in vehicle_type:
        trailer = checklists.build_trailer_progress()
    if other is None and VEHICLE_TYPE_OTHER in vehicle_type:
        other = checklists.build_other_progress()
    return trailer, other
