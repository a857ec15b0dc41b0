"""
Form state as the job card screens hold it.

Scalar inputs are strings exactly as typed; checklists and line items are
the typed documents. The state is frozen; the reducer in
``app.services.job_card_form`` returns a new state for every change.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.checklist import ServiceTask, TrailerProgress, OtherProgress
from app.schemas.line_items import PartsAndConsumables, LubricantsUsed


class JobCardFormState(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_year: str = ""
    job_month: str = ""
    job_sequence: str = "001"
    job_start_date: str = ""
    expected_completion_date: str = ""
    completed_date: str = ""
    approximate_cost: str = "0.00"

    customer_name: str = ""
    company_name: str = ""
    abn: str = ""
    mobile: str = ""
    email: str = ""

    vehicle_make: str = ""
    vehicle_model: str = ""
    vehicle_month: str = ""
    vehicle_year: str = ""
    vehicle_kms: str = ""
    fuel_type: str = ""
    vin: str = ""
    rego: str = ""
    vehicle_state: str = ""
    tyre_size: str = ""
    next_service_kms: str = ""
    vehicle_type: list[str] = []
    service_selection: str = ""

    assigned_worker: str = ""
    assigned_parts: str = ""
    customer_declaration_authorized: bool = False
    customer_signature: str = ""

    service_progress: Optional[list[ServiceTask]] = None
    trailer_progress: Optional[TrailerProgress] = None
    other_progress: Optional[OtherProgress] = None
    parts_and_consumables: Optional[PartsAndConsumables] = None
    lubricants_used: Optional[LubricantsUsed] = None

    handover_valuables_to_customer: str = ""
    check_all_tyres: str = ""
    total_a: str = "0.00"
    total_hours: str = "0.0"
    future_work_notes: str = ""

    invoice_number: str = ""
    invoice_date: str = ""
    invoice_value: str = ""
    part_location: str = ""
    issue_counter_sale: str = ""

    image_front: str = ""
    image_back: str = ""
    image_right_side: str = ""
    image_left_side: str = ""
    supervisor_signature: str = ""

    grand_total: str = "0.00"


FormAction = Literal[
    "set",
    "toggle_task_status",
    "update_task",
    "add_task",
    "remove_task",
    "update_trailer_details",
    "update_part",
    "add_part",
    "remove_part",
    "update_lubricant",
    "add_lubricant",
    "remove_lubricant",
]

Checklist = Literal["service_progress", "trailer_progress", "other_progress"]


class FormChange(BaseModel):
    """One edit on a job card form.

    ``set`` assigns ``value`` to the scalar ``field``. Row actions address a
    checklist row or line item by ``index``; ``field`` then names the column
    being edited.
    """
    action: FormAction = "set"
    field: Optional[str] = None
    checklist: Optional[Checklist] = None
    index: Optional[int] = None
    value: Any = None


class FormChangeRequest(BaseModel):
    state: JobCardFormState
    change: FormChange

