"""
Checklist operations.

All functions are pure: they take a list of ``ServiceTask`` rows and return
a new list, leaving the input untouched. Rows are addressed by their index
in the flat list, which is also the index the trailer sections use.
"""

from collections import OrderedDict
from typing import Optional, Sequence

from app.data.task_lists import (
    SERVICE_TASKS,
    TRAILER_TASK_SECTIONS,
    TRAILER_SECTION_HEADINGS,
    VEHICLE_TYPE_TRAILER,
    VEHICLE_TYPE_OTHER,
)
from app.schemas.checklist import (
    ServiceTask,
    TaskStatus,
    TrailerProgress,
    OtherProgress,
    ChecklistProgress,
    SectionProgress,
    ChecklistSummary,
)

EDITABLE_FIELDS = {"description", "done_by", "hours"}
# Other-checklist rows are typed in by hand, so their name is editable too
OTHER_EDITABLE_FIELDS = EDITABLE_FIELDS | {"task"}


def blank_task(name: str = "", section: Optional[str] = None) -> ServiceTask:
    return ServiceTask(task=name, section=section)


def build_service_checklist(service_selection: Optional[str]) -> Optional[list[ServiceTask]]:
    """Fresh checklist for a service type, None when nothing (or an unknown type) is selected."""
    names = SERVICE_TASKS.get(service_selection or "")
    if names is None:
        return None
    return [blank_task(name) for name in names]


def build_trailer_progress() -> TrailerProgress:
    tasks = [
        blank_task(name, section=section["heading"])
        for section in TRAILER_TASK_SECTIONS
        for name in section["tasks"]
    ]
    return TrailerProgress(tasks=tasks)


def build_other_progress() -> OtherProgress:
    return OtherProgress(tasks=[])


def ensure_service_checklist(
    existing: Optional[Sequence[ServiceTask]],
    service_selection: Optional[str],
) -> Optional[list[ServiceTask]]:
    """Use a persisted checklist verbatim; only synthesize one when none is stored."""
    if existing:
        return list(existing)
    return build_service_checklist(service_selection)


def ensure_vehicle_checklists(
    vehicle_type: Sequence[str],
    trailer: Optional[TrailerProgress],
    other: Optional[OtherProgress],
) -> tuple[Optional[TrailerProgress], Optional[OtherProgress]]:
    """Match trailer/other checklists to the selected vehicle types.

    A checklist that is already present is kept; one whose tag was
    deselected is dropped.
    """
    if VEHICLE_TYPE_TRAILER in vehicle_type:
        trailer = trailer or build_trailer_progress()
    else:
        trailer = None

    if VEHICLE_TYPE_OTHER in vehicle_type:
        other = other or build_other_progress()
    else:
        other = None

    return trailer, other


def _check_index(tasks: Sequence[ServiceTask], index: int) -> None:
    if index < 0 or index >= len(tasks):
        raise IndexError(f"Task index {index} is out of range (0-{len(tasks) - 1})")


def toggle_status(tasks: Sequence[ServiceTask], index: int, status) -> list[ServiceTask]:
    """Tri-state toggle: pick a status, or clear it by picking the same one again."""
    _check_index(tasks, index)
    status = TaskStatus(status).value
    current = tasks[index]
    new_status = None if current.status == status else status
    updated = list(tasks)
    updated[index] = current.model_copy(update={"status": new_status})
    return updated


def update_task_field(
    tasks: Sequence[ServiceTask],
    index: int,
    field: str,
    value,
    allowed_fields: set = EDITABLE_FIELDS,
) -> list[ServiceTask]:
    """Set one field on one row. Status goes through ``toggle_status``."""
    if field not in allowed_fields:
        raise ValueError(f"Task field {field!r} cannot be edited")
    _check_index(tasks, index)

    if field == "hours":
        if value in (None, ""):
            value = None
        else:
            value = float(value)
            if value < 0:
                raise ValueError("Hours cannot be negative")
    elif value is None:
        value = ""

    updated = list(tasks)
    updated[index] = ServiceTask.model_validate({**tasks[index].model_dump(), field: value})
    return updated


def add_task(tasks: Sequence[ServiceTask], name: str = "") -> list[ServiceTask]:
    return [*tasks, blank_task(name)]


def remove_task(tasks: Sequence[ServiceTask], index: int) -> list[ServiceTask]:
    _check_index(tasks, index)
    return [task for i, task in enumerate(tasks) if i != index]


def progress(tasks: Sequence[ServiceTask]) -> ChecklistProgress:
    total = len(tasks)
    addressed = sum(1 for task in tasks if task.is_addressed)
    percentage = round(addressed / total * 100) if total else 0
    return ChecklistProgress(addressed=addressed, total=total, percentage=percentage)


def group_by_section(tasks: Sequence[ServiceTask]) -> "OrderedDict[str, list[tuple[int, ServiceTask]]]":
    """Rows grouped by section tag, keeping each row's index in the flat list.

    Known trailer headings come first in their fixed order, then any other
    tags in order of first appearance. Untagged rows are skipped.
    """
    groups: "OrderedDict[str, list[tuple[int, ServiceTask]]]" = OrderedDict()
    for heading in TRAILER_SECTION_HEADINGS:
        groups[heading] = []
    for index, task in enumerate(tasks):
        if task.section is None:
            continue
        groups.setdefault(task.section, []).append((index, task))
    return OrderedDict((k, v) for k, v in groups.items() if v)


def section_progress(tasks: Sequence[ServiceTask]) -> list[SectionProgress]:
    results = []
    for heading, rows in group_by_section(tasks).items():
        overall = progress([task for _, task in rows])
        results.append(SectionProgress(section=heading, **overall.model_dump()))
    return results


def summarize(
    service: Optional[Sequence[ServiceTask]],
    trailer: Optional[TrailerProgress],
    other: Optional[OtherProgress],
) -> ChecklistSummary:
    return ChecklistSummary(
        service=progress(service) if service else None,
        trailer=progress(trailer.tasks) if trailer else None,
        trailer_sections=section_progress(trailer.tasks) if trailer else [],
        other=progress(other.tasks) if other else None,
    )


# Worker completion

def _task_errors(task: ServiceTask, label: str) -> list[str]:
    errors = []
    if task.status is None:
        errors.append(f"{label}: Status is missing.")
    if not task.description.strip():
        errors.append(f"{label}: Description is empty.")
    if not task.done_by.strip():
        errors.append(f"{label}: 'Done by' field is empty.")
    return errors


def completion_errors(
    service: Optional[Sequence[ServiceTask]],
    trailer: Optional[TrailerProgress],
    other: Optional[OtherProgress],
) -> dict[str, list[str]]:
    """Every incomplete row, grouped per checklist.

    A row is complete when it has a status, a description and a ``done_by``.
    Other-checklist rows also need a name.
    """
    errors = {"service": [], "trailer": [], "other": []}
    for i, task in enumerate(service or [], start=1):
        errors["service"].extend(_task_errors(task, f"Service Task {i}"))
    for i, task in enumerate(trailer.tasks if trailer else [], start=1):
        name = task.task or f"Task {i}"
        errors["trailer"].extend(_task_errors(task, f"Trailer Task {i} ({name})"))
    for i, task in enumerate(other.tasks if other else [], start=1):
        if not task.task.strip():
            errors["other"].append(f"Other Task {i}: Task name is empty.")
        name = task.task or f"Custom Task {i}"
        errors["other"].extend(_task_errors(task, f"Other Task {i} ({name})"))
    return errors


def completion_message(errors: dict[str, list[str]], service_selection: Optional[str] = None) -> str:
    """Categorized message shown when a worker tries to complete an unfinished job."""
    count = sum(len(v) for v in errors.values())
    noun = "Task" if count == 1 else "Tasks"
    lines = [
        "Please complete the following mandatory fields before marking this job as complete:",
        "",
        f"**{count} {noun} Incomplete**",
        "",
    ]
    headings = {
        "service": f"{service_selection or 'Service'} Tasks",
        "trailer": "Trailer Tasks",
        "other": "Other Tasks",
    }
    for key in ("service", "trailer", "other"):
        if not errors[key]:
            continue
        lines.append(f"**{headings[key]}** ({len(errors[key])})")
        lines.append("")
        lines.extend(f"• {error}" for error in errors[key])
        lines.append("")
    return "\n".join(lines).strip()
