"""
Tests for checklist building, editing, progress and completion checks.
"""

import pytest

from app.data.task_lists import (
    SERVICE_A_TASKS,
    SERVICE_B_TASKS,
    SERVICE_C_TASKS,
    SERVICE_D_TASKS,
    TRAILER_SECTION_HEADINGS,
)
from app.schemas.checklist import ServiceTask, OtherProgress
from app.services import checklists


def _done(task: ServiceTask) -> ServiceTask:
    return task.model_copy(update={"status": "tick", "description": "OK", "done_by": "Worker 1"})


class TestTaskLists:

    def test_service_lists_have_no_duplicates(self):
        for tasks in (SERVICE_A_TASKS, SERVICE_B_TASKS, SERVICE_C_TASKS, SERVICE_D_TASKS):
            assert len(tasks) == len(set(tasks))

    def test_list_sizes(self):
        assert len(SERVICE_A_TASKS) == 46
        assert len(SERVICE_C_TASKS) == 65
        assert set(SERVICE_A_TASKS) < set(SERVICE_B_TASKS)
        assert set(SERVICE_C_TASKS) < set(SERVICE_D_TASKS)


class TestBuilders:

    def test_build_service_checklist(self):
        tasks = checklists.build_service_checklist("Service A")
        assert [t.task for t in tasks] == SERVICE_A_TASKS
        assert all(t.status is None and t.hours is None and t.description == "" for t in tasks)

    def test_unknown_or_empty_selection(self):
        assert checklists.build_service_checklist(None) is None
        assert checklists.build_service_checklist("") is None
        assert checklists.build_service_checklist("Service Z") is None

    def test_switching_service_discards_state(self):
        tasks = checklists.build_service_checklist("Service A")
        tasks = checklists.toggle_status(tasks, 0, "tick")

        switched = checklists.build_service_checklist("Service C")
        assert len(switched) == 65
        assert all(t.status is None and t.done_by == "" for t in switched)

    def test_trailer_rows_are_tagged_with_sections(self):
        trailer = checklists.build_trailer_progress()
        assert len(trailer.tasks) == 26
        assert {t.section for t in trailer.tasks} == set(TRAILER_SECTION_HEADINGS)
        assert trailer.inspection_date is None

    def test_ensure_service_checklist_keeps_stored_rows(self):
        stored = [ServiceTask(task="Custom", status="tick")]
        assert checklists.ensure_service_checklist(stored, "Service A") == stored
        assert len(checklists.ensure_service_checklist(None, "Service A")) == 46

    def test_ensure_vehicle_checklists(self):
        other = OtherProgress(tasks=[ServiceTask(task="Fix door")])

        trailer, kept = checklists.ensure_vehicle_checklists(["Trailer", "Other"], None, other)
        assert trailer is not None
        assert kept is other

        trailer, dropped = checklists.ensure_vehicle_checklists(["HR Truck"], trailer, other)
        assert trailer is None
        assert dropped is None


class TestEditing:

    def test_toggle_is_tri_state(self):
        tasks = checklists.build_service_checklist("Service A")

        tasks = checklists.toggle_status(tasks, 3, "tick")
        assert tasks[3].status == "tick"
        tasks = checklists.toggle_status(tasks, 3, "cross")
        assert tasks[3].status == "cross"
        tasks = checklists.toggle_status(tasks, 3, "cross")
        assert tasks[3].status is None

    def test_toggle_does_not_mutate_input(self):
        tasks = checklists.build_service_checklist("Service A")
        checklists.toggle_status(tasks, 0, "n/a")
        assert tasks[0].status is None

    def test_toggle_rejects_unknown_status(self):
        tasks = checklists.build_service_checklist("Service A")
        with pytest.raises(ValueError):
            checklists.toggle_status(tasks, 0, "maybe")

    def test_toggle_rejects_bad_index(self):
        with pytest.raises(IndexError):
            checklists.toggle_status([], 0, "tick")

    def test_update_task_field(self):
        tasks = checklists.build_service_checklist("Service A")
        tasks = checklists.update_task_field(tasks, 1, "hours", "1.5")
        tasks = checklists.update_task_field(tasks, 1, "done_by", "Worker 2")
        assert tasks[1].hours == 1.5
        assert tasks[1].done_by == "Worker 2"

        tasks = checklists.update_task_field(tasks, 1, "hours", "")
        assert tasks[1].hours is None

    def test_update_task_field_rejections(self):
        tasks = checklists.build_service_checklist("Service A")
        with pytest.raises(ValueError):
            checklists.update_task_field(tasks, 0, "hours", "-1")
        with pytest.raises(ValueError):
            checklists.update_task_field(tasks, 0, "task", "Renamed")
        with pytest.raises(IndexError):
            checklists.update_task_field(tasks, 99, "description", "x")

    def test_add_and_remove_task(self):
        tasks = checklists.add_task([], "Replace mirror")
        tasks = checklists.add_task(tasks)
        assert [t.task for t in tasks] == ["Replace mirror", ""]

        tasks = checklists.remove_task(tasks, 0)
        assert [t.task for t in tasks] == [""]


class TestProgress:

    def test_progress_counts_any_status(self):
        tasks = checklists.build_service_checklist("Service A")
        tasks = checklists.toggle_status(tasks, 0, "tick")
        tasks = checklists.toggle_status(tasks, 1, "n/a")
        tasks = checklists.toggle_status(tasks, 2, "cross")

        result = checklists.progress(tasks)
        assert result.addressed == 3
        assert result.total == 46
        assert result.percentage == 7

    def test_empty_progress(self):
        assert checklists.progress([]).percentage == 0

    def test_section_progress_in_heading_order(self):
        trailer = checklists.build_trailer_progress()
        tasks = checklists.toggle_status(trailer.tasks, 0, "tick")

        sections = checklists.section_progress(tasks)
        assert [s.section for s in sections] == TRAILER_SECTION_HEADINGS
        assert sections[0].addressed == 1
        assert sections[0].total == 3

    def test_group_by_section_keeps_flat_index(self):
        trailer = checklists.build_trailer_progress()
        groups = checklists.group_by_section(trailer.tasks)
        index, task = groups["Tires and Wheels"][0]
        assert trailer.tasks[index] == task
        assert index == 3

    def test_summarize(self):
        summary = checklists.summarize(
            checklists.build_service_checklist("Service C"), None, OtherProgress(tasks=[])
        )
        assert summary.service.total == 65
        assert summary.trailer is None
        assert summary.trailer_sections == []
        assert summary.other.total == 0


class TestCompletion:

    def test_complete_checklist_has_no_errors(self):
        tasks = [_done(t) for t in checklists.build_service_checklist("Service A")]
        errors = checklists.completion_errors(tasks, None, None)
        assert errors == {"service": [], "trailer": [], "other": []}

    def test_every_missing_field_is_reported(self):
        tasks = [ServiceTask(task="Check oil")]
        errors = checklists.completion_errors(tasks, None, None)
        assert errors["service"] == [
            "Service Task 1: Status is missing.",
            "Service Task 1: Description is empty.",
            "Service Task 1: 'Done by' field is empty.",
        ]

    def test_trailer_and_other_labels(self):
        trailer = checklists.build_trailer_progress()
        other = OtherProgress(tasks=[ServiceTask(status="tick", description="x", done_by="y")])
        errors = checklists.completion_errors(None, trailer, other)

        assert errors["trailer"][0] == "Trailer Task 1 (Check all electrical plugs): Status is missing."
        assert errors["other"] == ["Other Task 1: Task name is empty."]

    def test_completion_message(self):
        errors = checklists.completion_errors([ServiceTask(task="Check oil", status="tick", done_by="W")], None, None)
        message = checklists.completion_message(errors, "Service B")

        assert message.startswith("Please complete the following mandatory fields")
        assert "**1 Task Incomplete**" in message
        assert "**Service B Tasks** (1)" in message
        assert "• Service Task 1: Description is empty." in message
        assert "Trailer Tasks" not in message
