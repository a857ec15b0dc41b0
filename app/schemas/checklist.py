"""Checklist documents stored on a job card.

Every checklist is a flat list of ``ServiceTask`` rows. The trailer
checklist tags each row with the heading of the section it belongs to;
sections are derived from that tag, storage never nests them.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    tick = "tick"
    cross = "cross"
    not_applicable = "n/a"


class ServiceTask(BaseModel):
    """One checklist row."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    task: str = ""
    status: Optional[TaskStatus] = None
    description: str = ""
    done_by: str = ""
    hours: Optional[float] = Field(None, ge=0)
    section: Optional[str] = None

    @property
    def is_addressed(self) -> bool:
        return self.status is not None

    def to_record(self) -> dict:
        """Storage shape; flat checklists carry no ``section`` key."""
        record = self.model_dump(mode="json")
        if record["section"] is None:
            del record["section"]
        return record


class TrailerProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    inspection_date: Optional[str] = None
    kilometers: Optional[float] = None
    plant_number: Optional[str] = None
    tasks: list[ServiceTask] = []

    def to_record(self) -> dict:
        return {
            "inspection_date": self.inspection_date,
            "kilometers": self.kilometers,
            "plant_number": self.plant_number,
            "tasks": [t.to_record() for t in self.tasks],
        }


class OtherProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    tasks: list[ServiceTask] = []

    def to_record(self) -> dict:
        return {"tasks": [t.to_record() for t in self.tasks]}


class ChecklistProgress(BaseModel):
    """Rows with any status count as addressed."""

    addressed: int
    total: int
    percentage: int


class SectionProgress(ChecklistProgress):
    section: str


class ChecklistSummary(BaseModel):
    service: Optional[ChecklistProgress] = None
    trailer: Optional[ChecklistProgress] = None
    trailer_sections: list[SectionProgress] = []
    other: Optional[ChecklistProgress] = None
