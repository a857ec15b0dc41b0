"""Parts and lubricant line items.

``total_cost`` on a line and the ``total_b``/``total_c`` roll-ups are
derived values. They are accepted on input only so stored documents
validate, and are overwritten by the cost roll-up on every write.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.types import MAX_AMOUNT

LINE_VALUE_LIMIT = float(MAX_AMOUNT)


class PartAndConsumable(BaseModel):
    model_config = ConfigDict(frozen=True)

    part_number: str = ""
    description: str = ""
    price: Optional[float] = Field(None, le=LINE_VALUE_LIMIT)
    qty_used: Optional[float] = Field(None, le=LINE_VALUE_LIMIT)
    total_cost: Optional[float] = None
    supplier: str = ""
    remarks: str = ""


class PartsAndConsumables(BaseModel):
    model_config = ConfigDict(frozen=True)

    parts: list[PartAndConsumable] = []
    total_b: Optional[float] = 0

    def to_record(self) -> dict:
        return self.model_dump(mode="json")


class Lubricant(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    grade: str = ""
    qty: Optional[float] = Field(None, le=LINE_VALUE_LIMIT)
    cost_per_litre: Optional[float] = Field(None, le=LINE_VALUE_LIMIT)
    total_cost: Optional[float] = None
    remarks: str = ""


class LubricantsUsed(BaseModel):
    model_config = ConfigDict(frozen=True)

    lubricants: list[Lubricant] = []
    total_c: Optional[float] = 0

    def to_record(self) -> dict:
        return self.model_dump(mode="json")
