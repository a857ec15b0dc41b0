"""
Cost roll-ups for a job card.

    total_b     = sum of part line totals      (price * qty_used)
    total_c     = sum of lubricant line totals (cost_per_litre * qty)
    grand_total = total_a + total_b + total_c

``total_a`` is labour entered by hand. Line totals are only computed when
both factors are present and non-negative; otherwise the line total is
null and adds nothing. All arithmetic is Decimal, rounded half-up to
cents. Stored documents keep plain JSON numbers. Values too large to
round or to store raise ValueError.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Sequence

from app.data.task_lists import DEFAULT_LUBRICANT_NAMES
from app.schemas.types import MAX_AMOUNT
from app.schemas.line_items import (
    PartAndConsumable,
    PartsAndConsumables,
    Lubricant,
    LubricantsUsed,
)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

PART_FIELDS = {"part_number", "description", "price", "qty_used", "supplier", "remarks"}
PART_FACTORS = {"price", "qty_used"}
LUBRICANT_FIELDS = {"name", "grade", "qty", "cost_per_litre", "remarks"}
LUBRICANT_FACTORS = {"qty", "cost_per_litre"}


def to_decimal(value) -> Optional[Decimal]:
    """Decimal from a number or numeric string; None for null or blank."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return amount


def _to_cents(amount: Decimal) -> Decimal:
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount is too large: {amount}")


def quantize(value) -> Decimal:
    amount = to_decimal(value)
    if amount is None:
        return ZERO
    return _to_cents(amount)


def format_money(value) -> str:
    """Fixed two decimal display ("90.00")."""
    return f"{quantize(value):.2f}"


def line_total(first, second) -> Optional[Decimal]:
    a, b = to_decimal(first), to_decimal(second)
    if a is None or b is None or a < 0 or b < 0:
        return None
    return _to_cents(a * b)


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def _sum_lines(totals: Sequence[Optional[float]]) -> Decimal:
    return sum((quantize(t) for t in totals if t is not None), ZERO)


# Parts

def recompute_part(part: PartAndConsumable) -> PartAndConsumable:
    return part.model_copy(update={"total_cost": _as_float(line_total(part.price, part.qty_used))})


def total_b(parts: Sequence[PartAndConsumable]) -> Decimal:
    return _sum_lines([p.total_cost for p in parts])


def recompute_parts(data: Optional[PartsAndConsumables]) -> Optional[PartsAndConsumables]:
    if data is None:
        return None
    parts = [recompute_part(p) for p in data.parts]
    return PartsAndConsumables(parts=parts, total_b=float(total_b(parts)))


def update_part_field(data: PartsAndConsumables, index: int, field: str, value) -> PartsAndConsumables:
    """Edit one part field; the line total and ``total_b`` follow."""
    if field not in PART_FIELDS:
        raise ValueError(f"Part field {field!r} cannot be edited")
    if index < 0 or index >= len(data.parts):
        raise IndexError(f"Part index {index} is out of range")
    if field in PART_FACTORS:
        value = _as_float(to_decimal(value))
    elif value is None:
        value = ""
    parts = list(data.parts)
    parts[index] = PartAndConsumable.model_validate({**parts[index].model_dump(), field: value})
    return recompute_parts(PartsAndConsumables(parts=parts))


def add_part(data: Optional[PartsAndConsumables]) -> PartsAndConsumables:
    parts = list(data.parts) if data else []
    return recompute_parts(PartsAndConsumables(parts=[*parts, PartAndConsumable()]))


def remove_part(data: PartsAndConsumables, index: int) -> PartsAndConsumables:
    if index < 0 or index >= len(data.parts):
        raise IndexError(f"Part index {index} is out of range")
    parts = [p for i, p in enumerate(data.parts) if i != index]
    return recompute_parts(PartsAndConsumables(parts=parts))


# Lubricants

def default_lubricants() -> LubricantsUsed:
    return LubricantsUsed(lubricants=[Lubricant(name=name) for name in DEFAULT_LUBRICANT_NAMES], total_c=0)


def recompute_lubricant(lubricant: Lubricant) -> Lubricant:
    total = line_total(lubricant.cost_per_litre, lubricant.qty)
    return lubricant.model_copy(update={"total_cost": _as_float(total)})


def total_c(lubricants: Sequence[Lubricant]) -> Decimal:
    return _sum_lines([lub.total_cost for lub in lubricants])


def recompute_lubricants(data: Optional[LubricantsUsed]) -> Optional[LubricantsUsed]:
    if data is None:
        return None
    lubricants = [recompute_lubricant(lub) for lub in data.lubricants]
    return LubricantsUsed(lubricants=lubricants, total_c=float(total_c(lubricants)))


def update_lubricant_field(data: LubricantsUsed, index: int, field: str, value) -> LubricantsUsed:
    if field not in LUBRICANT_FIELDS:
        raise ValueError(f"Lubricant field {field!r} cannot be edited")
    if index < 0 or index >= len(data.lubricants):
        raise IndexError(f"Lubricant index {index} is out of range")
    if field in LUBRICANT_FACTORS:
        value = _as_float(to_decimal(value))
    elif value is None:
        value = ""
    lubricants = list(data.lubricants)
    lubricants[index] = Lubricant.model_validate({**lubricants[index].model_dump(), field: value})
    return recompute_lubricants(LubricantsUsed(lubricants=lubricants))


def add_lubricant(data: Optional[LubricantsUsed]) -> LubricantsUsed:
    lubricants = list(data.lubricants) if data else []
    return recompute_lubricants(LubricantsUsed(lubricants=[*lubricants, Lubricant()]))


def remove_lubricant(data: LubricantsUsed, index: int) -> LubricantsUsed:
    if index < 0 or index >= len(data.lubricants):
        raise IndexError(f"Lubricant index {index} is out of range")
    lubricants = [lub for i, lub in enumerate(data.lubricants) if i != index]
    return recompute_lubricants(LubricantsUsed(lubricants=lubricants))


# Grand total

def grand_total(
    total_a,
    parts: Optional[PartsAndConsumables],
    lubricants: Optional[LubricantsUsed],
) -> Decimal:
    b = quantize(parts.total_b) if parts else ZERO
    c = quantize(lubricants.total_c) if lubricants else ZERO
    total = quantize(total_a) + b + c
    if total > MAX_AMOUNT:
        raise ValueError(f"Grand total {total} is more than {MAX_AMOUNT}")
    return total


def rollup(
    total_a,
    parts: Optional[PartsAndConsumables],
    lubricants: Optional[LubricantsUsed],
) -> tuple[Optional[PartsAndConsumables], Optional[LubricantsUsed], Decimal]:
    """Recompute every derived value from its inputs. Idempotent."""
    parts = recompute_parts(parts)
    lubricants = recompute_lubricants(lubricants)
    return parts, lubricants, grand_total(total_a, parts, lubricants)
