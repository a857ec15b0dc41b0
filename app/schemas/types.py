"""
Shared Pydantic types for schema validation.

UUIDStr: Accepts both str and uuid.UUID objects, coercing UUID to str.
This is needed because SQLAlchemy UUID columns return Python uuid.UUID objects,
but Pydantic v2 does not auto-coerce UUID to str, causing validation errors.

OptionalText: Form inputs post "" for an untouched field; storage keeps NULL.
Surrounding whitespace is trimmed.

Money: Decimal on the way in, plain JSON number on the way out. Stored
amounts are capped at MAX_AMOUNT.
"""

from decimal import Decimal
from typing import Annotated, Optional
from pydantic import BeforeValidator, PlainSerializer

# Coerces uuid.UUID objects to str for JSON serialization
UUIDStr = Annotated[str, BeforeValidator(lambda v: str(v) if not isinstance(v, str) else v)]


def _blank_to_none(v):
    if isinstance(v, str):
        return v.strip() or None
    return v


OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]

Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]

# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")
