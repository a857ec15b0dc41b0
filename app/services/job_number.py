"""
Job number allocation.

Job numbers look like ``JC-2025-03-007``: prefix, four digit year, two digit
month and a three digit sequence that restarts every month. The next
sequence is read from what is already stored; nothing is reserved, so two
callers can be handed the same number. The unique constraint on
``job_cards.job_number`` rejects the second insert. A month holds at most
999 job cards.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import ConflictError
from app.models.job_card import JobCard

logger = logging.getLogger(__name__)

SEQUENCE_WIDTH = 3
FIRST_SEQUENCE = "001"
LAST_SEQUENCE = 999


def pad_sequence(sequence) -> str:
    """Left-pad a typed sequence to three digits ("7" -> "007").

    Free values are not checked; a clash only shows up at insert time.
    """
    text = str(sequence).strip()
    if not text.isdigit() or len(text) > SEQUENCE_WIDTH:
        raise ValueError(f"Job sequence must be a number with at most {SEQUENCE_WIDTH} digits")
    return text.zfill(SEQUENCE_WIDTH)


def format_job_number(year: str, month: str, sequence: str, prefix: Optional[str] = None) -> str:
    prefix = prefix or settings.JOB_NUMBER_PREFIX
    return f"{prefix}-{year}-{month}-{pad_sequence(sequence)}"


def split_job_number(job_number: str) -> Optional[tuple[str, str, str]]:
    """Return ``(year, month, sequence)`` for a well formed number, else None."""
    parts = (job_number or "").split("-")
    if len(parts) != 4:
        return None
    return parts[1], parts[2], parts[3]


def sort_key(job_number: str) -> tuple[int, int, int]:
    """Numeric (year, month, sequence); unreadable parts count as 0."""
    parts = split_job_number(job_number)
    if parts is None:
        return (0, 0, 0)
    return tuple(int(p) if p.isdigit() else 0 for p in parts)


def extract_sequences(
    job_numbers: Iterable[str],
    year: str,
    month: str,
    prefix: Optional[str] = None,
) -> list[int]:
    """Positive sequences of the numbers that belong to ``year``/``month``."""
    prefix = prefix or settings.JOB_NUMBER_PREFIX
    sequences = []
    for job_number in job_numbers:
        parts = (job_number or "").split("-")
        if len(parts) != 4 or parts[0] != prefix or parts[1] != year or parts[2] != month:
            continue
        try:
            value = int(parts[3])
        except ValueError:
            continue
        if value > 0:
            sequences.append(value)
    return sequences


def next_sequence_from(
    job_numbers: Iterable[str],
    year: str,
    month: str,
    prefix: Optional[str] = None,
) -> str:
    """Highest stored sequence plus one. Gaps are not refilled."""
    sequences = extract_sequences(job_numbers, year, month, prefix)
    if not sequences:
        return FIRST_SEQUENCE
    following = max(sequences) + 1
    if following > LAST_SEQUENCE:
        raise ValueError(f"Every job sequence for {year}-{month} is taken")
    return str(following).zfill(SEQUENCE_WIDTH)


async def next_sequence(db: AsyncSession, year: str, month: str) -> str:
    """Next free sequence for ``year``/``month``.

    A failed lookup falls back to "001" and logs the error. A month with
    sequence 999 already used raises ConflictError.
    """
    prefix = settings.JOB_NUMBER_PREFIX
    try:
        result = await db.execute(
            select(JobCard.job_number).where(
                JobCard.job_number.like(f"{prefix}-{year}-{month}-%")
            )
        )
        job_numbers = result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching job numbers for {year}-{month}: {e}")
        return FIRST_SEQUENCE

    try:
        return next_sequence_from(job_numbers, year, month, prefix)
    except ValueError as e:
        raise ConflictError(str(e))


def current_year_month(now: Optional[datetime] = None) -> tuple[str, str]:
    """Year and zero padded month in workshop local time."""
    now = now or datetime.now(timezone.utc)
    local = now.astimezone(settings.business_timezone)
    return str(local.year), f"{local.month:02d}"
