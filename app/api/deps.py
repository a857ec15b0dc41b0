"""
FastAPI Dependencies

Provides dependency injection for database sessions and job card lookups.
The workshop API has no user accounts; every screen is trusted.
"""

from typing import Annotated
from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.job_card import JobCard
from app.services.job_card_service import get_job_card


async def job_card_by_id(
    job_card_id: Annotated[str, Path(description="Job card UUID")],
    db: AsyncSession = Depends(get_db),
) -> JobCard:
    """Resolve the job card in the path, 404 when it does not exist."""
    return await get_job_card(db, job_card_id)


# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
JobCardFromPath = Annotated[JobCard, Depends(job_card_by_id)]
