"""
Mechanic and parts portals.

Open job cards grouped into one column per worker or parts handler. A card
leaves its portal once archived or once its assignment is complete.
"""

from fastapi import APIRouter

from app.api.deps import DbSession
from app.schemas.job_card import PortalResponse, PortalColumn
from app.services import job_card_service

router = APIRouter()


def _columns(groups) -> PortalResponse:
    columns = [PortalColumn(name=name, count=len(cards), job_cards=cards) for name, cards in groups]
    return PortalResponse(columns=columns, total=sum(c.count for c in columns))


@router.get("/mechanic", response_model=PortalResponse)
async def mechanic_portal(db: DbSession):
    """Active job cards the workers have not finished, by worker."""
    return _columns(await job_card_service.mechanic_portal(db))


@router.get("/parts", response_model=PortalResponse)
async def parts_portal(db: DbSession):
    """Active job cards the parts team has not finished, by parts handler."""
    return _columns(await job_card_service.parts_portal(db))
