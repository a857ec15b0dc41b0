from fastapi import APIRouter
from app.api.v2 import (
    customers,
    job_cards,
    portals,
    websocket,
)

api_router = APIRouter()

# Include all v2 routers
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(job_cards.router, prefix="/job-cards", tags=["job-cards"])
api_router.include_router(portals.router, prefix="/portals", tags=["portals"])
api_router.include_router(websocket.router, tags=["websocket"])
