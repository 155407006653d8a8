"""
Tournament details endpoint
"""
from fastapi import APIRouter

from founders_cup import state
from founders_cup.services.registration import TOTAL_SLOTS


router = APIRouter(tags=["config"])


@router.get("/config")
async def get_config():
    """Entry fee, prizes, schedule and capacity shown on the home page"""
    settings = state.SETTINGS
    return {
        "organizer": settings.organizer,
        "timezone": settings.timezone,
        "entry_fee": settings.entry_fee,
        "prizes": settings.prizes,
        "schedule": settings.schedule,
        "total_slots": TOTAL_SLOTS,
    }
