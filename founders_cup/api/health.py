"""
Health check and system status endpoints
"""
from fastapi import APIRouter

from founders_cup.services.registration import get_registration_status


router = APIRouter(tags=["health"])


@router.get("/")
async def health_check():
    """Health check endpoint"""
    status = get_registration_status()
    return {
        "status": "ok",
        "message": "Weekly Tournament Registration Server",
        "version": "1.0.0",
        "week_start": status.week_start,
        "slots_filled": status.slots_filled,
        "total_slots": status.total_slots,
    }
