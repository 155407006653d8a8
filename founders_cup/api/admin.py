"""
Admin endpoints: full roster, archives and winner processing
"""
from fastapi import APIRouter, HTTPException
import logging

from founders_cup.services.notifications import NotificationError
from founders_cup.services.roster import (
    get_archived_registrations, get_team_by_utr, get_weekly_registrations_for_admin,
)
from founders_cup.services.winners import process_and_email_winners


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/teams")
async def admin_teams():
    """This week's registrations with contact and payment details"""
    teams = get_weekly_registrations_for_admin()
    return {
        "teams": [team.model_dump(by_alias=True) for team in teams],
        "total_teams": len(teams),
    }


@router.get("/archives")
async def archives():
    """All archived weeks, most recent first"""
    weeks = get_archived_registrations()
    return {"archives": [w.model_dump(by_alias=True) for w in weeks]}


@router.post("/winners")
async def submit_winners(request: dict):
    """
    Admin: record this week's winners and email them

    Request:
        {"firstPlaceUtr": "...", "secondPlaceUtr": "..."}
    """
    first_utr = request.get("firstPlaceUtr") or request.get("first_place_utr")
    second_utr = request.get("secondPlaceUtr") or request.get("second_place_utr")

    if not first_utr or not second_utr:
        raise HTTPException(status_code=400, detail="firstPlaceUtr and secondPlaceUtr required")

    first = get_team_by_utr(first_utr)
    second = get_team_by_utr(second_utr)
    for utr, found in ((first_utr, first), (second_utr, second)):
        if not found.success:
            raise HTTPException(status_code=404, detail=f"No team registered this week with UTR {utr}")

    if first.data.utr_number == second.data.utr_number:
        raise HTTPException(status_code=400, detail="1st and 2nd place must be different teams")

    try:
        record = await process_and_email_winners(first.data, second.data)
    except NotificationError as e:
        logger.error(f"❌ Winner processing failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "success": True,
        "winner": record.model_dump(by_alias=True),
        "message": f"Winners for week {record.week_start} saved and notified.",
    }
