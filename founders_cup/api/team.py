"""Registered team endpoints"""
from fastapi import APIRouter, HTTPException

from founders_cup.services.roster import get_team_by_utr, get_weekly_registrations


router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("")
async def list_teams():
    """This week's teams without contact or payment details"""
    teams = get_weekly_registrations()
    return {
        "teams": [team.model_dump(by_alias=True) for team in teams],
        "total_teams": len(teams),
    }


@router.get("/lookup")
async def lookup_team(utr: str = ""):
    """Find this week's registration by UTR number"""
    result = get_team_by_utr(utr)
    if not result.success:
        status_code = 400 if not utr.strip() else 404
        raise HTTPException(status_code=status_code, detail=result.error)
    return result.data.model_dump(by_alias=True)
