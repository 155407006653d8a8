"""Winner history endpoints"""
from fastapi import APIRouter

from founders_cup.services.winners import get_balance_history, get_winners_history


router = APIRouter(prefix="/winners", tags=["winners"])


@router.get("")
async def winners_history():
    return {"winners": [w.model_dump(by_alias=True) for w in get_winners_history()]}


@router.get("/balance")
async def balance_history():
    """Winner history including each week's team count"""
    return {"weeks": [w.model_dump(by_alias=True) for w in get_balance_history()]}
