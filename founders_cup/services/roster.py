"""Read-only views of the current roster and its archives"""
from datetime import datetime
from typing import List

from founders_cup import state
from founders_cup.core import week
from founders_cup.core.validation import normalize_key
from founders_cup.core.weekly_state import resolve_current_week
from founders_cup.models import LookupResult, PublicTeam, TeamRegistration, WeeklyData


def _current_week(now: datetime = None) -> WeeklyData:
    now = now or week.current_time(state.SETTINGS.timezone)
    _, weekly_data = resolve_current_week(state.STORE, now)
    return weekly_data


def get_weekly_registrations(now: datetime = None) -> List[PublicTeam]:
    """Public roster: team names and players only"""
    return [
        PublicTeam(team_name=team.team_name, players=team.players)
        for team in _current_week(now).teams
    ]


def get_weekly_registrations_for_admin(now: datetime = None) -> List[TeamRegistration]:
    return list(_current_week(now).teams)


def get_archived_registrations() -> List[WeeklyData]:
    """Every archived week, most recent first"""
    archives = []
    for name in state.STORE.list_archives():
        data = state.STORE.read(name, WeeklyData)
        if data:
            archives.append(data)
    return archives


def get_team_by_utr(utr: str, now: datetime = None) -> LookupResult:
    """Find this week's registration for a UTR; archives are not searched"""
    if not utr or not utr.strip():
        return LookupResult(success=False, error="UTR number is required.")

    key = normalize_key(utr)
    for team in _current_week(now).teams:
        if normalize_key(team.utr_number) == key:
            return LookupResult(success=True, data=team)

    return LookupResult(success=False, error="No registration found for this UTR number in the current week.")
