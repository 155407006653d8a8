"""
Weekly winners: congratulatory emails and history
"""
import logging
from datetime import datetime
from typing import List

from founders_cup import state
from founders_cup.core import week
from founders_cup.core.store import WINNERS_FILE
from founders_cup.core.weekly_state import resolve_current_week
from founders_cup.models import TeamRegistration, WeeklyWinner, WinnerInfo
from founders_cup.services.notifications import send_winner_email


logger = logging.getLogger(__name__)


def get_winners_history() -> List[WeeklyWinner]:
    """All recorded weekly winners, most recent week first"""
    return state.STORE.read_list(WINNERS_FILE, WeeklyWinner) or []


def get_balance_history() -> List[WeeklyWinner]:
    """Winner history with team counts, for the prize balance page"""
    return get_winners_history()


async def process_and_email_winners(
    first_place: TeamRegistration,
    second_place: TeamRegistration,
    now: datetime = None,
) -> WeeklyWinner:
    """
    Email both winning teams, then record the week's result

    Re-processing a week replaces its existing record.

    Raises:
        NotificationError: If either email cannot be sent. Nothing is recorded.
    """
    now = now or week.current_time(state.SETTINGS.timezone)
    reg_state, _ = resolve_current_week(state.STORE, now)
    prizes = state.SETTINGS.prizes

    await send_winner_email(state.MAILER, first_place, "1st", prizes.get("1st", ""))
    await send_winner_email(state.MAILER, second_place, "2nd", prizes.get("2nd", ""))

    record = WeeklyWinner(
        week_start=reg_state.registration_week_start,
        winners=[
            WinnerInfo(rank="1st", team_name=first_place.team_name),
            WinnerInfo(rank="2nd", team_name=second_place.team_name),
        ],
        total_teams=reg_state.registered_teams_count,
    )

    history = [w for w in get_winners_history() if w.week_start != record.week_start]
    history.insert(0, record)
    state.STORE.write(WINNERS_FILE, history)

    logger.info(f"🏆 Winners for week {record.week_start} processed and saved.")
    return record
