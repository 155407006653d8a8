"""
Weekly registration state: rollover, archival and counter reconciliation

Rollover is lazy. Nothing runs at the week boundary itself; the first read in
a new week archives the previous roster and starts an empty one.
"""
import logging
from datetime import datetime
from typing import Tuple

from founders_cup.core.store import JsonStore, STATE_FILE, REGISTRATIONS_FILE, archive_name
from founders_cup.core.week import registration_week_start, week_start_date
from founders_cup.models import RegistrationState, WeeklyData


logger = logging.getLogger(__name__)


def archive_weekly_data(store: JsonStore, weekly_data: WeeklyData) -> None:
    """
    Snapshot a finished week's roster. Empty weeks are not archived.

    Raises:
        OSError: If the archive cannot be written; the live roster must not
            be reset in that case
    """
    if not weekly_data or not weekly_data.teams:
        logger.info("No data to archive for the completed week.")
        return

    name = archive_name(week_start_date(weekly_data.registration_week_start))
    try:
        store.write(name, weekly_data)
    except OSError as e:
        logger.error(f"❌ Failed to archive weekly data to {name}: {e}")
        raise
    logger.info(f"📦 Archived {len(weekly_data.teams)} teams to {name}")


def _start_week(store: JsonStore, week_start: str) -> Tuple[RegistrationState, WeeklyData]:
    state = RegistrationState(registration_week_start=week_start, registered_teams_count=0)
    weekly_data = WeeklyData(registration_week_start=week_start, teams=[])
    store.write(STATE_FILE, state)
    store.write(REGISTRATIONS_FILE, weekly_data)
    return state, weekly_data


def resolve_current_week(store: JsonStore, now: datetime) -> Tuple[RegistrationState, WeeklyData]:
    """
    Load the registration state and roster for the week containing now

    - First call ever: both documents are created for the current week.
    - New week: the old roster is archived and both documents are reset.
    - Same week: a counter that drifted from the roster length is corrected.

    Args:
        store: JSON document store
        now: Timezone-aware current time

    Returns:
        (RegistrationState, WeeklyData) for the current week
    """
    current_week_start = registration_week_start(now)

    state = store.read(STATE_FILE, RegistrationState)
    weekly_data = store.read(REGISTRATIONS_FILE, WeeklyData)

    if state is None or weekly_data is None:
        logger.info(f"Initializing registration week {current_week_start.date()}")
        return _start_week(store, current_week_start.isoformat())

    if datetime.fromisoformat(state.registration_week_start) < current_week_start:
        logger.info(
            f"🔄 New registration week {current_week_start.date()} "
            f"(previous: {state.registration_week_start})"
        )
        archive_weekly_data(store, weekly_data)
        return _start_week(store, current_week_start.isoformat())

    if state.registered_teams_count != len(weekly_data.teams):
        logger.warning(
            f"Registration counter out of sync ({state.registered_teams_count} "
            f"!= {len(weekly_data.teams)}), correcting"
        )
        state.registered_teams_count = len(weekly_data.teams)
        store.write(STATE_FILE, state)

    return state, weekly_data
