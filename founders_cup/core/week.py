"""
Registration week arithmetic

A registration week starts Monday 00:00 local time. Submissions are accepted
from Monday 00:30 until Sunday 22:00.
"""
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo


MONDAY = 0
SUNDAY = 6

WINDOW_OPENS = time(0, 30)      # Monday
WINDOW_CLOSES = time(22, 0)     # Sunday


def current_time(tz_name: str) -> datetime:
    """Timezone-aware now in the tournament's local timezone"""
    return datetime.now(ZoneInfo(tz_name))


def registration_week_start(now: datetime) -> datetime:
    """Most recent Monday 00:00, in now's timezone"""
    monday = now.date() - timedelta(days=now.weekday())
    return datetime.combine(monday, time(0, 0), tzinfo=now.tzinfo)


def is_registration_window_open(now: datetime) -> bool:
    """
    Check whether registrations are accepted at this instant

    Closed on Sunday from 22:00 and on Monday before 00:30.
    """
    weekday = now.weekday()
    clock = now.time()

    if weekday == SUNDAY and clock >= WINDOW_CLOSES:
        return False
    if weekday == MONDAY and clock < WINDOW_OPENS:
        return False
    return True


def parse_timestamp(value: str, tz: ZoneInfo = None) -> datetime:
    """
    Parse an ISO date or datetime string

    Naive values (including bare dates) are read as local time in tz.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None and tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def week_start_date(week_start: str) -> date:
    """Calendar date of a stored week-start timestamp"""
    return datetime.fromisoformat(week_start).date()
