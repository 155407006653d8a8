"""
Team registration pipeline

status check -> validation -> AI payment verification -> transaction date
check -> duplicate checks -> screenshot upload -> persist -> emails
"""
import asyncio
import hashlib
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional
from zoneinfo import ZoneInfo

from founders_cup import state
from founders_cup.core import week
from founders_cup.core.store import REGISTRATIONS_FILE, STATE_FILE
from founders_cup.core.validation import (
    RegistrationForm, RegistrationValidationError,
    normalize_key, parse_registration_form, validate_registration,
)
from founders_cup.core.weekly_state import resolve_current_week
from founders_cup.models import (
    RegistrationResult, RegistrationState, RegistrationStatus, TeamRegistration,
)
from founders_cup.services.notifications import (
    send_confirmation_email_to_user, send_new_registration_email,
)
from founders_cup.services.verification import run_ai_verification


logger = logging.getLogger(__name__)

TOTAL_SLOTS = 12
SCREENSHOT_PREFIX = "screenshots/"

CLOSED_MESSAGE = "Registrations are currently closed. Please check back next week."
NO_DATE_MESSAGE = (
    "AI could not determine the transaction date from the screenshot. "
    "Please try with a clearer screenshot."
)
STALE_MESSAGE = (
    "This payment screenshot is from a previous week. "
    "Please use a new payment for this week's registration."
)
GENERIC_ERROR = "An unexpected server error occurred. Please try again later."


def _now(now: Optional[datetime]) -> datetime:
    return now or week.current_time(state.SETTINGS.timezone)


def _status(reg_state: RegistrationState, now: datetime) -> RegistrationStatus:
    slots_available = reg_state.registered_teams_count < TOTAL_SLOTS
    return RegistrationStatus(
        slots_filled=reg_state.registered_teams_count,
        total_slots=TOTAL_SLOTS,
        is_open=week.is_registration_window_open(now) and slots_available,
        week_start=reg_state.registration_week_start,
    )


def get_registration_status(now: datetime = None) -> RegistrationStatus:
    """Slots filled, total slots, and whether registration is open right now"""
    now = _now(now)
    reg_state, _ = resolve_current_week(state.STORE, now)
    return _status(reg_state, now)


def _failure(error: str) -> RegistrationResult:
    return RegistrationResult(success=False, error=error)


def find_duplicate(teams: List[TeamRegistration], form: RegistrationForm, screenshot_hash: str) -> Optional[str]:
    """Message for the first identifier already used this week, else None"""
    utr = normalize_key(form.utr_number)
    email = normalize_key(form.contact_email)
    phone = form.contact_phone.strip()

    if any(normalize_key(t.utr_number) == utr for t in teams):
        return "This UTR number has already been used this week."
    if any(normalize_key(t.contact_email) == email for t in teams):
        return "This email has already been used this week."
    if any(t.contact_phone.strip() == phone for t in teams):
        return "This phone number has already been used this week."
    if any(t.screenshot_hash == screenshot_hash for t in teams):
        return "This payment screenshot has already been used this week."
    return None


async def register_team(form_input: Mapping[str, Any], now: datetime = None) -> RegistrationResult:
    """
    Register a team for the current week

    Args:
        form_input: Flat form fields (teamName, players.N.id, players.N.level,
            contactEmail, contactPhone, utrNumber) plus a ScreenshotUpload
            under "screenshot"
        now: Current time override (timezone-aware)

    Returns:
        RegistrationResult; never raises
    """
    try:
        return await _register(form_input, _now(now))
    except Exception as e:
        logger.error(f"❌ Unhandled error in register_team: {type(e).__name__}: {e}", exc_info=True)
        return _failure(GENERIC_ERROR)


async def _register(form_input: Mapping[str, Any], now: datetime) -> RegistrationResult:
    store = state.STORE

    # 1. Registration window and capacity
    reg_state, weekly_data = resolve_current_week(store, now)
    if not _status(reg_state, now).is_open:
        return _failure(CLOSED_MESSAGE)

    # 2. Form validation
    try:
        form = validate_registration(parse_registration_form(form_input))
    except RegistrationValidationError as e:
        return _failure(str(e))

    # 3. AI payment verification (blocking)
    verification = await run_ai_verification(state.VERIFIER, form.screenshot, form.utr_number)
    if not verification.is_utr_match:
        logger.info(f"Payment not verified for UTR {form.utr_number}: {verification.reason}")
        return _failure(verification.reason or "Payment could not be verified.")

    # 4. Screenshots from an earlier week are not accepted
    if not verification.transaction_date:
        return _failure(NO_DATE_MESSAGE)
    try:
        transaction_date = week.parse_timestamp(
            verification.transaction_date, ZoneInfo(state.SETTINGS.timezone)
        )
    except ValueError:
        logger.warning(f"Unparseable transaction date from verifier: {verification.transaction_date!r}")
        return _failure(NO_DATE_MESSAGE)
    if transaction_date < datetime.fromisoformat(reg_state.registration_week_start):
        return _failure(STALE_MESSAGE)

    # 5. Duplicates within the current week
    screenshot_hash = hashlib.sha256(form.screenshot.content).hexdigest()
    duplicate = find_duplicate(weekly_data.teams, form, screenshot_hash)
    if duplicate:
        return _failure(duplicate)

    # 6. Screenshot upload; admin verifies manually if this fails
    screenshot_url = None
    try:
        screenshot_url = await state.STORAGE.upload(form.screenshot, SCREENSHOT_PREFIX)
    except Exception as e:
        logger.error(f"❌ Screenshot upload failed after successful verification: {type(e).__name__}: {e}")

    # 7. Persist
    registration = TeamRegistration(
        team_name=form.team_name,
        players=form.player_list(),
        contact_email=form.contact_email,
        contact_phone=form.contact_phone,
        utr_number=form.utr_number,
        screenshot_hash=screenshot_hash,
        registration_time=now.isoformat(),
    )
    weekly_data.teams.append(registration)
    updated_state = reg_state.model_copy(update={"registered_teams_count": len(weekly_data.teams)})
    store.write(REGISTRATIONS_FILE, weekly_data)
    store.write(STATE_FILE, updated_state)

    # 8. Notifications; failures are logged inside the senders
    await asyncio.gather(
        send_new_registration_email(state.MAILER, registration, screenshot_url),
        send_confirmation_email_to_user(state.MAILER, registration),
    )

    logger.info(
        f"✅ Registration complete for {registration.team_name} "
        f"({updated_state.registered_teams_count}/{TOTAL_SLOTS})"
    )

    # 9. Done
    return RegistrationResult(success=True, message="Registration Submitted!", data=registration)
