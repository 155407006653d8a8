"""
Tests for the registration pipeline
"""
import asyncio
from datetime import datetime, timedelta

import pytest

from founders_cup.core.store import REGISTRATIONS_FILE, STATE_FILE
from founders_cup.core.weekly_state import resolve_current_week
from founders_cup.models import RegistrationState, VerificationResult, WeeklyData
from founders_cup.services.registration import (
    CLOSED_MESSAGE, GENERIC_ERROR, NO_DATE_MESSAGE, STALE_MESSAGE, TOTAL_SLOTS,
    get_registration_status, register_team,
)
from founders_cup.services.verification import UNAVAILABLE_REASON
from conftest import NOW, TZ, WEEK_START, make_form


def register(form, now=NOW):
    return asyncio.run(register_team(form, now=now))


def assert_counter_in_sync(app_state):
    reg_state = app_state.STORE.read(STATE_FILE, RegistrationState)
    weekly_data = app_state.STORE.read(REGISTRATIONS_FILE, WeeklyData)
    assert reg_state.registered_teams_count == len(weekly_data.teams)
    return weekly_data


def test_successful_registration(app_state):
    """Accepted team is returned and persisted"""
    result = register(make_form(1))

    assert result.success is True
    assert result.message == "Registration Submitted!"
    assert result.data.team_name == "Squad 1"
    assert len(result.data.screenshot_hash) == 64
    assert result.data.registration_time == NOW.isoformat()

    weekly_data = assert_counter_in_sync(app_state)
    assert weekly_data.registration_week_start == WEEK_START
    assert weekly_data.teams == [result.data]


def test_counter_tracks_every_registration(app_state):
    """Counter equals roster length after each registration"""
    for n in range(1, 4):
        assert register(make_form(n)).success
        assert_counter_in_sync(app_state)
    assert get_registration_status(NOW).slots_filled == 3


def test_verifier_receives_data_uri_and_utr(app_state):
    """Verifier gets a base64 data URI and the UTR"""
    register(make_form(1))
    data_uri, utr = app_state.VERIFIER.calls[0]
    assert data_uri.startswith("data:image/png;base64,")
    assert utr == "UTR000000001"


def test_emails_sent_to_admin_and_user(app_state):
    """Admin mail links the uploaded screenshot"""
    register(make_form(1))
    recipients = sorted(mail["to"] for mail in app_state.MAILER.sent)
    assert recipients == ["admin@founders.test", "captain1@example.com"]
    admin_mail = next(m for m in app_state.MAILER.sent if m["to"] == "admin@founders.test")
    assert "https://storage.test/screenshots/pay1.png" in admin_mail["html"]


def test_rejected_outside_window(app_state):
    """Sunday 22:00 is closed and the verifier is never called"""
    sunday_late = datetime(2026, 10, 18, 22, 0, tzinfo=TZ)
    result = register(make_form(1), now=sunday_late)
    assert result.success is False
    assert result.error == CLOSED_MESSAGE
    assert app_state.VERIFIER.calls == []


def test_rejected_before_monday_open(app_state):
    """Monday 00:29 is closed"""
    result = register(make_form(1), now=datetime(2026, 10, 12, 0, 29, tzinfo=TZ))
    assert result.error == CLOSED_MESSAGE


def test_accepted_at_window_open(app_state):
    """Monday 00:30 is open"""
    result = register(make_form(1), now=datetime(2026, 10, 12, 0, 30, tzinfo=TZ))
    assert result.success is True


def test_capacity_reached(app_state):
    """The 13th team is turned away even inside the window"""
    for n in range(1, TOTAL_SLOTS + 1):
        assert register(make_form(n)).success

    status = get_registration_status(NOW)
    assert status.slots_filled == TOTAL_SLOTS
    assert status.is_open is False

    result = register(make_form(TOTAL_SLOTS + 1))
    assert result.error == CLOSED_MESSAGE
    assert len(assert_counter_in_sync(app_state).teams) == TOTAL_SLOTS


def test_validation_error_is_field_qualified(app_state):
    """Validator message is passed through"""
    result = register(make_form(1, contactPhone="12345"))
    assert result.success is False
    assert result.error == "contactPhone: Must be a valid 10-digit phone number."


def test_verifier_non_match_reason_returned(app_state):
    """Non-match reason is returned and nothing is saved"""
    app_state.VERIFIER.result = VerificationResult(is_utr_match=False, reason="UTR not found in screenshot.")
    result = register(make_form(1))
    assert result.error == "UTR not found in screenshot."
    assert assert_counter_in_sync(app_state).teams == []


def test_verifier_unreachable_fails_closed(app_state):
    """Verifier outage rejects the registration"""
    app_state.VERIFIER.error = ConnectionError("connection refused")
    result = register(make_form(1))
    assert result.success is False
    assert result.error == UNAVAILABLE_REASON


def test_missing_transaction_date(app_state):
    """No transaction date means rejection"""
    app_state.VERIFIER.result = VerificationResult(is_utr_match=True)
    assert register(make_form(1)).error == NO_DATE_MESSAGE


def test_unreadable_transaction_date(app_state):
    """Unparseable transaction date means rejection"""
    app_state.VERIFIER.result = VerificationResult(is_utr_match=True, transaction_date="13th Oct")
    assert register(make_form(1)).error == NO_DATE_MESSAGE


def test_transaction_before_week_start_is_stale(app_state):
    """Payment from last week is rejected"""
    app_state.VERIFIER.result = VerificationResult(
        is_utr_match=True, transaction_date="2026-10-11T23:59:00+05:30"
    )
    assert register(make_form(1)).error == STALE_MESSAGE


def test_transaction_on_week_start_date_accepted(app_state):
    """Payment dated Monday of this week is accepted"""
    app_state.VERIFIER.result = VerificationResult(is_utr_match=True, transaction_date="2026-10-12")
    assert register(make_form(1)).success is True


def test_duplicate_screenshot_with_different_utr(app_state):
    """Screenshot hash is unique per week"""
    image = b"same-screenshot-bytes"
    assert register(make_form(1, image=image)).success

    result = register(make_form(2, image=image))
    assert result.error == "This payment screenshot has already been used this week."


def test_duplicate_utr_ignores_case_and_whitespace(app_state):
    """UTR is unique per week, case-insensitive"""
    assert register(make_form(1, utrNumber="abc12345")).success
    result = register(make_form(2, utrNumber="  ABC12345 "))
    assert result.error == "This UTR number has already been used this week."


def test_duplicate_email_ignores_case(app_state):
    """Email is unique per week, case-insensitive"""
    assert register(make_form(1)).success
    result = register(make_form(2, contactEmail="Captain1@Example.com"))
    assert result.error == "This email has already been used this week."


def test_duplicate_phone(app_state):
    """Phone is unique per week"""
    assert register(make_form(1)).success
    result = register(make_form(2, contactPhone="9876500001"))
    assert result.error == "This phone number has already been used this week."


def test_duplicates_allowed_across_weeks(app_state):
    """Last week's identifiers can be reused after rollover"""
    image = b"reused"
    assert register(make_form(1, image=image)).success

    next_week = NOW + timedelta(days=7)
    app_state.VERIFIER.result = VerificationResult(
        is_utr_match=True, transaction_date=next_week.isoformat()
    )
    assert register(make_form(1, image=image), now=next_week).success
    assert app_state.STORE.list_archives() == ["archive/registrations-2026-10-12.json"]


def test_upload_failure_still_registers(app_state):
    """Upload failure degrades to manual verification"""
    app_state.STORAGE.error = RuntimeError("bucket unavailable")
    result = register(make_form(1))

    assert result.success is True
    admin_mail = next(m for m in app_state.MAILER.sent if m["to"] == "admin@founders.test")
    assert "Screenshot upload failed" in admin_mail["html"]


def test_email_failure_still_registers(app_state):
    """Email failure does not undo the registration"""
    app_state.MAILER.fail = True
    result = register(make_form(1))
    assert result.success is True
    assert len(assert_counter_in_sync(app_state).teams) == 1


def test_unconfigured_email_is_skipped(app_state):
    """No API key means no emails"""
    app_state.MAILER.api_key = None
    assert register(make_form(1)).success is True
    assert app_state.MAILER.sent == []


def test_unexpected_error_returns_generic_failure(app_state, monkeypatch):
    """Internal errors are not leaked to the caller"""
    def broken_write(name, value):
        raise OSError("disk full")

    resolve_current_week(app_state.STORE, NOW)
    monkeypatch.setattr(app_state.STORE, "write", broken_write)

    result = register(make_form(1))
    assert result.success is False
    assert result.error == GENERIC_ERROR
    assert "disk full" not in result.error


def test_status_reports_week_and_capacity(app_state):
    """Empty week is open with 12 slots"""
    status = get_registration_status(NOW)
    assert status.week_start == WEEK_START
    assert status.total_slots == 12
    assert status.slots_filled == 0
    assert status.is_open is True


@pytest.mark.parametrize("hour, expected", [(21, True), (22, False)])
def test_status_sunday_cutoff(app_state, hour, expected):
    """Status closes at Sunday 22:00"""
    sunday = datetime(2026, 10, 18, hour, 0, tzinfo=TZ)
    assert get_registration_status(sunday).is_open is expected


@pytest.mark.parametrize("field, value", [
    ("contactPhone", "9876543210\n"),
    ("contactEmail", "a@example.com\n"),
])
def test_trailing_newline_contact_rejected(app_state, field, value):
    """A trailing newline never reaches the stored roster"""
    result = register(make_form(1, **{field: value}))
    assert result.success is False
    assert result.error.startswith(f"{field}:")
    assert assert_counter_in_sync(app_state).teams == []
