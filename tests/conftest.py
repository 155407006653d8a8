"""
Shared fixtures: temp data directory and in-memory fakes for the external
verification, storage and email services
"""
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from founders_cup import state
from founders_cup.core.store import JsonStore
from founders_cup.models import ScreenshotUpload, Settings, VerificationResult
from founders_cup.services.notifications import Mailer


TZ = ZoneInfo("Asia/Kolkata")

# Wednesday of the week starting Monday 2026-10-12
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=TZ)
WEEK_START = "2026-10-12T00:00:00+05:30"


class FakeVerifier:
    def __init__(self):
        self.result = VerificationResult(is_utr_match=True, transaction_date="2026-10-13T09:15:00+05:30")
        self.error = None
        self.calls = []

    async def verify(self, screenshot_data_uri, utr):
        self.calls.append((screenshot_data_uri, utr))
        if self.error:
            raise self.error
        return self.result


class FakeStorage:
    def __init__(self):
        self.error = None
        self.uploads = []

    async def upload(self, screenshot, key_prefix):
        if self.error:
            raise self.error
        key = f"{key_prefix}{screenshot.filename}"
        self.uploads.append(key)
        return f"https://storage.test/{key}"


class RecordingMailer(Mailer):
    def __init__(self, **kwargs):
        kwargs.setdefault("api_key", "re_test")
        kwargs.setdefault("sender", "noreply@founders.test")
        kwargs.setdefault("admin_email", "admin@founders.test")
        super().__init__(**kwargs)
        self.sent = []
        self.fail = False

    async def send(self, to, subject, html):
        if self.fail:
            raise RuntimeError("resend is down")
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture
def app_state(tmp_path, monkeypatch):
    """Point the global state at a temp directory and fake collaborators"""
    settings = Settings(data_dir=str(tmp_path))
    fakes = {
        "SETTINGS": settings,
        "STORE": JsonStore(tmp_path),
        "VERIFIER": FakeVerifier(),
        "STORAGE": FakeStorage(),
        "MAILER": RecordingMailer(),
    }
    for name, value in fakes.items():
        monkeypatch.setattr(state, name, value)
    return state


def make_form(n=1, image=None, **overrides):
    """Valid flat registration form; n keeps identifiers unique"""
    form = {
        "teamName": f"Squad {n}",
        "contactEmail": f"captain{n}@example.com",
        "contactPhone": f"98765{n:05d}",
        "utrNumber": f"UTR{n:09d}",
        "screenshot": ScreenshotUpload(
            filename=f"pay{n}.png",
            content_type="image/png",
            content=image if image is not None else f"png-bytes-{n}".encode(),
        ),
    }
    for i in range(4):
        form[f"players.{i}.id"] = f"P{n}-{i}"
        form[f"players.{i}.level"] = "55"
    form.update(overrides)
    return form
