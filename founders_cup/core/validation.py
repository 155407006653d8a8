"""
Registration form parsing and validation
"""
import math
import re
from typing import Any, List, Mapping, Union

from pydantic import ValidationError, field_validator

from founders_cup.models import CamelModel, Player, ScreenshotUpload


PLAYERS_PER_TEAM = 4
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ACCEPTED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]

EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)([A-Z0-9_'+\-\.]*)[A-Z0-9_+-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")


class RegistrationValidationError(ValueError):
    """First failing field, formatted as '<dotted.path>: <message>'"""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _check_length(value: Any, minimum: int, maximum: int, too_short: str, too_long: str) -> str:
    text = _as_text(value)
    if len(text) < minimum:
        raise ValueError(too_short)
    if len(text) > maximum:
        raise ValueError(too_long)
    return text


def _coerce_number(value: Any) -> Union[int, float]:
    """Form fields arrive as strings; '' counts as 0"""
    if value is None or isinstance(value, bool):
        raise ValueError("Expected number")
    if isinstance(value, str):
        value = value.strip() or "0"
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("Expected number")
    if not math.isfinite(number):
        raise ValueError("Expected number")
    return int(number) if number.is_integer() else number


class PlayerForm(CamelModel):
    id: str
    level: Union[int, float]

    @field_validator("id", mode="before")
    @classmethod
    def check_id(cls, value):
        return _check_length(
            value, 1, 30,
            "Player ID is required.",
            "Player ID must be 30 characters or less.",
        )

    @field_validator("level", mode="before")
    @classmethod
    def check_level(cls, value):
        level = _coerce_number(value)
        if level < 30:
            raise ValueError("Player level must be 30 or above.")
        if level > 100:
            raise ValueError("Invalid level.")
        return level


class RegistrationForm(CamelModel):
    """Validated registration input, fields checked in declaration order"""
    team_name: str
    players: List[PlayerForm]
    contact_email: str
    contact_phone: str
    utr_number: str
    screenshot: ScreenshotUpload

    @field_validator("team_name", mode="before")
    @classmethod
    def check_team_name(cls, value):
        return _check_length(
            value, 1, 30,
            "Team Name is required.",
            "Team Name must be 30 characters or less.",
        )

    @field_validator("players")
    @classmethod
    def check_player_count(cls, value):
        if len(value) != PLAYERS_PER_TEAM:
            raise ValueError(f"Array must contain exactly {PLAYERS_PER_TEAM} element(s)")
        return value

    @field_validator("contact_email", mode="before")
    @classmethod
    def check_email(cls, value):
        text = _as_text(value)
        if not EMAIL_PATTERN.fullmatch(text):
            raise ValueError("Invalid email address.")
        return text

    @field_validator("contact_phone", mode="before")
    @classmethod
    def check_phone(cls, value):
        text = _as_text(value)
        if not PHONE_PATTERN.fullmatch(text):
            raise ValueError("Must be a valid 10-digit phone number.")
        return text

    @field_validator("utr_number", mode="before")
    @classmethod
    def check_utr(cls, value):
        return _check_length(
            value, 5, 30,
            "UTR number must be at least 5 characters.",
            "UTR number must be 30 characters or less.",
        )

    @field_validator("screenshot", mode="before")
    @classmethod
    def check_screenshot(cls, value):
        if not isinstance(value, ScreenshotUpload) or value.size == 0:
            raise ValueError("Screenshot is required.")
        if value.size > MAX_FILE_SIZE:
            raise ValueError("Max file size is 10MB.")
        if value.content_type not in ACCEPTED_IMAGE_TYPES:
            raise ValueError("Only .jpg, .jpeg, .png and .webp formats are supported.")
        return value

    def player_list(self) -> List[Player]:
        return [Player(id=p.id, level=p.level) for p in self.players]


def parse_registration_form(form: Mapping[str, Any]) -> dict:
    """
    Map flat form fields onto the nested registration shape

    The form carries four fixed player slots as players.N.id / players.N.level.
    """
    players = [
        {"id": form.get(f"players.{i}.id"), "level": form.get(f"players.{i}.level")}
        for i in range(PLAYERS_PER_TEAM)
    ]
    return {
        "teamName": form.get("teamName"),
        "players": players,
        "contactEmail": form.get("contactEmail"),
        "contactPhone": form.get("contactPhone"),
        "utrNumber": form.get("utrNumber"),
        "screenshot": form.get("screenshot"),
    }


def _error_message(error: dict) -> str:
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return error["msg"]


def validate_registration(raw: Mapping[str, Any]) -> RegistrationForm:
    """
    Validate parsed registration data

    Raises:
        RegistrationValidationError: For the first failing field, e.g.
            "players.2.level: Player level must be 30 or above."
    """
    try:
        return RegistrationForm.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        path = ".".join(str(part) for part in first["loc"])
        raise RegistrationValidationError(f"{path}: {_error_message(first)}") from exc


def normalize_key(value: str) -> str:
    """Comparison form for UTR numbers and email addresses"""
    return (value or "").strip().lower()
