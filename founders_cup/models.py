"""
Data models for the registration server
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional, Union


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire and on disk"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Player(CamelModel):
    id: str
    level: Union[int, float]


class TeamRegistration(CamelModel):
    """One accepted team for the week. Never modified after creation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    team_name: str
    players: List[Player]
    contact_email: str
    contact_phone: str              # exactly 10 digits
    utr_number: str
    screenshot_hash: str            # sha256 hex of the uploaded image
    registration_time: str          # ISO timestamp


class RegistrationState(CamelModel):
    """Cached counter; must equal len(WeeklyData.teams)"""
    registration_week_start: str    # ISO, Monday 00:00 local
    registered_teams_count: int = 0


class WeeklyData(CamelModel):
    registration_week_start: str
    teams: List[TeamRegistration] = []


class WinnerInfo(CamelModel):
    rank: Literal["1st", "2nd"]
    team_name: str


class WeeklyWinner(CamelModel):
    week_start: str
    winners: List[WinnerInfo]
    total_teams: int


class PublicTeam(CamelModel):
    """Roster entry without contact or payment details"""
    team_name: str
    players: List[Player]


class ScreenshotUpload(CamelModel):
    """Uploaded payment screenshot as received from the form"""
    filename: str = "screenshot"
    content_type: str = ""
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)


class VerificationResult(CamelModel):
    """Verdict returned by the payment verification service"""
    is_utr_match: bool
    reason: Optional[str] = None
    transaction_date: Optional[str] = None


class RegistrationResult(CamelModel):
    success: bool
    message: Optional[str] = None
    data: Optional[TeamRegistration] = None
    error: Optional[str] = None


class RegistrationStatus(CamelModel):
    slots_filled: int
    total_slots: int
    is_open: bool
    week_start: str


class LookupResult(CamelModel):
    success: bool
    data: Optional[TeamRegistration] = None
    error: Optional[str] = None


class VerifierSettings(BaseModel):
    url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = 60.0


class StorageSettings(BaseModel):
    upload_url: Optional[str] = None       # objects are PUT to <upload_url>/<key>
    public_base_url: Optional[str] = None  # defaults to upload_url
    api_key: Optional[str] = None
    timeout: float = 30.0


class MailSettings(BaseModel):
    api_url: str = "https://api.resend.com/emails"
    api_key: Optional[str] = None
    sender: Optional[str] = None           # EMAIL_USER
    admin_email: Optional[str] = None
    timeout: float = 15.0


class Settings(BaseModel):
    """Server configuration, loaded from config/settings.yaml"""
    organizer: str = "The Founders Official"
    timezone: str = "Asia/Kolkata"
    data_dir: str = "data"
    entry_fee: str = "₹100"
    prizes: Dict[str, str] = {"1st": "₹750", "2nd": "₹120"}
    schedule: Dict[str, str] = {}
    verifier: VerifierSettings = VerifierSettings()
    storage: StorageSettings = StorageSettings()
    mail: MailSettings = MailSettings()
