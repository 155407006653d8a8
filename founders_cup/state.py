"""
Global application state
Shared resources accessible across all modules

Replaced at startup by main.lifespan from config/settings.yaml; tests swap
them for fakes.
"""
from founders_cup.core.store import JsonStore
from founders_cup.models import Settings
from founders_cup.services.notifications import Mailer
from founders_cup.services.storage import ScreenshotStorage
from founders_cup.services.verification import PaymentVerifier

SETTINGS: Settings = Settings()

# Flat-file document store (registration-state.json, registrations.json, ...)
STORE: JsonStore = JsonStore(SETTINGS.data_dir)

# External collaborators
VERIFIER: PaymentVerifier = PaymentVerifier.from_settings(SETTINGS.verifier)
STORAGE: ScreenshotStorage = ScreenshotStorage.from_settings(SETTINGS.storage)
MAILER: Mailer = Mailer.from_settings(SETTINGS.mail, SETTINGS.organizer, SETTINGS.timezone)


def configure(settings: Settings) -> None:
    """Rebuild the store and adapters for new settings"""
    global SETTINGS, STORE, VERIFIER, STORAGE, MAILER
    SETTINGS = settings
    STORE = JsonStore(settings.data_dir)
    VERIFIER = PaymentVerifier.from_settings(settings.verifier)
    STORAGE = ScreenshotStorage.from_settings(settings.storage)
    MAILER = Mailer.from_settings(settings.mail, settings.organizer, settings.timezone)
