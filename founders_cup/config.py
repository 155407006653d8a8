"""
Configuration loader
"""
import os
import yaml
from pathlib import Path
from dotenv import load_dotenv

from founders_cup.models import Settings


DEFAULT_CONFIG_PATH = "config/settings.yaml"


def load_config(config_path: str = None) -> Settings:
    """
    Load settings from YAML file, then apply secrets from the environment

    Args:
        config_path: Path to config file (default: $FOUNDERS_CONFIG or config/settings.yaml)

    Returns:
        Settings object
    """
    path = Path(config_path or os.environ.get("FOUNDERS_CONFIG", DEFAULT_CONFIG_PATH))

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    return apply_env_overrides(Settings(**data))


def apply_env_overrides(settings: Settings) -> Settings:
    """
    Fill API keys and addresses from environment variables (.env supported)

    Environment values win over the YAML file.
    """
    load_dotenv()

    mail = settings.mail.model_copy(update=_present({
        "api_key": os.environ.get("RESEND_API_KEY"),
        "sender": os.environ.get("EMAIL_USER"),
        "admin_email": os.environ.get("ADMIN_EMAIL"),
    }))
    verifier = settings.verifier.model_copy(update=_present({
        "url": os.environ.get("VERIFIER_URL"),
        "api_key": os.environ.get("VERIFIER_API_KEY"),
    }))
    storage = settings.storage.model_copy(update=_present({
        "upload_url": os.environ.get("STORAGE_UPLOAD_URL"),
        "api_key": os.environ.get("STORAGE_API_KEY"),
    }))

    update = {"mail": mail, "verifier": verifier, "storage": storage}
    if os.environ.get("DATA_DIR"):
        update["data_dir"] = os.environ["DATA_DIR"]

    return settings.model_copy(update=update)


def _present(values: dict) -> dict:
    return {k: v for k, v in values.items() if v}
