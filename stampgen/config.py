"""
Settings for the timestamp generator, read once from the environment.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from tzlocal import get_localzone

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.fanar.qa/v1"
DEFAULT_MODEL = "Fanar"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    default_timezone: str = "UTC"
    telegram_bot_token: Optional[str] = None
    log_level: str = "INFO"


def host_timezone_name():
    """Returns the IANA name of the machine's local zone, or UTC if it can't be determined."""
    try:
        return str(get_localzone())
    except Exception as e:
        logger.warning(f"Could not determine local time zone, using UTC: {e}")
        return "UTC"


def load_settings(env_file=None) -> Settings:
    """
    Loads .env (if present) and builds a Settings object from the environment.
    Empty variables are treated as unset.
    """
    load_dotenv(env_file)
    timeout = os.getenv("LLM_TIMEOUT")
    return Settings(
        api_key=os.getenv("FANAR_API_KEY") or None,
        base_url=os.getenv("LLM_BASE_URL") or DEFAULT_BASE_URL,
        model=os.getenv("LLM_MODEL") or DEFAULT_MODEL,
        timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        default_timezone=os.getenv("DEFAULT_TIMEZONE") or host_timezone_name(),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN") or None,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
