"""
Configuration
=============

Settings come from environment variables, optionally loaded from a .env file.

Environment Variables:
    SAFARI_PASSWORD: Shared secret devices send in the X-Password header
    DATA_FILE: Where sightings are saved (default: safari-data.json)
    AUTOSAVE_INTERVAL: Seconds between background saves (default: 300)
    HOST / PORT: Where the server listens (default: 0.0.0.0:3000)
    CORS_ORIGINS: Comma-separated allowed origins (default: *)
    EXPORT_TIMEZONE: IANA zone for CSV dates, e.g. Africa/Nairobi
                     (default: server local time)
"""

import logging
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class Config:
    """
    Application configuration loaded from environment variables.

    Defaults are set for local development.
    """

    # Shared secret for every endpoint except /health
    PASSWORD = os.getenv("SAFARI_PASSWORD", "safari2025")

    # JSON file holding all sightings
    DATA_FILE = Path(os.getenv("DATA_FILE", "safari-data.json"))

    # Background save interval in seconds (5 minutes)
    AUTOSAVE_INTERVAL = int(os.getenv("AUTOSAVE_INTERVAL", "300"))

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))

    # Allowed CORS origins
    # Devices load the app from anywhere, so the default is wide open
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    EXPORT_TIMEZONE = os.getenv("EXPORT_TIMEZONE", "")


def export_timezone() -> Optional[ZoneInfo]:
    """Timezone for CSV export, or None for server local time."""
    if not Config.EXPORT_TIMEZONE:
        return None
    try:
        return ZoneInfo(Config.EXPORT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown EXPORT_TIMEZONE {Config.EXPORT_TIMEZONE!r}, using server local time")
        return None
