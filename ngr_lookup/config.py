"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path)

# Postcode lookup service (postcodes.io, free, no auth)
POSTCODES_API_URL: str = os.getenv("POSTCODES_API_URL", "https://api.postcodes.io").rstrip("/")
LOOKUP_TIMEOUT: float = float(os.getenv("LOOKUP_TIMEOUT", "10"))

# Connectivity probe used to tell "offline" apart from a failing service
CONNECTIVITY_PROBE_HOST: str = os.getenv("CONNECTIVITY_PROBE_HOST", "1.1.1.1")
CONNECTIVITY_PROBE_PORT: int = int(os.getenv("CONNECTIVITY_PROBE_PORT", "53"))
CONNECTIVITY_PROBE_TIMEOUT: float = float(os.getenv("CONNECTIVITY_PROBE_TIMEOUT", "1.5"))

# CORS
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Rate limiting
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
RATE_LIMIT_LOOKUP: str = os.getenv("RATE_LIMIT_LOOKUP", "30/minute")
