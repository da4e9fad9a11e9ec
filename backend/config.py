"""
Environment-driven settings shared by every service.

Values are read once at import time, after loading the project's .env file.
"""

import os
from typing import List

from dotenv import load_dotenv

# Load .env only once here
load_dotenv()

# Required when the gateway builds its own connection pool
DATABASE_URL = os.getenv("DATABASE_URL")

JWT_SECRET = os.getenv("JWT_SECRET")
TOKEN_EXPIRATION_MINUTES = int(os.getenv("TOKEN_EXPIRATION_MINUTES", 120))

DB_POOL_MIN_CONN = int(os.getenv("DB_POOL_MIN_CONN", 1))
DB_POOL_MAX_CONN = int(os.getenv("DB_POOL_MAX_CONN", 10))

GATEWAY_PORT = int(os.getenv("GATEWAY_PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def cors_origins() -> List[str]:
    """
    Allowed CORS origins, from a comma-separated CORS_ORIGINS value.
    Defaults to every origin.
    """
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
