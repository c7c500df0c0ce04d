"""Portal configuration: environment variables with a .env fallback."""

import logging
import os

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

EMAIL_SERVICE_URL = os.getenv("EMAIL_SERVICE_URL", "https://emailservice-5iny.onrender.com")
PORTAL_DB_PATH = os.getenv("PORTAL_DB_PATH", os.path.join(os.path.dirname(__file__), "portal.db"))
DATABASE_URL = f"sqlite:///{PORTAL_DB_PATH}"

TOKEN_STORE_KEY = os.getenv("TOKEN_STORE_KEY", "token")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30.0"))
NOTIFICATION_HISTORY = int(os.getenv("NOTIFICATION_HISTORY", "50"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
