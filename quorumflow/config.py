# file: config.py

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    db_user = os.getenv("DB_USER")
    db_password = os.getenv("DB_PASSWORD")
    db_host = os.getenv("DB_HOST")
    db_port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME")
    if db_user and db_password and db_host and db_name:
        return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"

    return "sqlite+aiosqlite:///./quorumflow.db"


def masked_database_url(url: str) -> str:
    """Hide the password part of a database URL for log output."""
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:****@{host}"


DATABASE_URL = _database_url()

FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS")
FIREBASE_STORAGE_BUCKET = os.getenv("FIREBASE_STORAGE_BUCKET")

REPORT_TEMPLATE_PATH = os.getenv("REPORT_TEMPLATE_PATH", "template/reporte_v2.docx")
REPORT_TEMPLATE_FILE = os.getenv("REPORT_TEMPLATE_FILE")

VAPID_PUBLIC_KEY = os.getenv("VAPID_PUBLIC_KEY")
VAPID_PRIVATE_KEY = os.getenv("VAPID_PRIVATE_KEY")
VAPID_SUBJECT_EMAIL = os.getenv("VAPID_SUBJECT_EMAIL", "mailto:example@yourdomain.org")

IMAGE_FETCH_CONCURRENCY = int(os.getenv("IMAGE_FETCH_CONCURRENCY", "6"))
IMAGE_FETCH_TIMEOUT = float(os.getenv("IMAGE_FETCH_TIMEOUT", "15"))
PUSH_CONCURRENCY = int(os.getenv("PUSH_CONCURRENCY", "8"))

NOTIFICATION_HOUR = int(os.getenv("NOTIFICATION_HOUR", "9"))

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
