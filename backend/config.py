"""Settings loaded from environment variables (+ optional .env)."""
import os

from dotenv import load_dotenv

load_dotenv()

BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


# SQLite file backing the task store. Relative paths are resolved against the
# backend directory so the app and `alembic upgrade` agree on the same file.
DATABASE_PATH = os.path.join(BACKEND_DIR, os.getenv("WORKLIFE_DATABASE_PATH", "worklife.db"))

CORS_ORIGINS = _env_list("WORKLIFE_CORS_ORIGINS", ["http://localhost:5173", "http://localhost:8080"])

# Number shown to the user for texting in tasks. Delivery is simulated.
SMS_NUMBER = os.getenv("WORKLIFE_SMS_NUMBER", "+1 (555) 123-TODO")

LOG_LEVEL = os.getenv("WORKLIFE_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("WORKLIFE_LOG_FILE")

HOST = os.getenv("WORKLIFE_HOST", "0.0.0.0")
PORT = int(os.getenv("WORKLIFE_PORT", "8000"))
