import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


API_URL = os.getenv("FINANCE_API_URL", "http://localhost:5001/api")
STORAGE_PATH = Path(
    os.getenv("FINANCE_CLIENT_STORAGE", str(Path.home() / ".finance_client" / "storage.json"))
).expanduser()
DEBUG = _get_bool(os.getenv("FINANCE_CLIENT_DEBUG"), default=False)
REQUEST_TIMEOUT_SECONDS = float(os.getenv("FINANCE_CLIENT_TIMEOUT", "30"))

TOKEN_KEY = "token"
TOKEN_MAX_AGE_SECONDS = 7 * 24 * 60 * 60
