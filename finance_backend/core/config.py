import os
import re

from dotenv import load_dotenv

load_dotenv()

_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_duration(value: str) -> int:
    """Convert ``7d``, ``12h``, ``30m``, ``45s`` or a bare number into seconds."""
    match = re.fullmatch(r"\s*(\d+)\s*([smhdw]?)\s*", value.lower())
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS.get(unit or "s")


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./finance.db")
DATABASE_ECHO = _get_bool(os.getenv("DATABASE_ECHO"), default=False)

JWT_SECRET = os.getenv("JWT_SECRET") or None
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "7d")
JWT_EXPIRES_SECONDS = parse_duration(JWT_EXPIRES_IN)

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))


def is_development() -> bool:
    return APP_ENV.strip().lower() == "development"


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and not JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set in production.")
