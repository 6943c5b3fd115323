from datetime import datetime, timedelta, timezone

import jwt

from finance_backend.core import config


class TokenConfigError(RuntimeError):
    """Raised when tokens cannot be signed or checked because JWT_SECRET is unset."""


def _require_secret() -> str:
    if not config.JWT_SECRET:
        raise TokenConfigError("JWT_SECRET is not defined in the environment.")
    return config.JWT_SECRET


def create_access_token(user_id: str, email: str, expires_in_seconds: int | None = None) -> str:
    secret = _require_secret()
    if expires_in_seconds is None:
        expires_in_seconds = config.JWT_EXPIRES_SECONDS
    issued_at = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=expires_in_seconds),
    }
    return jwt.encode(payload, secret, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    secret = _require_secret()
    return jwt.decode(
        token,
        secret,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": ["exp", "iat"]},
    )
