"""Token persistence for the dashboard client.

The token lives in two places, mirroring what a browser session keeps: a
local-storage file and a ``token`` cookie in the shared cookie jar. Reads
prefer local storage and fall back to the cookie.
"""

import json
import time
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel
from requests.cookies import RequestsCookieJar, create_cookie

from finance_client import config


class User(BaseModel):
    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: User


def cookie_domain_for(url: str) -> str:
    """Host the token cookie is scoped to for an API base URL."""
    host = urlsplit(url).hostname or ""
    # cookiejar matches dotless hosts such as localhost as "<host>.local".
    if host and "." not in host:
        host += ".local"
    return host


class TokenStore:
    def __init__(
        self,
        storage_path: Path | str | None = None,
        cookies: RequestsCookieJar | None = None,
        cookie_domain: str | None = None,
    ):
        self.storage_path = Path(storage_path) if storage_path is not None else config.STORAGE_PATH
        self.cookies = cookies if cookies is not None else RequestsCookieJar()
        self.cookie_domain = cookie_domain if cookie_domain is not None else cookie_domain_for(config.API_URL)

    def _read_storage(self) -> dict:
        try:
            with self.storage_path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except (FileNotFoundError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_storage(self, data: dict) -> None:
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with self.storage_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle)

    def _cookie_token(self) -> str | None:
        for cookie in self.cookies:
            if cookie.name == config.TOKEN_KEY and cookie.value and not cookie.is_expired():
                return cookie.value
        return None

    def set_token(self, token: str) -> None:
        data = self._read_storage()
        data[config.TOKEN_KEY] = token
        self._write_storage(data)
        self.cookies.set_cookie(
            create_cookie(
                name=config.TOKEN_KEY,
                value=token,
                domain=self.cookie_domain,
                path="/",
                expires=int(time.time()) + config.TOKEN_MAX_AGE_SECONDS,
                rest={"SameSite": "Lax"},
            )
        )

    def get_token(self) -> str | None:
        token = self._read_storage().get(config.TOKEN_KEY)
        if token:
            return token

        token = self._cookie_token()
        if token:
            data = self._read_storage()
            data[config.TOKEN_KEY] = token
            self._write_storage(data)
            return token
        return None

    def remove_token(self) -> None:
        data = self._read_storage()
        if data.pop(config.TOKEN_KEY, None) is not None:
            self._write_storage(data)
        for cookie in list(self.cookies):
            if cookie.name == config.TOKEN_KEY:
                self.cookies.clear(cookie.domain, cookie.path, cookie.name)

    def is_authenticated(self) -> bool:
        return bool(self.get_token())
