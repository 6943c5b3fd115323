import logging

import requests

from finance_client import config
from finance_client.auth import TokenStore, cookie_domain_for

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-2xx answer from the API, carrying the server's message and field errors."""

    def __init__(self, message: str, status_code: int, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        if token_store is None:
            token_store = TokenStore(cookie_domain=cookie_domain_for(self.base_url))
        self.token_store = token_store
        self.session = session if session is not None else requests.Session()
        self.session.cookies = self.token_store.cookies
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT_SECONDS

    def _url(self, endpoint: str) -> str:
        return self.base_url + "/" + endpoint.lstrip("/")

    def request(self, method: str, endpoint: str, body=None) -> dict:
        headers = {"Content-Type": "application/json"}
        token = self.token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        url = self._url(endpoint)
        response = self.session.request(method, url, headers=headers, json=body, timeout=self.timeout)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"data": data}

        if not response.ok:
            if config.DEBUG:
                logger.error(
                    "API error %s %s on %s %s: %s",
                    response.status_code,
                    response.reason,
                    method,
                    url,
                    data,
                )
            raise ApiError(
                data.get("message") or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                errors=data.get("errors"),
            )

        return data

    def get(self, endpoint: str) -> dict:
        return self.request("GET", endpoint)

    def post(self, endpoint: str, body) -> dict:
        return self.request("POST", endpoint, body)

    def put(self, endpoint: str, body) -> dict:
        return self.request("PUT", endpoint, body)

    def delete(self, endpoint: str) -> dict:
        return self.request("DELETE", endpoint)
