"""Form actions for the login and signup screens."""

import logging

from finance_client.api import ApiClient, ApiError
from finance_client.auth import AuthResponse, TokenStore, User
from finance_client.routes import HOME_PATH, LOGIN_PATH

logger = logging.getLogger(__name__)


def _authenticate(client: ApiClient, store: TokenStore, endpoint: str, body: dict, fallback: str) -> dict:
    try:
        response = AuthResponse.model_validate(client.post(endpoint, body))
    except ApiError as exc:
        return {'error': exc.message or fallback, 'errors': exc.errors}

    store.set_token(response.token)
    logger.info('Signed in as %s', response.user.email)
    return {'redirect': HOME_PATH, 'user': response.user}


def login_action(client: ApiClient, store: TokenStore, email: str, password: str) -> dict:
    return _authenticate(
        client,
        store,
        '/auth/login',
        {'email': email, 'password': password},
        'Login failed. Please try again.',
    )


def signup_action(client: ApiClient, store: TokenStore, name: str, email: str, password: str) -> dict:
    return _authenticate(
        client,
        store,
        '/auth/signup',
        {'name': name, 'email': email, 'password': password},
        'Signup failed. Please try again.',
    )


def logout_action(store: TokenStore) -> dict:
    store.remove_token()
    return {'redirect': LOGIN_PATH}


def fetch_current_user(client: ApiClient):
    """Return the signed-in user, or ``None`` when the stored token is rejected."""
    try:
        data = client.get('/auth/me')
    except ApiError as exc:
        if exc.status_code in (401, 404):
            return None
        raise
    return User.model_validate(data['user'])
