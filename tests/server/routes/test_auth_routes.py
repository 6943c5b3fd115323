import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from finance_backend.auth import jwt_handler
from finance_backend.core import config
from finance_backend.models.user import User
from finance_backend.routes.auth_routes import LoginRequest, SignupRequest, login, me, signup


def _signup(api_client, **overrides):
    body = {'name': 'Grace Hopper', 'email': 'grace@example.com', 'password': 'cobol-rules'}
    body.update(overrides)
    return api_client.post('/api/auth/signup', json=body)


def _assert_no_password(payload) -> None:
    text = str(payload).lower()
    assert 'password' not in text
    assert '$2b$' not in text


def test_signup_request_normalizes_fields() -> None:
    request = SignupRequest(name='  Grace  ', email=' GRACE@Example.COM ', password='cobol-rules')

    assert request.name == 'Grace'
    assert request.email == 'grace@example.com'


@pytest.mark.parametrize(
    ('overrides', 'message'),
    [
        ({'name': ' G '}, 'Name must be at least 2 characters'),
        ({'email': 'grace-at-example'}, 'Invalid email address'),
        ({'password': '12345'}, 'Password must be at least 6 characters'),
    ],
)
def test_signup_request_rejects_invalid_fields(overrides: dict, message: str) -> None:
    body = {'name': 'Grace Hopper', 'email': 'grace@example.com', 'password': 'cobol-rules'}
    body.update(overrides)

    with pytest.raises(ValidationError) as exception_info:
        SignupRequest(**body)

    assert message in str(exception_info.value)


def test_login_request_requires_password() -> None:
    with pytest.raises(ValidationError) as exception_info:
        LoginRequest(email='grace@example.com', password='')

    assert 'Password is required' in str(exception_info.value)


def test_signup_handler_hashes_password_and_issues_token(auth_db) -> None:
    response = signup(
        payload=SignupRequest(name='Grace Hopper', email='grace@example.com', password='cobol-rules'),
        db=auth_db,
    )

    stored = auth_db.query(User).filter(User.email == 'grace@example.com').one()
    assert stored.hashed_password != 'cobol-rules'
    assert stored.check_password('cobol-rules')
    assert response.message == 'User created successfully'
    assert response.user.id == stored.id
    assert jwt_handler.decode_access_token(response.token)['user_id'] == stored.id


def test_signup_handler_rejects_duplicate_email(auth_db) -> None:
    payload = SignupRequest(name='Grace Hopper', email='grace@example.com', password='cobol-rules')
    signup(payload=payload, db=auth_db)

    with pytest.raises(HTTPException) as exception_info:
        signup(
            payload=SignupRequest(name='Other Grace', email='GRACE@example.com', password='another-pass'),
            db=auth_db,
        )

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'User with this email already exists'


def test_login_handler_rejects_wrong_password(auth_db) -> None:
    signup(
        payload=SignupRequest(name='Grace Hopper', email='grace@example.com', password='cobol-rules'),
        db=auth_db,
    )

    with pytest.raises(HTTPException) as exception_info:
        login(payload=LoginRequest(email='grace@example.com', password='fortran-rules'), db=auth_db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid email or password'


def test_me_handler_returns_not_found_when_user_vanished(auth_db) -> None:
    ghost = User(id='f' * 32, name='Ghost', email='ghost@example.com')

    with pytest.raises(HTTPException) as exception_info:
        me(current_user=ghost, db=auth_db)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'User not found'


def test_health_endpoint(api_client) -> None:
    response = api_client.get('/api/health')

    assert response.status_code == 200
    assert response.json() == {'status': 'OK', 'message': 'Server is running'}


def test_signup_returns_201_with_token_and_user(api_client) -> None:
    response = _signup(api_client)

    assert response.status_code == 201
    body = response.json()
    assert body['message'] == 'User created successfully'
    assert body['user']['name'] == 'Grace Hopper'
    assert body['user']['email'] == 'grace@example.com'
    assert set(body['user']) == {'id', 'name', 'email'}
    _assert_no_password(body)


def test_signup_with_duplicate_email_returns_400(api_client) -> None:
    assert _signup(api_client).status_code == 201

    response = _signup(api_client, email='  Grace@Example.com ')

    assert response.status_code == 400
    assert response.json() == {'message': 'User with this email already exists'}


def test_signup_validation_failure_lists_fields(api_client) -> None:
    response = api_client.post('/api/auth/signup', json={'name': 'G', 'email': 'nope', 'password': '123'})

    assert response.status_code == 400
    body = response.json()
    assert body['message'] == 'Validation failed'
    assert {'field': 'name', 'message': 'Name must be at least 2 characters'} in body['errors']
    assert {'field': 'email', 'message': 'Invalid email address'} in body['errors']
    assert {'field': 'password', 'message': 'Password must be at least 6 characters'} in body['errors']


def test_signup_missing_field_is_reported(api_client) -> None:
    response = api_client.post('/api/auth/signup', json={'name': 'Grace Hopper', 'email': 'grace@example.com'})

    assert response.status_code == 400
    assert [error['field'] for error in response.json()['errors']] == ['password']


def test_malformed_json_body_returns_400(api_client) -> None:
    response = api_client.post(
        '/api/auth/login',
        content='{"email": ',
        headers={'Content-Type': 'application/json'},
    )

    assert response.status_code == 400
    assert response.json()['message'] == 'Validation failed'
    assert response.json()['errors'][0]['field'] == 'body'


def test_login_returns_token_for_same_user(api_client) -> None:
    user_id = _signup(api_client).json()['user']['id']

    response = api_client.post('/api/auth/login', json={'email': ' GRACE@example.com', 'password': 'cobol-rules'})

    assert response.status_code == 200
    body = response.json()
    assert body['message'] == 'Login successful'
    assert body['user']['id'] == user_id
    payload = jwt_handler.decode_access_token(body['token'])
    assert payload['user_id'] == user_id
    assert payload['email'] == 'grace@example.com'
    _assert_no_password(body)


@pytest.mark.parametrize(
    'credentials',
    [
        {'email': 'grace@example.com', 'password': 'wrong-password'},
        {'email': 'nobody@example.com', 'password': 'cobol-rules'},
    ],
)
def test_login_with_bad_credentials_returns_401(api_client, credentials: dict) -> None:
    _signup(api_client)

    response = api_client.post('/api/auth/login', json=credentials)

    assert response.status_code == 401
    assert response.json() == {'message': 'Invalid email or password'}


def test_me_without_token_returns_401(api_client) -> None:
    response = api_client.get('/api/auth/me')

    assert response.status_code == 401
    assert response.json() == {'message': 'Not authorized, no token provided'}


def test_me_with_expired_token_returns_401(api_client) -> None:
    user = _signup(api_client).json()['user']
    token = jwt_handler.create_access_token(user_id=user['id'], email=user['email'], expires_in_seconds=-60)

    response = api_client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401
    assert response.json() == {'message': 'Not authorized, token failed'}


def test_me_with_valid_token_returns_user(api_client) -> None:
    token = _signup(api_client).json()['token']

    response = api_client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 200
    body = response.json()
    assert body['user']['email'] == 'grace@example.com'
    _assert_no_password(body)


def test_me_for_deleted_user_returns_401(api_client, session_factory) -> None:
    signup_body = _signup(api_client).json()
    db = session_factory()
    try:
        db.query(User).filter(User.id == signup_body['user']['id']).delete()
        db.commit()
    finally:
        db.close()

    response = api_client.get('/api/auth/me', headers={'Authorization': f"Bearer {signup_body['token']}"})

    assert response.status_code == 401
    assert response.json() == {'message': 'User not found'}


def test_signup_without_secret_returns_500(api_client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'JWT_SECRET', None)
    monkeypatch.setattr(config, 'APP_ENV', 'production')

    response = _signup(api_client)

    assert response.status_code == 500
    assert response.json() == {'message': 'Something went wrong'}


@pytest.mark.parametrize('email', ['a@b@c.com', '<script>@x.y', 'a@b..c', '"@x.y'])
def test_signup_rejects_malformed_email(api_client, email: str) -> None:
    response = _signup(api_client, email=email)

    assert response.status_code == 400
    assert response.json()['errors'] == [{'field': 'email', 'message': 'Invalid email address'}]


def test_login_rejects_malformed_email(api_client) -> None:
    response = api_client.post('/api/auth/login', json={'email': 'a@b@c.com', 'password': 'cobol-rules'})

    assert response.status_code == 400
    assert response.json()['errors'] == [{'field': 'email', 'message': 'Invalid email address'}]
