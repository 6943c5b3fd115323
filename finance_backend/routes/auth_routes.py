import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, undefer

from finance_backend.auth import jwt_handler
from finance_backend.auth.dependencies import get_current_user
from finance_backend.database import get_db
from finance_backend.models.user import MIN_PASSWORD_LENGTH, User

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
DUPLICATE_EMAIL_DETAIL = 'User with this email already exists'
INVALID_CREDENTIALS_DETAIL = 'Invalid email or password'

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(value) -> str:
    if not isinstance(value, str):
        raise ValueError('Invalid email address')
    normalized = value.strip().lower()
    try:
        _email_adapter.validate_python(normalized)
    except ValidationError as exc:
        raise ValueError('Invalid email address') from exc
    return normalized


class SignupRequest(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if len(normalized) < MIN_NAME_LENGTH:
            raise ValueError(f'Name must be at least {MIN_NAME_LENGTH} characters')
        return normalized

    @field_validator('email', mode='before')
    @classmethod
    def validate_email(cls, value) -> str:
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator('email', mode='before')
    @classmethod
    def validate_email(cls, value) -> str:
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required')
        return value


class UserResponse(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse


def build_auth_response(user: User, message: str) -> AuthResponse:
    token = jwt_handler.create_access_token(user_id=user.id, email=user.email)
    return AuthResponse(message=message, token=token, user=UserResponse.model_validate(user))


@router.post('/signup', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL_DETAIL)

    user = User(name=payload.name, email=payload.email)
    user.set_password(payload.password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent signup for the same address.
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_EMAIL_DETAIL) from exc
    db.refresh(user)

    logger.info('Created user %s (%s)', user.email, user.id)
    return build_auth_response(user, 'User created successfully')


@router.post('/login', response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    logger.info('Login attempt for %s', payload.email)
    user = (
        db.query(User)
        .options(undefer(User.hashed_password))
        .filter(User.email == payload.email)
        .first()
    )

    if user is None or not user.check_password(payload.password):
        logger.warning('Rejected login for %s', payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS_DETAIL)

    return build_auth_response(user, 'Login successful')


@router.get('/me', response_model=MeResponse)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == current_user.id).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found')
    return MeResponse(user=UserResponse.model_validate(user))
