"""User model definitions."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import deferred, validates

from finance_backend.auth import passwords
from finance_backend.database import Base

MIN_PASSWORD_LENGTH = 6


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Represents an application user.

    ``hashed_password`` is deferred so ordinary reads never load it; the login
    query undefers it explicitly.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_user_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = deferred(Column(String(255), nullable=False))
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @validates("email")
    def normalize_email(self, _key, value: str) -> str:
        return value.strip().lower()

    @validates("name")
    def normalize_name(self, _key, value: str) -> str:
        return value.strip()

    def set_password(self, password: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        self.hashed_password = passwords.hash_password(password)

    def check_password(self, password: str) -> bool:
        return passwords.verify_password(password, self.hashed_password)
