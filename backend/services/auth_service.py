"""Registration and login.

Registration hashes the password and inserts one user row. Login reads the
user by email, checks the password and issues a signed session token. Both
unknown-email and wrong-password logins raise the same AuthenticationError so
callers cannot tell which one happened.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.jwt_handler import TokenClaims
from backend.auth.password import (
    MAX_PASSWORD_BYTES,
    PasswordHashError,
    hash_password,
    is_password_encodable,
    is_password_too_long,
    verify_password,
)
from backend.core.config import Settings
from backend.core.errors import (
    AuthenticationError,
    ConflictError,
    InternalError,
    ValidationError,
)
from backend.models.user import DEFAULT_ROLE, User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'


@dataclass(frozen=True)
class PublicUser:
    id: int
    email: str
    name: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> 'PublicUser':
        return cls(id=user.id, email=user.email, name=user.name, role=user.role)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: PublicUser


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def register_user(db: Session, email: str | None, password: str | None, name: str | None) -> User:
    if _is_blank(email) or _is_blank(password) or _is_blank(name):
        logger.warning('Registration rejected: missing email, password, or name.')
        raise ValidationError('Missing required fields (email, password, name)')
    if is_password_too_long(password):
        raise ValidationError(f'Password must be {MAX_PASSWORD_BYTES} bytes or fewer')
    if not is_password_encodable(password):
        raise ValidationError('Password must be valid UTF-8 text')

    try:
        hashed = hash_password(password)
    except (ValueError, TypeError) as exc:
        logger.exception('Password hashing failed during registration.')
        raise InternalError('Internal server error during registration') from exc

    user = User(email=email, hashed_password=hashed, name=name, role=DEFAULT_ROLE)
    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info('Registration rejected: email already registered (%s).', email)
        raise ConflictError('Email already registered') from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Database error during registration.')
        raise InternalError('Database error during registration') from exc

    logger.info('User %s registered with id %s.', user.email, user.id)
    return user


def authenticate_user(
    db: Session,
    settings: Settings,
    email: str | None,
    password: str | None,
) -> LoginResult:
    if _is_blank(email) or _is_blank(password):
        logger.warning('Login rejected: missing email or password.')
        raise ValidationError('Missing required fields (email, password)')

    try:
        user = db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as exc:
        logger.exception('Database error during login.')
        raise InternalError('Database error during login') from exc

    if user is None:
        logger.info('Login failed: no user for email %s.', email)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    try:
        matches = verify_password(password, user.hashed_password)
    except PasswordHashError as exc:
        logger.exception('Password verification failed for user %s.', user.id)
        raise InternalError('Internal server error during login') from exc

    if not matches:
        logger.info('Login failed: incorrect password for email %s.', email)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    token = jwt_handler.create_access_token(
        TokenClaims(subject_id=user.id, role=user.role, email=user.email),
        settings,
    )
    logger.info('User %s logged in.', user.id)
    return LoginResult(token=token, user=PublicUser.from_user(user))
