from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from backend.core.config import Settings
from backend.core.errors import ForbiddenError


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    role: str
    email: str


def create_access_token(
    claims: TokenClaims,
    settings: Settings,
    expires_minutes: int | None = None,
) -> str:
    expire_minutes = settings.jwt_expires_minutes if expires_minutes is None else expires_minutes
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=expire_minutes)
    payload = {
        "sub": str(claims.subject_id),
        "role": claims.role,
        "email": claims.email,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise ForbiddenError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise ForbiddenError("Invalid token") from exc

    role = payload.get("role")
    email = payload.get("email")
    try:
        subject_id = int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise ForbiddenError("Invalid token subject") from exc
    if not role or not email:
        raise ForbiddenError("Invalid token claims")

    return TokenClaims(subject_id=subject_id, role=role, email=email)
