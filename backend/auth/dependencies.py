from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth import jwt_handler
from backend.auth.jwt_handler import TokenClaims
from backend.core.config import Settings
from backend.core.errors import UnauthenticatedError

# auto_error is off so a missing header maps to 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Missing bearer token")

    return jwt_handler.decode_access_token(credentials.credentials, settings)
