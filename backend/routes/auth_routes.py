from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_claims, get_settings
from backend.auth.jwt_handler import TokenClaims
from backend.core.config import Settings
from backend.database import get_db
from backend.routes.validators import require_utf8
from backend.services import auth_service

router = APIRouter(tags=['auth'])


class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None

    @field_validator('email', 'name')
    @classmethod
    def validate_text(cls, value: str | None) -> str | None:
        return require_utf8(value)


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return require_utf8(value)


class MessageResponse(BaseModel):
    message: str


class PublicUserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    token: str
    user: PublicUserResponse


class CurrentUserResponse(BaseModel):
    id: int
    email: str
    role: str


@router.post('/register', response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    auth_service.register_user(db, data.email, data.password, data.name)
    return MessageResponse(message='User registered successfully')


@router.post('/login', response_model=LoginResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = auth_service.authenticate_user(db, settings, data.email, data.password)
    return LoginResponse(
        token=result.token,
        user=PublicUserResponse.model_validate(result.user),
    )


@router.get('/me', response_model=CurrentUserResponse)
def me(claims: TokenClaims = Depends(get_current_claims)):
    return CurrentUserResponse(id=claims.subject_id, email=claims.email, role=claims.role)
