from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_claims
from backend.auth.jwt_handler import TokenClaims
from backend.database import get_db
from backend.routes.validators import require_utf8
from backend.services import result_service
from backend.services.result_service import Measurements

router = APIRouter(tags=['results'])

MAX_ACUITY_LENGTH = 20
MAX_CONDITION_LENGTH = 255


class CreateResultRequest(BaseModel):
    left_eye_acuity: str | None = None
    right_eye_acuity: str | None = None
    left_eye_power: float | None = None
    right_eye_power: float | None = None
    left_eye_condition: str | None = None
    right_eye_condition: str | None = None

    @field_validator('left_eye_acuity', 'right_eye_acuity')
    @classmethod
    def validate_acuity(cls, value: str | None) -> str | None:
        if value is None:
            return None
        require_utf8(value)

        normalized = value.strip()
        if len(normalized) > MAX_ACUITY_LENGTH:
            raise ValueError(f'Acuity must be {MAX_ACUITY_LENGTH} characters or fewer.')

        return normalized

    @field_validator('left_eye_condition', 'right_eye_condition')
    @classmethod
    def validate_condition(cls, value: str | None) -> str | None:
        if value is None:
            return None
        require_utf8(value)

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > MAX_CONDITION_LENGTH:
            raise ValueError(f'Condition must be {MAX_CONDITION_LENGTH} characters or fewer.')

        return normalized


class CreateResultResponse(BaseModel):
    message: str
    result_id: int = Field(alias='resultId')

    class Config:
        populate_by_name = True


class ResultRowResponse(BaseModel):
    id: int
    user_id: int
    left_eye_acuity: str
    right_eye_acuity: str
    left_eye_power: float | None = None
    right_eye_power: float | None = None
    left_eye_condition: str | None = None
    right_eye_condition: str | None = None
    test_date: datetime

    class Config:
        from_attributes = True


@router.post(
    '',
    response_model=CreateResultResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_result(
    data: CreateResultRequest,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    result = result_service.submit_result(
        db,
        claims.subject_id,
        Measurements(**data.model_dump()),
    )
    return CreateResultResponse(message='Test result saved successfully', result_id=result.id)


@router.get('', response_model=list[ResultRowResponse])
def list_my_results(
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return result_service.list_results(db, claims.subject_id)
