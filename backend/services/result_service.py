import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.errors import InternalError, ValidationError
from backend.models.test_result import TestResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Measurements:
    left_eye_acuity: str | None
    right_eye_acuity: str | None
    left_eye_power: float | None = None
    right_eye_power: float | None = None
    left_eye_condition: str | None = None
    right_eye_condition: str | None = None


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def submit_result(db: Session, user_id: int, measurements: Measurements) -> TestResult:
    # user_id always comes from the verified token, never from the request body
    if _is_blank(measurements.left_eye_acuity) or _is_blank(measurements.right_eye_acuity):
        raise ValidationError('Missing required test result fields')

    result = TestResult(
        user_id=user_id,
        left_eye_acuity=measurements.left_eye_acuity,
        right_eye_acuity=measurements.right_eye_acuity,
        left_eye_power=measurements.left_eye_power,
        right_eye_power=measurements.right_eye_power,
        left_eye_condition=measurements.left_eye_condition,
        right_eye_condition=measurements.right_eye_condition,
    )
    try:
        db.add(result)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Database error while saving result for user %s.', user_id)
        raise InternalError('Failed to save test result') from exc

    logger.info('Saved test result %s for user %s.', result.id, user_id)
    return result


def list_results(db: Session, user_id: int) -> list[TestResult]:
    try:
        return (
            db.query(TestResult)
            .filter(TestResult.user_id == user_id)
            .order_by(TestResult.test_date.desc(), TestResult.id.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception('Database error while fetching results for user %s.', user_id)
        raise InternalError('Failed to fetch test history') from exc
