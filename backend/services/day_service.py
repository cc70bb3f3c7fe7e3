# services/day_service.py
# A/B 요일 라벨 + 특별일(기말/휴일 등). 날짜별로 최대 1행, 지우기 값이면 행 삭제.
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from errors import ValidationError
from models.calendar import DayLabel, SpecialDay
from database import upsert
from services.calendar_rules import (
    DAY_LABELS,
    NORMAL_DAY,
    SPECIAL_DAY_TYPES,
    check_choice,
    optional_text,
    validate_school,
)
from services.calendar_time import parse_date, utcnow
from services.storage import storage_op

logger = logging.getLogger(__name__)


def list_day_labels(db: Session, school: str) -> List[DayLabel]:
    school = validate_school(school)
    return db.query(DayLabel).filter(DayLabel.school == school).order_by(DayLabel.date.asc()).all()


def set_day_label(db: Session, school: str, day, label: Optional[str]) -> Optional[DayLabel]:
    """
    날짜의 A/B 라벨을 저장(있으면 갱신)한다. label이 None/빈 문자열이면 행을 지운다.

    :param db: DB 세션
    :type db: Session
    :param school: 학교 코드
    :type school: str
    :param day: 날짜(date 또는 'YYYY-MM-DD')
    :param label: 'A' | 'B' | None
    :type label: Optional[str]
    :return: 저장된 행, 지운 경우 None
    :rtype: Optional[DayLabel]
    :raises ValidationError: 학교/날짜/라벨 값 오류
    """

    school = validate_school(school)
    d = parse_date(day)
    if label is not None and not isinstance(label, str):
        raise ValidationError("label", "'label' must be a string")
    value = (label or "").strip().upper()
    if not value:
        with storage_op(db, "clear_day_label", school=school, ident=d):
            db.query(DayLabel).filter(DayLabel.school == school, DayLabel.date == d).delete(synchronize_session=False)
            db.commit()
        return None

    check_choice(value, DAY_LABELS, "label")
    with storage_op(db, "set_day_label", school=school, ident=d):
        upsert(db, DayLabel, {"school": school, "date": d, "label": value, "updated_at": utcnow()}, keys=["school", "date"])
        db.commit()
    return db.query(DayLabel).filter(DayLabel.school == school, DayLabel.date == d).one()


def list_special_days(db: Session, school: str) -> List[SpecialDay]:
    school = validate_school(school)
    return db.query(SpecialDay).filter(SpecialDay.school == school).order_by(SpecialDay.date.asc()).all()


def set_special_day(
    db: Session,
    school: str,
    day,
    day_type: Optional[str],
    description: Optional[str] = None,
) -> Optional[SpecialDay]:
    """
    특별일 유형을 저장한다. 'normal' 또는 None이면 행을 지운다(행 없음 = 평일).

    :raises ValidationError: 허용되지 않는 유형
    """

    school = validate_school(school)
    d = parse_date(day)
    if day_type is not None and not isinstance(day_type, str):
        raise ValidationError("type", "'type' must be a string")
    value = (day_type or "").strip().lower()
    if not value or value == NORMAL_DAY:
        with storage_op(db, "clear_special_day", school=school, ident=d):
            db.query(SpecialDay).filter(SpecialDay.school == school, SpecialDay.date == d).delete(synchronize_session=False)
            db.commit()
        return None

    check_choice(value, SPECIAL_DAY_TYPES, "type")
    values = {
        "school": school,
        "date": d,
        "type": value,
        "description": optional_text(description),
        "updated_at": utcnow(),
    }
    with storage_op(db, "set_special_day", school=school, ident=d):
        upsert(db, SpecialDay, values, keys=["school", "date"])
        db.commit()
    return db.query(SpecialDay).filter(SpecialDay.school == school, SpecialDay.date == d).one()
