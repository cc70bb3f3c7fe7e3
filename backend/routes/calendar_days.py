# routes/calendar_days.py
# A/B 요일 라벨 / 특별일 라우터
# - /api/day-schedules, /api/day-types : 초기 버전 경로(POST 하나로 저장/삭제)
# - /api/{school}/day-labels, /api/{school}/special-days : 날짜 경로 PUT
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from routes.admin_auth import require_admin
from routes.calendar_render import _pack_day_label, _pack_legacy_schedule, _pack_special_day
from routes.school_scope import school_from_body, school_from_path, school_from_query
from schemas.calendar_schema import DayLabelIn, LegacyDaySchedule, LegacyDayType, SpecialDayIn
from services import day_service
from services.calendar_time import format_date, parse_date

router = APIRouter(prefix="/api", tags=["days"])


# 초기 버전 경로
@router.get("/day-schedules")
def legacy_list_day_schedules(school: str = Depends(school_from_query), db: Session = Depends(get_db)):
    return [_pack_legacy_schedule(r) for r in day_service.list_day_labels(db, school)]


@router.post("/day-schedules")
def legacy_set_day_schedule(
    body: LegacyDaySchedule,
    school: str = Depends(school_from_body),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    # schedule이 null이면 해당 날짜 라벨 삭제
    day_service.set_day_label(db, school, body.date, body.schedule)
    return {"success": True}


@router.get("/day-types")
def legacy_list_day_types(school: str = Depends(school_from_query), db: Session = Depends(get_db)):
    return [_pack_special_day(r) for r in day_service.list_special_days(db, school)]


@router.post("/day-types")
def legacy_set_day_type(
    body: LegacyDayType,
    school: str = Depends(school_from_body),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    day_service.set_special_day(db, school, body.date, body.type, body.description)
    return {"success": True}


# 학교별 경로
@router.get("/{school}/day-labels")
def list_day_labels(school: str = Depends(school_from_path), db: Session = Depends(get_db)):
    return [_pack_day_label(r) for r in day_service.list_day_labels(db, school)]


@router.put("/{school}/day-labels/{day}")
def put_day_label(
    day: str,
    body: DayLabelIn,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    날짜의 A/B 라벨 저장. label이 null/빈 값이면 삭제(응답 label=None).

    :param day: YYYY-MM-DD
    :type day: str
    :param body: {"label": "A" | "B" | null}
    :type body: DayLabelIn
    """

    d = parse_date(day)
    row = day_service.set_day_label(db, school, d, body.label)
    if row is None:
        return {"school": school, "date": format_date(d), "label": None}
    return _pack_day_label(row)


@router.get("/{school}/special-days")
def list_special_days(school: str = Depends(school_from_path), db: Session = Depends(get_db)):
    return [_pack_special_day(r) for r in day_service.list_special_days(db, school)]


@router.put("/{school}/special-days/{day}")
def put_special_day(
    day: str,
    body: SpecialDayIn,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    d = parse_date(day)
    row = day_service.set_special_day(db, school, d, body.type, body.description)
    if row is None:
        return {"school": school, "date": format_date(d), "type": None}
    return _pack_special_day(row)
