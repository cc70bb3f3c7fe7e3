# routes/calendar_events.py
# 행사 라우터
# - /api/events            : 초기 버전 경로(학교는 쿼리/본문으로)
# - /api/{school}/events   : 학교별 경로 + 학년별 커리큘럼
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from routes.admin_auth import require_admin
from routes.calendar_render import _pack_event
from routes.school_scope import school_from_body, school_from_path, school_from_query
from schemas.calendar_schema import EventCreate, EventUpdate
from services import event_service

router = APIRouter(prefix="/api", tags=["events"])


# 초기 버전 경로
@router.get("/events")
def legacy_list_events(
    school: str = Depends(school_from_query),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    items = event_service.list_events(db, school, None, date_from, date_to)
    return [_pack_event(ev, entries) for ev, entries in items]


@router.post("/events")
def legacy_create_event(
    body: EventCreate,
    school: str = Depends(school_from_body),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ev, entries = event_service.create_event(db, school, body)
    return _pack_event(ev, entries)


@router.put("/events/{event_id}")
def legacy_update_event(
    event_id: int,
    body: EventUpdate,
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ev, entries = event_service.update_event(db, None, event_id, body)
    return _pack_event(ev, entries)


@router.delete("/events/{event_id}")
def legacy_delete_event(
    event_id: int,
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    event_service.delete_event(db, None, event_id)
    return {"success": True}


# 학교별 경로
@router.get("/{school}/events")
def list_events(
    school: str = Depends(school_from_path),
    department: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    db: Session = Depends(get_db),
):
    """
    학교 행사 목록(커리큘럼 포함)

    :param department: 부서 필터. 'master'면 전체
    :type department: Optional[str]
    :return: [{id, date, title, ..., life_curriculum: [...]}, ...]
    :rtype: List[dict]
    """

    items = event_service.list_events(db, school, department, date_from, date_to)
    return [_pack_event(ev, entries) for ev, entries in items]


@router.get("/{school}/events/{event_id}")
def get_event(
    event_id: int,
    school: str = Depends(school_from_path),
    db: Session = Depends(get_db),
):
    ev, entries = event_service.get_event(db, school, event_id)
    return _pack_event(ev, entries)


@router.post("/{school}/events", status_code=201)
def create_event(
    body: EventCreate,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ev, entries = event_service.create_event(db, school, body)
    return _pack_event(ev, entries)


@router.put("/{school}/events/{event_id}")
def update_event(
    event_id: int,
    body: EventUpdate,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ev, entries = event_service.update_event(db, school, event_id, body)
    return _pack_event(ev, entries)


@router.delete("/{school}/events/{event_id}")
def delete_event(
    event_id: int,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    event_service.delete_event(db, school, event_id)
    return {"success": True}
