# services/event_service.py
# 행사 CRUD + 학년별 커리큘럼(life curriculum) 결합
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from errors import NotFoundError
from models.calendar import Event, CurriculumEntry
from schemas.calendar_schema import EventCreate, EventUpdate
from services.calendar_rules import (
    DEPARTMENT_ALL,
    optional_text,
    parse_grade,
    require_text,
    validate_school,
)
from services.calendar_time import parse_date, parse_hhmm, utcnow
from services.storage import storage_op

logger = logging.getLogger(__name__)

EventWithCurriculum = Tuple[Event, List[CurriculumEntry]]


def _curriculum_rows(raw: Optional[Dict[Any, Any]]) -> List[Tuple[int, Optional[str], Optional[str]]]:
    """
    {학년: {links, description}} 입력을 (grade, links, description) 목록으로 바꾼다.
    링크/설명이 모두 빈 학년은 건너뛴다.
    """

    rows = []
    for key, entry in (raw or {}).items():
        grade = parse_grade(key, field=f"lifeCurriculum.{key}")
        if entry is None:
            continue
        if isinstance(entry, dict):
            links, desc = entry.get("links"), entry.get("description")
        else:
            links, desc = entry.links, entry.description
        links, desc = optional_text(links), optional_text(desc)
        if links is None and desc is None:
            continue
        rows.append((grade, links, desc))
    rows.sort(key=lambda r: r[0])
    return rows


def _replace_curriculum(db: Session, ev: Event, rows) -> None:
    # 전체 교체: 지우고 다시 넣는다(같은 트랜잭션)
    db.query(CurriculumEntry).filter(CurriculumEntry.event_id == ev.id).delete(synchronize_session=False)
    for grade, links, desc in rows:
        db.add(CurriculumEntry(event_id=ev.id, grade=grade, links=links, description=desc))


def _entries(db: Session, event_id: int) -> List[CurriculumEntry]:
    return (
        db.query(CurriculumEntry)
        .filter(CurriculumEntry.event_id == event_id)
        .order_by(CurriculumEntry.grade.asc(), CurriculumEntry.id.asc())
        .all()
    )


def list_events(
    db: Session,
    school: str,
    department: Optional[str] = None,
    date_from=None,
    date_to=None,
) -> List[EventWithCurriculum]:
    """
    학교의 행사 목록을 커리큘럼과 함께 한 번의 조회(LEFT OUTER JOIN)로 가져온다.
    커리큘럼이 없는 행사도 빈 목록으로 포함된다.

    :param db: DB 세션
    :type db: Session
    :param school: 학교 코드
    :type school: str
    :param department: 부서 필터('master' 또는 None이면 전체)
    :type department: Optional[str]
    :param date_from: 조회 하한(포함)
    :param date_to: 조회 상한(포함)
    :return: [(Event, [CurriculumEntry, ...]), ...] 날짜/ID 순
    :rtype: List[Tuple[Event, List[CurriculumEntry]]]
    """

    school = validate_school(school)
    query = (
        db.query(Event, CurriculumEntry)
        .outerjoin(CurriculumEntry, CurriculumEntry.event_id == Event.id)
        .filter(Event.school == school)
    )
    dept = optional_text(department)
    if dept and dept.lower() != DEPARTMENT_ALL:
        query = query.filter(Event.department == dept)
    if date_from is not None:
        query = query.filter(Event.date >= parse_date(date_from, "from"))
    if date_to is not None:
        query = query.filter(Event.date <= parse_date(date_to, "to"))
    rows = query.order_by(
        Event.date.asc(), Event.id.asc(), CurriculumEntry.grade.asc(), CurriculumEntry.id.asc()
    ).all()

    grouped: Dict[int, EventWithCurriculum] = {}
    for ev, entry in rows:
        if ev.id not in grouped:
            grouped[ev.id] = (ev, [])
        if entry is not None:
            grouped[ev.id][1].append(entry)
    return list(grouped.values())


def _get(db: Session, school: Optional[str], event_id: int) -> Event:
    ev = db.get(Event, event_id)
    if not ev or (school is not None and ev.school != school):
        raise NotFoundError("Event", event_id)
    return ev


def get_event(db: Session, school: Optional[str], event_id: int) -> EventWithCurriculum:
    if school is not None:
        school = validate_school(school)
    ev = _get(db, school, event_id)
    return ev, _entries(db, ev.id)


def create_event(db: Session, school: Optional[str], payload: EventCreate) -> EventWithCurriculum:
    """
    행사를 만들고 커리큘럼을 함께 저장한다. 둘 중 하나라도 실패하면 전부 롤백한다.

    :param school: 경로의 학교 코드(없으면 본문의 school 사용)
    :raises ValidationError: 학교/날짜/제목/시각/학년 검사 실패
    """

    school = validate_school(school if school is not None else payload.school)
    ev = Event(
        school=school,
        date=parse_date(payload.date),
        title=require_text(payload.title, "title", max_len=255),
        time=parse_hhmm(payload.time),
        department=optional_text(payload.department),
        description=optional_text(payload.description),
    )
    rows = _curriculum_rows(payload.life_curriculum)

    with storage_op(db, "create_event", school=school):
        db.add(ev)
        db.flush()
        _replace_curriculum(db, ev, rows)
        db.commit()
    db.refresh(ev)
    logger.info("[create_event] school=%s id=%s grades=%s", school, ev.id, [r[0] for r in rows])
    return ev, _entries(db, ev.id)


def update_event(db: Session, school: Optional[str], event_id: int, patch: EventUpdate) -> EventWithCurriculum:
    """
    보낸 필드만 수정한다. lifeCurriculum을 보내면 기존 커리큘럼을 통째로 교체하고,
    안 보내면 기존 것을 유지한다.
    """

    if school is not None:
        school = validate_school(school)
    data = patch.model_dump(exclude_unset=True)

    changes: Dict[str, Any] = {}
    if "date" in data:
        changes["date"] = parse_date(data["date"])
    if "title" in data:
        changes["title"] = require_text(data["title"], "title", max_len=255)
    if "time" in data:
        changes["time"] = parse_hhmm(data["time"])
    if "department" in data:
        changes["department"] = optional_text(data["department"])
    if "description" in data:
        changes["description"] = optional_text(data["description"])
    rows = None
    if "life_curriculum" in data:
        rows = _curriculum_rows(patch.life_curriculum)

    with storage_op(db, "update_event", school=school, ident=event_id):
        ev = _get(db, school, event_id)
        for k, v in changes.items():
            setattr(ev, k, v)
        ev.updated_at = utcnow()
        if rows is not None:
            _replace_curriculum(db, ev, rows)
        db.commit()
    db.refresh(ev)
    return ev, _entries(db, ev.id)


def delete_event(db: Session, school: Optional[str], event_id: int) -> None:
    if school is not None:
        school = validate_school(school)
    with storage_op(db, "delete_event", school=school, ident=event_id):
        ev = _get(db, school, event_id)
        db.delete(ev)
        db.commit()


def get_curriculum_entry(db: Session, entry_id: int) -> CurriculumEntry:
    entry = db.get(CurriculumEntry, entry_id)
    if not entry:
        raise NotFoundError("Curriculum entry", entry_id)
    return entry
