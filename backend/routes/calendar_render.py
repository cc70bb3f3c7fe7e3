# routes/calendar_render.py
# ORM 행 -> 응답 JSON. 날짜는 항상 YYYY-MM-DD 로 내보낸다.
from typing import Any, Dict, List

from services.calendar_time import format_date, format_ts


def _pack_curriculum(entry) -> dict:
    return {
        "id": entry.id,
        "grade": entry.grade,
        "links": entry.links,
        "description": entry.description,
    }


def _pack_event(ev, entries: List[Any]) -> dict:
    """
    행사 + 학년별 커리큘럼 묶음. life_curriculum은 항상 리스트(없으면 []).

    :param ev: Event 행
    :param entries: 해당 행사의 CurriculumEntry 목록(학년 순)
    :return: 응답용 dict
    :rtype: dict
    """

    return {
        "id": ev.id,
        "school": ev.school,
        "date": format_date(ev.date),
        "title": ev.title,
        "time": ev.time,
        "department": ev.department,
        "description": ev.description,
        "life_curriculum": [_pack_curriculum(e) for e in entries],
        "created_at": format_ts(ev.created_at),
        "updated_at": format_ts(ev.updated_at),
    }


def _pack_day_label(row) -> dict:
    return {
        "school": row.school,
        "date": format_date(row.date),
        "label": row.label,
        "updated_at": format_ts(row.updated_at),
    }


def _pack_legacy_schedule(row) -> dict:
    # 초기 프론트엔드가 쓰던 필드명(schedule)
    return {"date": format_date(row.date), "schedule": row.label, "school": row.school}


def _pack_special_day(row) -> dict:
    return {
        "school": row.school,
        "date": format_date(row.date),
        "type": row.type,
        "description": row.description,
        "updated_at": format_ts(row.updated_at),
    }


def _pack_material(m) -> dict:
    return {
        "id": m.id,
        "school": m.school,
        "date": format_date(m.date),
        "grade": m.grade,
        "title": m.title,
        "link": m.link,
        "description": m.description,
        "password": m.password,
        "has_password": bool(m.password),
        "created_at": format_ts(m.created_at),
        "updated_at": format_ts(m.updated_at),
    }


def _pack_link(link) -> dict:
    return {
        "id": link.id,
        "school": link.school,
        "position": link.position,
        "title": link.title,
        "url": link.url,
        "sort_order": link.sort_order,
        "text_color": link.text_color,
        "background_color": link.background_color,
    }


def _with_iso(doc: Dict[str, Any]) -> Dict[str, Any]:
    # 서비스가 dict로 준 문서의 updated_at만 문자열로
    return {**doc, "updated_at": format_ts(doc.get("updated_at"))}
