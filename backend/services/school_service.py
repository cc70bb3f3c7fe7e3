# services/school_service.py
# 학교별 화면 구성: 스타일 설정 문서 / 공지 배너 / 좌우 사용자 링크
import copy
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from errors import NotFoundError, ValidationError
from database import upsert
from models.school import Banner, CustomLink, SchoolSettings
from schemas.calendar_schema import BannerIn, LinkCreate, LinkUpdate
from services.calendar_rules import (
    LINK_POSITIONS,
    check_choice,
    optional_text,
    require_text,
    validate_school,
)
from services.calendar_time import utcnow
from services.storage import storage_op

logger = logging.getLogger(__name__)

# 저장된 설정이 없을 때 내려주는 기본 스타일
DEFAULT_SETTINGS: Dict[str, Any] = {
    "header": {
        "backgroundColor": "#1f3a5f",
        "textColor": "#ffffff",
        "fontSize": "24px",
    },
    "calendar": {
        "fontFamily": "Arial, sans-serif",
        "aDayColor": "#dbeafe",
        "bDayColor": "#fde68a",
        "eventColor": "#2563eb",
        "todayColor": "#fef3c7",
    },
    "specialDays": {
        "finals": "#fecaca",
        "grading-day": "#e9d5ff",
        "holiday": "#bbf7d0",
        "early-release": "#fed7aa",
        "staff-development": "#e5e7eb",
        "access-day": "#bae6fd",
    },
}

DEFAULT_BANNER: Dict[str, Any] = {
    "message": "",
    "active": False,
    "text_size": "16px",
    "text_color": "#000000",
    "background_color": "#ffeb3b",
}


# 설정 문서
def get_settings(db: Session, school: str) -> Dict[str, Any]:
    """
    학교 설정 문서를 돌려준다. 저장된 행이 없으면 기본 문서.

    :return: {"school", "settings", "is_default", "updated_at"}
    :rtype: Dict[str, Any]
    """

    school = validate_school(school)
    row = db.get(SchoolSettings, school)
    if row is None:
        return {"school": school, "settings": copy.deepcopy(DEFAULT_SETTINGS), "is_default": True, "updated_at": None}
    return {"school": school, "settings": row.settings, "is_default": False, "updated_at": row.updated_at}


def put_settings(db: Session, school: str, document: Any) -> Dict[str, Any]:
    """설정 문서를 통째로 저장한다(기본 문서와 병합하지 않음)."""
    school = validate_school(school)
    if not isinstance(document, dict):
        raise ValidationError("settings", "Settings must be a JSON object")
    with storage_op(db, "put_settings", school=school):
        upsert(db, SchoolSettings, {"school": school, "settings": document, "updated_at": utcnow()}, keys=["school"])
        db.commit()
    return get_settings(db, school)


# 배너
def _banner_dict(school: str, row: Optional[Banner]) -> Dict[str, Any]:
    if row is None:
        return {"school": school, **DEFAULT_BANNER, "updated_at": None}
    return {
        "school": school,
        "message": row.message,
        "active": row.active,
        "text_size": row.text_size,
        "text_color": row.text_color,
        "background_color": row.background_color,
        "updated_at": row.updated_at,
    }


def get_banner(db: Session, school: str, public: bool = True) -> Dict[str, Any]:
    """
    공개 조회(public=True)에서는 행이 없거나 비활성이면 '배너 없음' 기본값을 준다.
    """

    school = validate_school(school)
    row = db.get(Banner, school)
    if public and (row is None or not row.active):
        row = None
    return _banner_dict(school, row)


def put_banner(db: Session, school: str, payload: BannerIn) -> Dict[str, Any]:
    school = validate_school(school)
    data = payload.model_dump(exclude_unset=True)
    current = db.get(Banner, school)
    base = _banner_dict(school, current)

    values = {
        "school": school,
        "message": data.get("message", base["message"]) or "",
        "active": bool(data.get("active", base["active"])),
        "text_size": optional_text(data.get("text_size", base["text_size"])),
        "text_color": optional_text(data.get("text_color", base["text_color"])),
        "background_color": optional_text(data.get("background_color", base["background_color"])),
        "updated_at": utcnow(),
    }
    if values["active"] and not values["message"].strip():
        raise ValidationError("message", "An active banner needs a message")

    with storage_op(db, "put_banner", school=school):
        upsert(db, Banner, values, keys=["school"])
        db.commit()
    return _banner_dict(school, db.get(Banner, school))


# 사용자 링크
def list_links(db: Session, school: str, position: Optional[str] = None) -> List[CustomLink]:
    school = validate_school(school)
    query = db.query(CustomLink).filter(CustomLink.school == school)
    if position:
        query = query.filter(CustomLink.position == check_choice(position, LINK_POSITIONS, "position"))
    return query.order_by(CustomLink.position.asc(), CustomLink.sort_order.asc(), CustomLink.id.asc()).all()


def _get_link(db: Session, school: str, link_id: int) -> CustomLink:
    link = db.get(CustomLink, link_id)
    if not link or link.school != school:
        raise NotFoundError("Link", link_id)
    return link


def create_link(db: Session, school: str, payload: LinkCreate) -> CustomLink:
    school = validate_school(school)
    link = CustomLink(
        school=school,
        position=check_choice(payload.position, LINK_POSITIONS, "position"),
        title=require_text(payload.title, "title", max_len=255),
        url=require_text(payload.url, "url"),
        sort_order=payload.sort_order or 0,
        text_color=optional_text(payload.text_color),
        background_color=optional_text(payload.background_color),
    )
    with storage_op(db, "create_link", school=school):
        db.add(link)
        db.commit()
    db.refresh(link)
    return link


def update_link(db: Session, school: str, link_id: int, patch: LinkUpdate) -> CustomLink:
    school = validate_school(school)
    data = patch.model_dump(exclude_unset=True)
    if "position" in data:
        check_choice(data["position"], LINK_POSITIONS, "position")
    if "title" in data:
        data["title"] = require_text(data["title"], "title", max_len=255)
    if "url" in data:
        data["url"] = require_text(data["url"], "url")
    if "sort_order" in data:
        data["sort_order"] = data["sort_order"] or 0
    for k in ("text_color", "background_color"):
        if k in data:
            data[k] = optional_text(data[k])

    with storage_op(db, "update_link", school=school, ident=link_id):
        link = _get_link(db, school, link_id)
        for k, v in data.items():
            setattr(link, k, v)
        link.updated_at = utcnow()
        db.commit()
    db.refresh(link)
    return link


def delete_link(db: Session, school: str, link_id: int) -> None:
    school = validate_school(school)
    with storage_op(db, "delete_link", school=school, ident=link_id):
        db.delete(_get_link(db, school, link_id))
        db.commit()
