# routes/school_style.py
# 학교별 화면 구성 라우터: 설정 문서 / 배너 / 사용자 링크
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from routes.admin_auth import require_admin
from routes.calendar_render import _pack_link, _with_iso
from routes.school_scope import school_from_path
from schemas.calendar_schema import BannerIn, LinkCreate, LinkUpdate
from services import school_service

router = APIRouter(prefix="/api/{school}", tags=["school-style"])


@router.get("/settings")
def get_settings(school: str = Depends(school_from_path), db: Session = Depends(get_db)):
    return _with_iso(school_service.get_settings(db, school))


@router.put("/settings")
def put_settings(
    document: Dict[str, Any] = Body(...),
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    설정 문서 저장. 본문이 {"settings": {...}} 형태면 안쪽 문서를 쓴다.

    :param document: 임의의 스타일 키-값 문서
    :type document: Dict[str, Any]
    """

    if set(document.keys()) == {"settings"} and isinstance(document["settings"], dict):
        document = document["settings"]
    return _with_iso(school_service.put_settings(db, school, document))


@router.get("/banner")
def get_banner(school: str = Depends(school_from_path), db: Session = Depends(get_db)):
    return _with_iso(school_service.get_banner(db, school))


@router.get("/admin/banner")
def get_stored_banner(
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    # 편집 화면용: 비활성 배너도 저장된 그대로
    return _with_iso(school_service.get_banner(db, school, public=False))


@router.put("/banner")
def put_banner(
    body: BannerIn,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _with_iso(school_service.put_banner(db, school, body))


@router.get("/links")
def list_links(
    school: str = Depends(school_from_path),
    position: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return [_pack_link(link) for link in school_service.list_links(db, school, position)]


@router.post("/links")
def create_link(
    body: LinkCreate,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _pack_link(school_service.create_link(db, school, body))


@router.put("/links/{link_id}")
def update_link(
    link_id: int,
    body: LinkUpdate,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _pack_link(school_service.update_link(db, school, link_id, body))


@router.delete("/links/{link_id}")
def delete_link(
    link_id: int,
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    school_service.delete_link(db, school, link_id)
    return {"success": True}
