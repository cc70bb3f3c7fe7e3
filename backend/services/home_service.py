# services/home_service.py
# 홈 화면 학교 버튼(제목 + 선택 이미지). 이미지는 base64 텍스트 + MIME으로 저장한다.
import base64
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

import config
from errors import ValidationError
from database import upsert
from models.school import HomeButton
from services.calendar_rules import optional_text, validate_school
from services.calendar_time import utcnow
from services.storage import storage_op

logger = logging.getLogger(__name__)


def _pack(school: str, row: Optional[HomeButton]) -> Dict[str, Any]:
    if row is None:
        return {"school": school, "title": school.upper(), "image": None, "image_type": None, "updated_at": None}
    image = f"data:{row.image_type};base64,{row.image_data}" if row.image_data else None
    return {
        "school": school,
        "title": row.title,
        "image": image,
        "image_type": row.image_type if row.image_data else None,
        "updated_at": row.updated_at,
    }


def list_home_buttons(db: Session) -> List[Dict[str, Any]]:
    """허용된 학교마다 버튼 하나씩(저장된 게 없으면 기본값)"""
    rows = {r.school: r for r in db.query(HomeButton).all()}
    return [_pack(s, rows.get(s)) for s in config.SCHOOLS]


def get_home_button(db: Session, school: str) -> Dict[str, Any]:
    school = validate_school(school)
    return _pack(school, db.get(HomeButton, school))


def check_image(content_type: Optional[str], size: int) -> None:
    """
    업로드 이미지 검사: image/* MIME 만, MAX_IMAGE_BYTES 이하

    :raises ValidationError: MIME 또는 크기 위반
    """

    if not content_type or not content_type.lower().startswith("image/"):
        raise ValidationError("image", "Only image files are allowed")
    if size > config.MAX_IMAGE_BYTES:
        limit_mb = config.MAX_IMAGE_BYTES // (1024 * 1024)
        raise ValidationError("image", f"Image must be {limit_mb}MB or smaller")


def put_home_button(
    db: Session,
    school: str,
    title: Optional[str] = None,
    image: Optional[bytes] = None,
    image_type: Optional[str] = None,
    remove_image: bool = False,
) -> Dict[str, Any]:
    """
    버튼을 저장(갱신)한다.
    - title을 안 보내면 기존 제목(없으면 학교 코드 대문자)
    - image를 보내면 교체, remove_image면 삭제, 둘 다 아니면 기존 이미지 유지

    :param image: 업로드 파일 바이트
    :type image: Optional[bytes]
    :param image_type: 업로드 파일 MIME
    :type image_type: Optional[str]
    """

    school = validate_school(school)
    current = db.get(HomeButton, school)
    values: Dict[str, Any] = {
        "school": school,
        "title": optional_text(title) or (current.title if current else school.upper()),
        "updated_at": utcnow(),
    }
    if image is not None:
        check_image(image_type, len(image))
        values["image_data"] = base64.b64encode(image).decode("ascii")
        values["image_type"] = image_type.lower()
    elif remove_image:
        values["image_data"] = None
        values["image_type"] = None

    with storage_op(db, "put_home_button", school=school):
        upsert(db, HomeButton, values, keys=["school"])
        db.commit()
    logger.info("[home_button] school=%s image=%s", school, "replaced" if image is not None else ("removed" if remove_image else "kept"))
    return _pack(school, db.get(HomeButton, school))
