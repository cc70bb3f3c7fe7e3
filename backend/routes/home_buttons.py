# routes/home_buttons.py
# 홈 화면 학교 버튼. PUT은 multipart(form) 업로드.
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

import config
from database import get_db
from routes.admin_auth import require_admin
from routes.calendar_render import _with_iso
from routes.school_scope import school_from_path
from services import home_service

router = APIRouter(prefix="/api/home/buttons", tags=["home"])


@router.get("")
def list_buttons(db: Session = Depends(get_db)):
    return [_with_iso(b) for b in home_service.list_home_buttons(db)]


@router.get("/{school}")
def get_button(school: str = Depends(school_from_path), db: Session = Depends(get_db)):
    return _with_iso(home_service.get_home_button(db, school))


@router.put("/{school}")
def put_button(
    school: str = Depends(school_from_path),
    _admin: str = Depends(require_admin),
    title: Optional[str] = Form(None),
    remove_image: bool = Form(False),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    """
    버튼 제목/이미지 저장

    :param title: 버튼 제목(생략 시 기존 값 유지)
    :type title: Optional[str]
    :param remove_image: True면 기존 이미지 삭제
    :type remove_image: bool
    :param image: 이미지 파일(image/*, 최대 MAX_IMAGE_BYTES)
    :type image: Optional[UploadFile]
    """

    data = None
    content_type = None
    if image is not None and image.filename:
        # 한도 + 1 바이트까지만 읽어서 초과 여부 판단
        data = image.file.read(config.MAX_IMAGE_BYTES + 1)
        content_type = image.content_type
    return _with_iso(
        home_service.put_home_button(db, school, title, data, content_type, remove_image)
    )
