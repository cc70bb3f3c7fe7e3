# routes/admin_auth.py
# 관리자 로그인/로그아웃/확인 + 쓰기 엔드포인트용 게이트(require_admin)
#
# 공용 비밀번호(ADMIN_PASSWORD) 하나로만 로그인한다. 사용자별 계정 없음.
import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

import config
from database import get_db
from errors import AuthError
from schemas.calendar_schema import LoginIn
from services.calendar_time import format_ts
from services.session_service import SessionStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


def session_token(
    x_admin_session: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> Optional[str]:
    """
    요청 헤더에서 관리자 토큰을 꺼낸다.
    X-Admin-Session 우선, 없으면 'Authorization: Bearer <token>'.
    """

    if x_admin_session and x_admin_session.strip():
        return x_admin_session.strip()
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def require_admin(
    token: Optional[str] = Depends(session_token),
    db: Session = Depends(get_db),
) -> str:
    """
    쓰기 엔드포인트 앞단 게이트. 유효한 세션이 아니면 401(핸들러까지 가지 않음).

    :raises AuthError: 토큰 없음/잘못됨/만료
    """

    if not SessionStore(db).validate(token):
        raise AuthError("Admin session missing, invalid or expired")
    return token


@router.post("/login")
def login(body: LoginIn, db: Session = Depends(get_db)):
    """
    공용 비밀번호를 확인하고 세션 토큰을 발급한다.

    :param body: {"password": "..."}
    :type body: LoginIn
    :raises AuthError: 비밀번호 불일치
    :return: {"success", "token", "expires_at"}
    :rtype: Dict[str, Any]
    """

    submitted = body.password or ""
    if not secrets.compare_digest(submitted.encode("utf-8"), config.ADMIN_PASSWORD.encode("utf-8")):
        logger.info("[AdminAuth] login rejected")
        raise AuthError("Invalid password")

    token, expires_at = SessionStore(db).issue()
    logger.info("[AdminAuth] session issued token=%s****** expires_at=%s", token[:6], expires_at)
    return {"success": True, "token": token, "expires_at": format_ts(expires_at)}


@router.post("/logout")
def logout(token: Optional[str] = Depends(session_token), db: Session = Depends(get_db)):
    SessionStore(db).revoke(token)
    return {"success": True}


@router.post("/verify")
def verify(token: Optional[str] = Depends(session_token), db: Session = Depends(get_db)):
    return {"valid": SessionStore(db).validate(token)}
