# services/session_service.py
# 관리자 세션 저장소(admin_sessions 테이블)
#
# 공용 비밀번호 하나로 로그인하는 단순 관리자 게이트용 토큰이다.
# - 발급: 만료 시각 = 지금 + SESSION_TTL_HOURS(기본 8시간)
# - 검증: 매 요청마다 DB를 다시 확인(캐시 없음). 만료 시각 '이전'에만 유효
# - 만료된 행은 발급 시점에 같이 지운다(별도 타이머 없음)
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

import config
from models.admin import AdminSession
from services.calendar_time import utcnow
from services.storage import storage_op

logger = logging.getLogger(__name__)


class SessionStore:
    """
    :param db: 현재 요청의 DB 세션
    :type db: Session
    :param ttl_hours: 토큰 유효 시간(시간)
    :type ttl_hours: int
    :param clock: 현재 시각 함수(tz 없는 UTC)
    :type clock: Callable[[], datetime]
    """

    def __init__(self, db: Session, ttl_hours: Optional[int] = None, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.ttl = timedelta(hours=ttl_hours if ttl_hours is not None else config.SESSION_TTL_HOURS)
        self.clock = clock

    def sweep(self) -> int:
        """만료된 세션 행을 모두 지우고 지운 개수를 돌려준다."""
        with storage_op(self.db, "sweep_sessions"):
            removed = (
                self.db.query(AdminSession)
                .filter(AdminSession.expires_at <= self.clock())
                .delete(synchronize_session=False)
            )
            self.db.commit()
        if removed:
            logger.info("[SessionStore] swept %s expired session(s)", removed)
        return removed

    def issue(self) -> Tuple[str, datetime]:
        """
        새 토큰을 발급한다. 발급 전에 만료된 행을 정리한다.

        :return: (token, expires_at)
        :rtype: Tuple[str, datetime]
        """

        self.sweep()
        now = self.clock()
        token = secrets.token_hex(32)
        expires_at = now + self.ttl
        with storage_op(self.db, "issue_session"):
            self.db.add(AdminSession(token=token, created_at=now, expires_at=expires_at))
            self.db.commit()
        return token, expires_at

    def validate(self, token: Optional[str]) -> bool:
        """토큰이 존재하고 아직 만료 전이면 True. 없음/만료/빈 값은 False(예외 없음)."""
        if not token or not isinstance(token, str):
            return False
        row = self.db.get(AdminSession, token)
        return bool(row and row.expires_at > self.clock())

    def revoke(self, token: Optional[str]) -> None:
        """토큰 행을 지운다. 없어도 에러 아님."""
        if not token:
            return
        with storage_op(self.db, "revoke_session"):
            self.db.query(AdminSession).filter(AdminSession.token == token).delete(synchronize_session=False)
            self.db.commit()
