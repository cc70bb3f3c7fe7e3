# services/storage.py
# 쓰기 작업 공통 처리: 실패 시 롤백 + 문맥 로깅 + StorageError 변환

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import CalendarAPIError, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def storage_op(db: Session, op: str, school=None, ident=None):
    """
    with 블록 안의 DB 작업을 감싼다.
    - 도메인 예외(검증/404)는 롤백 후 그대로 전파
    - 그 밖의 SQLAlchemy 예외는 롤백 후 로그를 남기고 StorageError로 바꾼다

    :param db: 현재 요청의 세션
    :param op: 로그에 남길 작업 이름(예: "update_event")
    :param school: 학교 코드(있으면)
    :param ident: 대상 id/날짜(있으면)
    """

    try:
        yield
    except CalendarAPIError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "[%s] storage failure school=%s id=%s | %s: %s",
            op, school, ident, e.__class__.__name__, getattr(e, "orig", e),
        )
        raise StorageError(f"{op} failed") from e
