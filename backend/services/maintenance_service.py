# services/maintenance_service.py
import logging
from typing import Dict

from sqlalchemy.orm import Session

from models.calendar import CurriculumEntry, DayLabel, Event, Material, SpecialDay
from models.school import Banner, CustomLink, HomeButton, SchoolSettings
from services.storage import storage_op

logger = logging.getLogger(__name__)

# 자식 테이블 먼저. 관리자 세션/스키마 버전은 지우지 않는다.
CLEARABLE = (
    CurriculumEntry,
    Event,
    DayLabel,
    SpecialDay,
    Material,
    SchoolSettings,
    Banner,
    CustomLink,
    HomeButton,
)


def clear_all(db: Session) -> Dict[str, int]:
    """
    모든 캘린더/콘텐츠 데이터를 한 트랜잭션으로 지운다.

    :return: {테이블명: 삭제 행 수}
    :rtype: Dict[str, int]
    """

    counts: Dict[str, int] = {}
    with storage_op(db, "clear_all"):
        for model in CLEARABLE:
            counts[model.__tablename__] = db.query(model).delete(synchronize_session=False)
        db.commit()
    logger.warning("[clear_all] removed %s", counts)
    return counts
