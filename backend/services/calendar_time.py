# services/calendar_time.py
# 날짜 / 시각 정규화

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from errors import ValidationError

# YYYY-MM-DD 로 시작하는 값(뒤에 시간이 붙어도 됨)
DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?$")
HHMM_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::[0-5]\d)?$")


def utcnow() -> datetime:
    """tz 없는 UTC 현재 시각(DateTime 컬럼 저장 형식과 동일)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: Any, field: str = "date") -> date:
    """
    날짜 입력을 date로 정규화한다.
    date / datetime / 'YYYY-MM-DD' / ISO datetime 문자열을 받는다.

    :param value: 사용자 입력
    :type value: Any
    :param field: 실패 시 에러에 담을 필드 이름
    :type field: str
    :return: 달력상 실제로 존재하는 날짜
    :rtype: date
    :raises ValidationError: 비어 있거나 파싱 불가/존재하지 않는 날짜
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"'{field}' is required")

    s = value.strip()
    m = DATE_PREFIX_RE.match(s)
    if not m:
        raise ValidationError(field, f"'{field}' must be a date (YYYY-MM-DD)")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        raise ValidationError(field, f"'{field}' is not a real calendar date")


def format_date(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


def format_ts(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def parse_hhmm(value: Optional[str], field: str = "time") -> Optional[str]:
    """
    'HH:MM'(초는 버림)을 검사해 'HH:MM'으로 돌려준다. 빈 값은 None.
    """

    if value is None or not str(value).strip():
        return None
    m = HHMM_RE.match(str(value).strip())
    if not m:
        raise ValidationError(field, f"'{field}' must be HH:MM")
    return f"{int(m.group(1)):02d}:{m.group(2)}"
