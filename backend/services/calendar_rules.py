# services/calendar_rules.py
# 입력값 검사 규칙(학교 코드 / 열거값 / 학년 / 필수 텍스트)

from typing import Any, Iterable, Optional

import config
from errors import ValidationError
from models.calendar import GRADE_MIN, GRADE_MAX

DAY_LABELS = ("A", "B")

SPECIAL_DAY_TYPES = (
    "finals",
    "grading-day",
    "holiday",
    "early-release",
    "staff-development",
    "access-day",
)
# 이 값으로 쓰면 저장 대신 행을 지운다(행이 없음 = 평일)
NORMAL_DAY = "normal"

LINK_POSITIONS = ("left", "right")

# 부서 필터를 끄는 값
DEPARTMENT_ALL = "master"


def validate_school(school: Optional[str]) -> str:
    """
    학교 코드를 정규화하고 허용 목록에 있는지 확인한다.

    :param school: 요청에서 받은 학교 코드
    :type school: Optional[str]
    :return: 소문자 학교 코드
    :rtype: str
    :raises ValidationError: 비었거나 허용 목록 밖의 값
    """

    code = (school or "").strip().lower()
    if not code:
        raise ValidationError("school", "School is required")
    if code not in config.SCHOOLS:
        raise ValidationError("school", f"Unknown school '{school}'. Expected one of: {', '.join(config.SCHOOLS)}")
    return code


def require_text(value: Any, field: str, max_len: Optional[int] = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"'{field}' is required")
    s = value.strip()
    if max_len and len(s) > max_len:
        raise ValidationError(field, f"'{field}' must be at most {max_len} characters")
    return s


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def parse_grade(value: Any, field: str = "grade") -> int:
    try:
        grade = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(field, f"'{field}' must be a number between {GRADE_MIN} and {GRADE_MAX}")
    if not GRADE_MIN <= grade <= GRADE_MAX:
        raise ValidationError(field, f"'{field}' must be between {GRADE_MIN} and {GRADE_MAX}")
    return grade


def check_choice(value: Any, choices: Iterable[str], field: str) -> str:
    choices = tuple(choices)
    if value not in choices:
        raise ValidationError(field, f"'{field}' must be one of: {', '.join(choices)}")
    return value
