# routes/school_scope.py
# 학교 코드 의존성. 엔드포인트 인자 중 가장 앞에 두어야 DB 세션을 꺼내기 전에 검사된다.
from typing import Optional

from fastapi import Query, Request

from services.calendar_rules import validate_school


def school_from_path(school: str) -> str:
    return validate_school(school)


def school_from_query(school: Optional[str] = Query(None)) -> str:
    return validate_school(school)


async def school_from_body(request: Request) -> str:
    """
    초기 버전 쓰기 경로용: JSON 본문의 school 값을 검사한다.
    본문은 FastAPI가 이미 읽어 두었으므로 다시 읽어도 캐시된 값을 쓴다.
    """

    try:
        data = await request.json()
    except ValueError:
        data = None
    return validate_school(data.get("school") if isinstance(data, dict) else None)
