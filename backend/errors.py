# errors.py
# API 예외 계층. main.py의 예외 핸들러가 status_code 기준으로 JSON 응답을 만든다.
from typing import Optional


class CalendarAPIError(Exception):
    """
    모든 도메인 예외의 기반 클래스

    :param message: 응답 본문에 그대로 노출되는 메시지
    :type message: str
    """

    status_code = 500
    public_message: Optional[str] = None

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.public_message or "Internal server error"

    def to_body(self) -> dict:
        return {"error": self.public_message or self.message}


class ValidationError(CalendarAPIError):
    status_code = 400

    def __init__(self, field: str, message: str = ""):
        super().__init__(message or f"Invalid value for '{field}'")
        self.field = field

    def to_body(self) -> dict:
        return {"error": self.message, "field": self.field}


class AuthError(CalendarAPIError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(CalendarAPIError):
    status_code = 404

    def __init__(self, what: str = "Resource", ident=None):
        msg = f"{what} not found" if ident is None else f"{what} {ident} not found"
        super().__init__(msg)


class ConfigurationError(CalendarAPIError):
    """DATABASE_URL 등 접속 정보가 없을 때"""


class ConnectivityError(CalendarAPIError):
    """DB 접속 자체가 실패했을 때(호스트/인증/DB 없음 등)"""


class StorageError(CalendarAPIError):
    # 내부 정보는 로그에만 남기고 응답은 고정 문구
    public_message = "Database operation failed"


# 드라이버 에러 -> 사람이 읽을 수 있는 메시지
_SQLSTATE_MESSAGES = {
    "28P01": "Invalid username/password. Check your database credentials.",
    "3D000": "Database does not exist. Check your database name.",
}

_TEXT_MESSAGES = [
    (("could not translate host name", "name or service not known",
      "nodename nor servname", "getaddrinfo failed"),
     "Database host not found. Check your connection string."),
    (("connection refused",),
     "Connection refused. Check if database is accessible."),
    (("password authentication failed",),
     _SQLSTATE_MESSAGES["28P01"]),
    (("does not exist",),
     _SQLSTATE_MESSAGES["3D000"]),
    (("timeout expired", "timed out"),
     "Database connection timed out."),
]


def humanize_driver_error(exc: BaseException) -> str:
    """
    SQLAlchemy/DBAPI 예외를 사용자용 메시지로 바꾼다.
    SQLSTATE 코드가 있으면 우선 사용하고, 없으면 메시지 문자열로 추정한다.

    :param exc: SQLAlchemy DBAPIError 또는 드라이버 예외
    :type exc: BaseException
    :return: 접속 실패 원인 메시지
    :rtype: str
    """

    orig = getattr(exc, "orig", None) or exc
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code in _SQLSTATE_MESSAGES:
        return _SQLSTATE_MESSAGES[code]

    text = str(orig).lower()
    for needles, message in _TEXT_MESSAGES:
        if any(n in text for n in needles):
            return message
    return "Database connection failed."
