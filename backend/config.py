# config.py
# 환경 변수 기반 설정값 모음
import os
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


###############################################
# DATABASE_URL : SQLAlchemy 접속 문자열          #
# ADMIN_PASSWORD : 관리자 공용 비밀번호            #
# SCHOOLS : 허용 학교 코드(콤마 구분)             #
###############################################
DATABASE_URL = os.getenv("DATABASE_URL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Lions")
SESSION_TTL_HOURS = _env_int("SESSION_TTL_HOURS", 8)

SCHOOLS = tuple(
    s.strip().lower()
    for s in os.getenv("SCHOOLS", "wlhs,wvhs").split(",")
    if s.strip()
)

WEB_ORIGIN = os.getenv("WEB_ORIGIN", "")

# 커넥션 풀: 대기/접속 타임아웃은 반드시 유한해야 함
DB_POOL_SIZE = _env_int("DB_POOL_SIZE", 10)
DB_POOL_TIMEOUT = _env_int("DB_POOL_TIMEOUT", 10)
DB_CONNECT_TIMEOUT = _env_int("DB_CONNECT_TIMEOUT", 10)
DB_SSL = os.getenv("DB_SSL", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MAX_IMAGE_BYTES = _env_int("MAX_IMAGE_BYTES", 5 * 1024 * 1024)
