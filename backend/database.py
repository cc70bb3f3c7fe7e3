# database.py
# 커넥션 풀(SQLAlchemy engine) 수명 관리 + 스키마 초기화 + FastAPI 의존성
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

import config
from errors import ConfigurationError, ConnectivityError, StorageError, humanize_driver_error
from models.calendar import Base
from models.admin import SchemaVersion
import models.school  # noqa: F401  (테이블 등록)
from services.calendar_time import utcnow

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def mask_url(url: Optional[str]) -> str:
    """접속 문자열의 비밀번호 부분을 가린다(로그용)."""
    if not url:
        return ""
    return re.sub(r"(://[^:/@]+:)[^@]*@", r"\1****@", url)


def _enable_sqlite_fk(dbapi_conn, _record):
    # SQLite는 연결마다 FK 강제를 켜야 ON DELETE CASCADE가 동작함
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


class ConnectionGuard:
    """
    DB 커넥션 풀의 소유자.
    - 풀은 최대 1개만 유지
    - shutdown() 이후 acquire()가 호출되면 저장된 접속 문자열로 풀을 다시 만든다
    - 접속 실패는 재시도 없이 ConnectivityError로 올린다

    :param url: SQLAlchemy 접속 문자열(없으면 acquire 시 ConfigurationError)
    :type url: Optional[str]
    """

    def __init__(self, url: Optional[str] = None, **engine_options):
        self._url = url or None
        self._engine = None
        self._sessionmaker = None
        self._created_once = False
        self._engine_options = engine_options

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def configured(self) -> bool:
        return bool(self._url)

    @property
    def engine(self):
        """현재 살아있는 engine(없으면 새로 생성)"""
        return self._ensure_engine()

    def configure(self, url: str) -> None:
        """접속 문자열을 교체한다. 기존 풀은 정리한다."""
        self.shutdown()
        self._url = url or None
        self._created_once = False
        logger.info("[ConnectionGuard] configured url=%s", mask_url(url))

    def _engine_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"pool_pre_ping": True}
        connect_args: Dict[str, Any] = {}
        if self._url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        else:
            kwargs["pool_size"] = config.DB_POOL_SIZE
            kwargs["pool_timeout"] = config.DB_POOL_TIMEOUT
            kwargs["pool_recycle"] = 1800
            if self._url.startswith("postgresql"):
                connect_args["connect_timeout"] = config.DB_CONNECT_TIMEOUT
                if config.DB_SSL:
                    connect_args["sslmode"] = config.DB_SSL
        kwargs["connect_args"] = connect_args
        kwargs.update(self._engine_options)
        return kwargs

    def _ensure_engine(self):
        if not self._url:
            raise ConfigurationError("Database not configured. Set DATABASE_URL or call /api/init.")
        if self._engine is not None:
            return self._engine

        try:
            engine = create_engine(self._url, **self._engine_kwargs())
        except (SQLAlchemyError, ValueError) as e:
            raise ConfigurationError(f"Invalid database URL: {e.__class__.__name__}") from e
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_fk)

        logger.info(
            "[ConnectionGuard] %s pool url=%s",
            "recreated" if self._created_once else "created",
            mask_url(self._url),
        )
        self._engine = engine
        self._sessionmaker = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        self._created_once = True
        return engine

    def acquire(self) -> Session:
        """
        동작하는 DB 세션을 하나 꺼낸다. 호출한 쪽에서 반드시 close() 해야 한다.

        :return: 연결이 확인된 SQLAlchemy Session
        :rtype: Session
        :raises ConfigurationError: 접속 문자열 없음
        :raises ConnectivityError: DB에 접속할 수 없음(호스트/인증/DB 없음/타임아웃)
        """

        self._ensure_engine()
        db = self._sessionmaker()
        try:
            db.connection()
        except (DBAPIError, SQLAlchemyError) as e:
            db.close()
            message = humanize_driver_error(e)
            logger.error("[ConnectionGuard] connect failed url=%s | %s", mask_url(self._url), message)
            raise ConnectivityError(message) from e
        return db

    def ping(self) -> None:
        db = self.acquire()
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise ConnectivityError(humanize_driver_error(e)) from e
        finally:
            db.close()

    def shutdown(self) -> None:
        """풀을 닫는다. 접속 문자열은 유지되므로 다음 acquire()에서 재생성된다."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("[ConnectionGuard] pool disposed")
        self._engine = None
        self._sessionmaker = None


def init_db(engine) -> List[str]:
    """
    테이블을 생성(if not exists)하고 스키마 버전을 기록한다. 여러 번 호출해도 안전하다.

    :param engine: 대상 engine
    :return: 생성/확인된 테이블 이름 목록
    :rtype: List[str]
    """

    Base.metadata.create_all(bind=engine)
    with Session(bind=engine) as db:
        if db.get(SchemaVersion, SCHEMA_VERSION) is None:
            db.add(SchemaVersion(version=SCHEMA_VERSION, applied_at=utcnow()))
            db.commit()
            logger.info("[init_db] schema version %s stamped", SCHEMA_VERSION)
    return sorted(Base.metadata.tables.keys())


def get_guard(request: Request) -> ConnectionGuard:
    return request.app.state.db_guard


def get_db(request: Request):
    db = get_guard(request).acquire()
    try:
        yield db
    finally:
        db.close()


def upsert(db: Session, model, values: Dict[str, Any], keys: Iterable[str]) -> None:
    """
    INSERT ... ON CONFLICT (keys) DO UPDATE. keys 외의 모든 값을 덮어쓴다.
    PostgreSQL/SQLite 방언만 지원한다.
    """

    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise StorageError(f"upsert not supported for dialect {dialect}")

    keys = list(keys)
    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=keys,
        set_={k: stmt.excluded[k] for k in values if k not in keys},
    )
    db.execute(stmt)
