# routes/system.py
# 서비스 상태 / DB 헬스체크 / 스키마 초기화 / 전체 삭제
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import SCHEMA_VERSION, get_db, get_guard, init_db
from errors import CalendarAPIError, ConnectivityError, ValidationError, humanize_driver_error
from routes.admin_auth import require_admin
from schemas.calendar_schema import InitIn
from services import maintenance_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["system"])

API_VERSION = "1.0.0"


@router.get("/status")
def status(request: Request):
    guard = get_guard(request)
    return {
        "name": "School Calendar API",
        "version": API_VERSION,
        "status": "running",
        "database": "configured" if guard.configured else "not configured",
        "endpoints": {
            "health": "/api/health",
            "init": "POST /api/init",
            "daySchedules": "/api/day-schedules",
            "dayTypes": "/api/day-types",
            "events": "/api/events",
            "schoolEvents": "/api/{school}/events",
            "admin": "/api/admin/login",
        },
    }


@router.get("/health")
def health(request: Request):
    """
    DB 연결 확인. 접속 정보가 아직 없으면 200 + 'not configured'.
    """

    guard = get_guard(request)
    if not guard.configured:
        return {
            "status": "ok",
            "database": "not configured",
            "message": "API server running, database not initialized yet",
        }
    try:
        guard.ping()
    except CalendarAPIError as e:
        logger.error("[health] database check failed: %s", e.message)
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "database": "error",
                "error": "Database connection failed",
                "message": e.message,
            },
        )
    return {"status": "ok", "database": "connected", "message": "Database connected and ready"}


@router.post("/init")
def init(request: Request, body: Optional[InitIn] = None):
    """
    스키마를 만든다(이미 있으면 그대로). 여러 번 호출해도 안전하다.
    아직 접속 정보가 없을 때만 본문의 dbUrl로 접속 문자열을 지정할 수 있다.

    :raises ValidationError: 이미 다른 DB로 설정된 상태에서 dbUrl을 보낸 경우
    :raises ConnectivityError: 접속 실패(원인 메시지 포함)
    """

    guard = get_guard(request)
    db_url = (body.dbUrl or "").strip() if body else ""
    if db_url:
        if guard.configured and guard.url != db_url:
            raise ValidationError("dbUrl", "Database already configured")
        if not guard.configured:
            guard.configure(db_url)

    logger.info("[init] initializing schema")
    guard.ping()
    try:
        tables = init_db(guard.engine)
    except SQLAlchemyError as e:
        raise ConnectivityError(humanize_driver_error(e)) from e
    return {
        "message": "Database initialized successfully",
        "tables": tables,
        "schema_version": SCHEMA_VERSION,
        "status": "success",
    }


@router.delete("/clear-all")
def clear_all(_admin: str = Depends(require_admin), db: Session = Depends(get_db)):
    counts = maintenance_service.clear_all(db)
    return {"success": True, "message": "All data cleared", "deleted": counts}
