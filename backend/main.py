import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from database import ConnectionGuard, init_db
from errors import CalendarAPIError, StorageError

from routes.admin_auth import router as admin_router
from routes.calendar_days import router as days_router
from routes.calendar_events import router as events_router
from routes.home_buttons import router as home_router
from routes.materials import router as materials_router
from routes.school_style import router as school_style_router
from routes.system import router as system_router

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    guard: ConnectionGuard = app.state.db_guard
    if guard.configured:
        # 접속 정보가 있으면 기동 시 스키마 생성. 실패해도 서버는 뜬다(/api/health로 확인)
        try:
            init_db(guard.engine)
            logger.info("[startup] schema ready")
        except (CalendarAPIError, SQLAlchemyError) as e:
            logger.error("[startup] schema init skipped: %s", e)
    yield
    guard.shutdown()


def _validation_body(exc: RequestValidationError) -> dict:
    # 첫 번째 오류 필드만 알려준다
    errors = exc.errors()
    if not errors:
        return {"error": "Invalid request"}
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path", "header")]
    field = ".".join(loc) or "body"
    return {"error": f"Invalid value for '{field}': {first.get('msg', 'invalid')}", "field": field}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CalendarAPIError)
    async def calendar_error(request: Request, exc: CalendarAPIError):
        if exc.status_code >= 500:
            logger.error("[%s %s] %s: %s", request.method, request.url.path, exc.__class__.__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=_validation_body(exc))

    @app.exception_handler(SQLAlchemyError)
    async def storage_error(request: Request, exc: SQLAlchemyError):
        logger.error("[%s %s] storage failure: %s", request.method, request.url.path, exc.__class__.__name__, exc_info=exc)
        return JSONResponse(status_code=500, content=StorageError().to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(guard: Optional[ConnectionGuard] = None) -> FastAPI:
    """
    앱 팩토리. guard를 주지 않으면 DATABASE_URL로 만든다(비어 있으면 /api/init 대기).

    :param guard: 주입할 커넥션 가드(테스트용)
    :type guard: Optional[ConnectionGuard]
    :return: FastAPI 앱
    :rtype: FastAPI
    """

    app = FastAPI(title="School Calendar API", lifespan=lifespan)
    app.state.db_guard = guard or ConnectionGuard(config.DATABASE_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o for o in ["http://localhost:5173", config.WEB_ORIGIN] if o],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Admin-Session"],
    )
    register_error_handlers(app)

    app.include_router(system_router)
    app.include_router(admin_router)
    app.include_router(home_router)
    app.include_router(materials_router)
    app.include_router(days_router)
    app.include_router(events_router)
    app.include_router(school_style_router)
    return app


app = create_app()
