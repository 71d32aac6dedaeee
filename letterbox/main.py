# letterbox/main.py
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from letterbox import __version__
from letterbox.api import letters, mailbox, users
from letterbox.api.deps import get_async_session
from letterbox.models import init_db, close_db
from letterbox.utils.logger import setup_logger
from letterbox.config import settings

# 로거 설정
logger = setup_logger()

app = FastAPI(
    title="LetterBox",
    description="핀코드 기반 지연 배달 편지 서비스",
    version=__version__,
    debug=settings.debug
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 오류 응답은 항상 {"error": ...} 형태
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()
    else:
        message = "Invalid request"
    logger.warning(f"요청 형식 오류: {request.method} {request.url.path} - {message}")
    return JSONResponse(status_code=400, content={"error": message})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"처리되지 않은 오류: {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

@app.on_event("startup")
async def startup_event():
    """앱 시작시 초기화"""
    logger.info("LetterBox 서비스 시작")
    logger.info(f"Debug 모드: {settings.debug}")

    # 데이터베이스 테이블 생성 (필요시)
    try:
        await init_db()
    except Exception as e:
        logger.warning(f"데이터베이스 초기화 실패: {e}")

@app.on_event("shutdown")
async def shutdown_event():
    """앱 종료시 정리"""
    logger.info("LetterBox 서비스 종료")
    await close_db()

# 라우터 등록
app.include_router(letters.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(mailbox.router, prefix="/api")

@app.get("/")
async def root():
    return {
        "service": "LetterBox",
        "version": __version__,
        "status": "running",
        "features": [
            "편지 작성 + 배달 예약",
            "배달 시각 기반 우편함",
            "개봉 시 배달 완료 처리",
            "손그림 오버레이 렌더링"
        ]
    }

@app.get("/health")
async def health_check(session: AsyncSession = Depends(get_async_session)):
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.error(f"데이터베이스 상태 확인 실패: {e}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "rules": {
            "readiness_clamp_hours": settings.readiness_clamp_hours
        }
    }

if __name__ == "__main__":
    uvicorn.run(
        "letterbox.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
