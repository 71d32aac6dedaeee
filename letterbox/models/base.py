# letterbox/models/base.py
"""
SQLAlchemy Base 설정 및 DB 연결 관리
"""

from typing import AsyncGenerator, Optional
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from letterbox.config import settings
from letterbox.utils.logger import logger

# Base 모델
Base = declarative_base()

def utcnow() -> datetime:
    """DB 저장용 naive UTC 현재 시각"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_iso(value: Optional[datetime]) -> Optional[str]:
    """naive UTC → '2024-01-01T00:00:00.000Z' 형식"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"

def build_engine(url: str) -> AsyncEngine:
    if url.startswith("mysql"):
        return create_async_engine(
            url,
            echo=settings.debug,
            pool_pre_ping=True,
            pool_recycle=3600
        )
    return create_async_engine(url, echo=settings.debug)

# 비동기 엔진 생성
engine = build_engine(settings.sqlalchemy_url)

# 비동기 세션 팩토리
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 비동기 세션 제공"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

async def init_db(bind: Optional[AsyncEngine] = None):
    """테이블 생성 (초기 설정용)"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("데이터베이스 테이블 생성 완료")

async def close_db():
    await engine.dispose()
    logger.info("데이터베이스 연결 종료")
