import logging
from typing import Optional

from letterbox.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level_name: Optional[str]) -> int:
    """레벨 이름 → logging 상수 (모르는 이름은 INFO)"""
    level = getattr(logging, str(level_name or "").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str = "letterbox", level: Optional[str] = None):
    """서비스 로거 설정

    DEBUG 모드가 아니면 SQLAlchemy 엔진 로그는 WARNING 이상만 남긴다.
    """
    level_no = resolve_level(level or settings.log_level)

    logger = logging.getLogger(name)
    logger.setLevel(level_no)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.debug else logging.WARNING)

    # 핸들러 중복 방지, 레벨만 갱신
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level_no)
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level_no)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    return logger


logger = setup_logger()
