# letterbox/models/__init__.py
"""
Models 패키지
SQLAlchemy 모델들과 DB 연결 설정
"""

from .base import Base, AsyncSessionLocal, get_async_session, init_db, close_db, utcnow, to_iso
from .user import User, is_valid_pincode
from .letter import Letter, LETTER_STYLE_DEFAULTS, LETTER_STYLE_COLUMNS
from .delivery import Delivery, DELIVERY_PENDING, DELIVERY_DELIVERED

__all__ = [
    "Base",
    "AsyncSessionLocal",
    "get_async_session",
    "init_db",
    "close_db",
    "utcnow",
    "to_iso",
    "User",
    "is_valid_pincode",
    "Letter",
    "LETTER_STYLE_DEFAULTS",
    "LETTER_STYLE_COLUMNS",
    "Delivery",
    "DELIVERY_PENDING",
    "DELIVERY_DELIVERED",
]
