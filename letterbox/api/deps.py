# letterbox/api/deps.py
"""
라우터 공통 의존성 (테스트에서 dependency_overrides 로 교체)
"""

from datetime import datetime

from letterbox.models import get_async_session, utcnow

__all__ = ["get_async_session", "get_current_time"]


def get_current_time() -> datetime:
    """배달 가능 여부 판단 기준 시각 (naive UTC)"""
    return utcnow()
