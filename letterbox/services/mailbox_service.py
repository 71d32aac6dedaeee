# letterbox/services/mailbox_service.py
"""
우편함 뷰: 수신 편지를 '도착'/'배송 중'으로 나누고 남은 시간 라벨을 붙인다.

남은 시간이 readiness_clamp_hours(약 1년)를 넘는 편지는 과거 일/초 단위
변환 오류로 저장된 데이터로 보고 도착한 것으로 취급한다.
"""

import math
from datetime import datetime
from typing import Dict

from sqlalchemy.ext.asyncio import AsyncSession

from letterbox.config import settings
from letterbox.models import Letter
from letterbox.services.exceptions import LetterBoxValidationError
from letterbox.services.letter_service import fetch_letters, serialize_letter
from letterbox.utils.logger import logger

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


def remaining_ms(delivery_time: datetime, now: datetime) -> int:
    return math.floor((delivery_time - now).total_seconds() * MS_PER_SECOND)


def exceeds_clamp(delivery_time: datetime, now: datetime) -> bool:
    return remaining_ms(delivery_time, now) // MS_PER_HOUR > settings.readiness_clamp_hours


def is_ready_for_mailbox(letter: Letter, now: datetime) -> bool:
    if exceeds_clamp(letter.DELIVERY_TIME, now):
        logger.warning(f"비정상적으로 먼 배달 시각, 도착으로 처리: {letter.LETTER_ID}")
        return True
    return letter.is_ready(now)


def format_countdown(delivery_time: datetime, now: datetime) -> str:
    diff_ms = remaining_ms(delivery_time, now)
    if diff_ms <= 0 or diff_ms // MS_PER_HOUR > settings.readiness_clamp_hours:
        return "Ready for delivery"

    hours = diff_ms // MS_PER_HOUR
    minutes = (diff_ms % MS_PER_HOUR) // MS_PER_MINUTE
    seconds = (diff_ms % MS_PER_MINUTE) // MS_PER_SECOND

    if hours > 0:
        return f"{hours}h {minutes}m until delivery"
    if minutes > 0:
        return f"{minutes}m {seconds}s until delivery"
    return f"{seconds}s until delivery"


async def build_mailbox(session: AsyncSession, pincode: str, now: datetime) -> Dict:
    if not pincode:
        raise LetterBoxValidationError("Pincode is required")

    letters = await fetch_letters(session, receiver_pincode=pincode, include_pending=True, now=now)

    ready, pending = [], []
    for letter in letters:
        entry = serialize_letter(letter)
        entry["countdown"] = format_countdown(letter.DELIVERY_TIME, now)
        if is_ready_for_mailbox(letter, now):
            ready.append(entry)
        else:
            pending.append(entry)

    unread_count = sum(1 for entry in ready if not entry["isDelivered"])
    logger.info(f"우편함 조회: pincode={pincode}, ready={len(ready)}, pending={len(pending)}, unread={unread_count}")

    return {
        "pincode": pincode,
        "ready": ready,
        "pending": pending,
        "unreadCount": unread_count,
    }
