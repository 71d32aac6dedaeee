# letterbox/services/user_service.py
"""
사용자 디렉터리 서비스
"""

from typing import Dict, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from letterbox.models import User, is_valid_pincode
from letterbox.services.exceptions import LetterBoxValidationError, UserNotFoundError
from letterbox.services.letter_service import INVALID_PINCODE_MESSAGE, serialize_letter, serialize_user_ref
from letterbox.utils.logger import logger

def _newest_first(letters):
    return sorted(letters, key=lambda letter: letter.CREATED_AT, reverse=True)


async def register_user(session: AsyncSession, pincode) -> Tuple[User, bool]:
    """핀코드로 사용자 upsert. (user, created) 반환"""
    if not is_valid_pincode(pincode):
        raise LetterBoxValidationError(INVALID_PINCODE_MESSAGE)

    user, created = await User.get_or_create(session, pincode)
    if not created:
        logger.info(f"기존 사용자 확인: pincode={pincode}")
    return user, created


async def get_user_with_letters(session: AsyncSession, pincode) -> Dict:
    """사용자 + 보낸/받은 편지 목록 조회"""
    if not pincode:
        raise LetterBoxValidationError("Pincode is required")

    query = select(User).where(User.PINCODE == pincode).options(
        selectinload(User.sent_letters),
        selectinload(User.received_letters),
    )
    result = await session.execute(query)
    user = result.scalar_one_or_none()
    if not user:
        logger.warning(f"사용자를 찾을 수 없음: pincode={pincode}")
        raise UserNotFoundError(pincode)

    return {
        **serialize_user_ref(user),
        "sentLetters": [serialize_letter(letter, include_users=False) for letter in _newest_first(user.sent_letters)],
        "receivedLetters": [serialize_letter(letter, include_users=False) for letter in _newest_first(user.received_letters)],
    }
