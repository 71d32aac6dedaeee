# letterbox/models/user.py
"""
사용자 모델 (핀코드 = 유일한 식별/주소 키)
"""

import re
import uuid
from typing import Optional
from sqlalchemy import Column, String, DateTime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import relationship
from .base import Base, utcnow
from letterbox.utils.logger import logger

PINCODE_PATTERN = re.compile(r"[0-9]{6}")

def is_valid_pincode(pincode) -> bool:
    return isinstance(pincode, str) and PINCODE_PATTERN.fullmatch(pincode) is not None

class User(Base):
    __tablename__ = "user_TB"

    USER_ID = Column(String(36), primary_key=True)
    PINCODE = Column(String(6), unique=True, nullable=False, index=True)
    CREATED_AT = Column(DateTime, default=utcnow, nullable=False)

    sent_letters = relationship(
        "Letter", foreign_keys="Letter.SENDER_ID", back_populates="sender"
    )
    received_letters = relationship(
        "Letter", foreign_keys="Letter.RECEIVER_ID", back_populates="receiver"
    )

    @classmethod
    async def get_by_pincode(cls, session: AsyncSession, pincode: str) -> Optional["User"]:
        result = await session.execute(select(cls).where(cls.PINCODE == pincode))
        return result.scalar_one_or_none()

    @classmethod
    async def get_or_create(cls, session: AsyncSession, pincode: str) -> tuple["User", bool]:
        """핀코드로 조회, 없으면 생성. (user, created) 반환

        동시에 같은 핀코드를 만들면 PINCODE 유니크 제약이 늦은 쪽을 거절하므로
        롤백 후 다시 조회한다.
        """
        user = await cls.get_by_pincode(session, pincode)
        if user:
            return user, False

        user = cls(USER_ID=str(uuid.uuid4()), PINCODE=pincode, CREATED_AT=utcnow())
        session.add(user)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            logger.warning(f"핀코드 동시 생성 감지, 기존 사용자 재조회: pincode={pincode}")
            existing = await cls.get_by_pincode(session, pincode)
            if existing is None:
                raise
            return existing, False

        logger.info(f"사용자 생성 완료: pincode={pincode}")
        return user, True
