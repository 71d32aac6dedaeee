# letterbox/models/letter.py
"""
편지 모델

스트로크 오버레이는 정규화하지 않고 JSON 텍스트 한 덩어리로 저장한다.
"""

import json
from typing import Dict, List, Optional
from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import relationship, selectinload
from .base import Base, utcnow

# 요청에 없거나 빈 값이면 서버에서 채우는 스타일 기본값 (요청 필드명 → 기본값)
LETTER_STYLE_DEFAULTS = {
    "letterColor": "#FEFEFE",
    "envelopeColor": "#8B4513",
    "stampColor": "#D97706",
    "stampDesign": "classic",
    "envelopeDesign": "standard",
    "handwritingFont": "cursive",
    "inkColor": "#2D3748",
    "paperTexture": "smooth",
    "paperType": "standard",
    "foldStyle": "classic",
}

# 요청 필드명 → 컬럼명
LETTER_STYLE_COLUMNS = {
    "letterColor": "LETTER_COLOR",
    "envelopeColor": "ENVELOPE_COLOR",
    "stampColor": "STAMP_COLOR",
    "stampDesign": "STAMP_DESIGN",
    "envelopeDesign": "ENVELOPE_DESIGN",
    "handwritingFont": "HANDWRITING_FONT",
    "inkColor": "INK_COLOR",
    "paperTexture": "PAPER_TEXTURE",
    "paperType": "PAPER_TYPE",
    "foldStyle": "FOLD_STYLE",
}

class Letter(Base):
    __tablename__ = "letter_TB"

    LETTER_ID = Column(String(36), primary_key=True)
    SENDER_ID = Column(String(36), ForeignKey('user_TB.USER_ID'), nullable=False, index=True)
    RECEIVER_ID = Column(String(36), ForeignKey('user_TB.USER_ID'), nullable=False, index=True)
    TITLE = Column(String(200), nullable=False)
    CONTENT = Column(Text, nullable=False)
    RECEIVER_ADDRESS = Column(Text, nullable=False)

    LETTER_COLOR = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["letterColor"])
    ENVELOPE_COLOR = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["envelopeColor"])
    STAMP_COLOR = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["stampColor"])
    STAMP_DESIGN = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["stampDesign"])
    ENVELOPE_DESIGN = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["envelopeDesign"])
    HANDWRITING_FONT = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["handwritingFont"])
    INK_COLOR = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["inkColor"])
    PAPER_TEXTURE = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["paperTexture"])
    PAPER_TYPE = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["paperType"])
    FOLD_STYLE = Column(String(50), nullable=False, default=LETTER_STYLE_DEFAULTS["foldStyle"])

    BRUSH_STROKES = Column(Text, nullable=True)  # JSON 직렬화된 스트로크 목록

    DELIVERY_TIME = Column(DateTime, nullable=False, index=True)
    IS_DELIVERED = Column(Boolean, default=False, nullable=False)
    CREATED_AT = Column(DateTime, default=utcnow, nullable=False)

    sender = relationship("User", foreign_keys=[SENDER_ID], back_populates="sent_letters")
    receiver = relationship("User", foreign_keys=[RECEIVER_ID], back_populates="received_letters")
    delivery = relationship(
        "Delivery", back_populates="letter", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def strokes(self) -> List[Dict]:
        """저장된 스트로크 역직렬화 (없으면 빈 목록)"""
        if not self.BRUSH_STROKES:
            return []
        return json.loads(self.BRUSH_STROKES)

    @staticmethod
    def dump_strokes(strokes: Optional[List[Dict]]) -> Optional[str]:
        if not strokes:
            return None
        return json.dumps(strokes, ensure_ascii=False)

    def is_ready(self, now) -> bool:
        return self.DELIVERY_TIME <= now

    @classmethod
    async def get_by_id(cls, session: AsyncSession, letter_id: str) -> Optional["Letter"]:
        """발신자/수신자/배달 레코드까지 함께 조회"""
        query = select(cls).where(cls.LETTER_ID == letter_id).options(
            selectinload(cls.sender),
            selectinload(cls.receiver),
            selectinload(cls.delivery),
        )
        result = await session.execute(query)
        return result.scalar_one_or_none()
