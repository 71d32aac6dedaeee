# letterbox/models/delivery.py
"""
배달 레코드 모델 (편지와 1:1)
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship
from .base import Base

DELIVERY_PENDING = "pending"
DELIVERY_DELIVERED = "delivered"

class Delivery(Base):
    __tablename__ = "delivery_TB"

    DELIVERY_ID = Column(String(36), primary_key=True)
    LETTER_ID = Column(String(36), ForeignKey('letter_TB.LETTER_ID'), unique=True, nullable=False)
    STATUS = Column(
        SQLEnum(DELIVERY_PENDING, DELIVERY_DELIVERED, name="delivery_status"),
        default=DELIVERY_PENDING,
        nullable=False
    )
    DELIVERED_AT = Column(DateTime)

    letter = relationship("Letter", back_populates="delivery")
