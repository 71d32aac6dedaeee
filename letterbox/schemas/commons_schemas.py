# letterbox/schemas/commons_schemas.py
"""
공통 스키마 - 여러 API에서 공유하는 스키마들
"""

from pydantic import BaseModel
from typing import Optional

# 모든 오류 응답은 {"error": ...} 형태
class ErrorResponse(BaseModel):
    error: str

class MessageResponse(BaseModel):
    message: str

# 편지에 포함되는 사용자 참조
class UserRef(BaseModel):
    id: str
    pincode: str
    createdAt: Optional[str] = None
