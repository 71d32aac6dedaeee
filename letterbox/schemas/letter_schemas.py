# letterbox/schemas/letter_schemas.py

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .commons_schemas import MessageResponse, UserRef


# 캔버스 좌표/굵기 허용 범위
STROKE_COORDINATE_LIMIT = 100_000
STROKE_SIZE_LIMIT = 1_000


# 손그림 스트로크 한 점 (알 수 없는 키는 그대로 보존)
class BrushStroke(BaseModel):
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)

    x: float = Field(ge=-STROKE_COORDINATE_LIMIT, le=STROKE_COORDINATE_LIMIT)
    y: float = Field(ge=-STROKE_COORDINATE_LIMIT, le=STROKE_COORDINATE_LIMIT)
    size: float = Field(gt=0, le=STROKE_SIZE_LIMIT)
    color: str
    type: str  # brush / fingerprint / lip / text
    id: Optional[str] = None
    timestamp: Optional[float] = None
    strokeId: Optional[str] = None  # 연결된 스트로크 묶음 ID
    isNewStroke: Optional[bool] = None


# 요청 스키마 (필수값 검증은 서비스에서 400으로 처리)
class LetterCreateRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    senderPincode: Optional[str] = None
    receiverPincode: Optional[str] = None
    receiverAddress: Optional[str] = None
    deliveryTime: Any = None  # 일 단위 (문자열 또는 숫자)

    letterColor: Optional[str] = None
    envelopeColor: Optional[str] = None
    stampColor: Optional[str] = None
    stampDesign: Optional[str] = None
    envelopeDesign: Optional[str] = None
    handwritingFont: Optional[str] = None
    inkColor: Optional[str] = None
    paperTexture: Optional[str] = None
    paperType: Optional[str] = None
    foldStyle: Optional[str] = None

    brushStrokes: Optional[List[BrushStroke]] = None


class LetterCreateResponse(MessageResponse):
    letterId: str
    deliveryTime: str
    deliverySeconds: int


class DeliveryOut(BaseModel):
    id: str
    letterId: str
    status: str
    deliveredAt: Optional[str] = None


class LetterOut(BaseModel):
    id: str
    title: str
    content: str
    receiverAddress: str
    senderId: str
    receiverId: str
    deliveryTime: str
    isDelivered: bool
    createdAt: str

    letterColor: str
    envelopeColor: str
    stampColor: str
    stampDesign: str
    envelopeDesign: str
    handwritingFont: str
    inkColor: str
    paperTexture: str
    paperType: str
    foldStyle: str

    brushStrokes: List[Dict[str, Any]] = []

    sender: Optional[UserRef] = None
    receiver: Optional[UserRef] = None
    delivery: Optional[DeliveryOut] = None


class LetterListResponse(BaseModel):
    letters: List[LetterOut]


class LetterDeliverResponse(MessageResponse):
    letter: LetterOut
