# letterbox/services/letter_service.py
"""
편지 저장소 + 배달 상태 전환 서비스

배달 지연은 예약 작업 없이 저장된 DELIVERY_TIME 과 현재 시각을
조회 시점에 비교해서만 판단한다.
"""

import math
import uuid
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from letterbox.models import (
    Delivery,
    Letter,
    User,
    DELIVERY_DELIVERED,
    DELIVERY_PENDING,
    LETTER_STYLE_COLUMNS,
    LETTER_STYLE_DEFAULTS,
    is_valid_pincode,
    to_iso,
)
from letterbox.schemas.letter_schemas import LetterCreateRequest
from letterbox.services.exceptions import (
    LetterBoxValidationError,
    LetterNotFoundError,
    LetterNotReadyError,
)
from letterbox.utils.logger import logger

SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_DELIVERY_DAYS = 1.0

MISSING_FIELDS_MESSAGE = (
    "Missing required fields: title, content, senderPincode, receiverPincode, or receiverAddress"
)
INVALID_DELIVERY_TIME_MESSAGE = "Invalid delivery time"
INVALID_PINCODE_MESSAGE = "Invalid pincode. Must be 6 digits."


def parse_delay_days(value) -> float:
    """요청의 deliveryTime(일 단위, 문자열/숫자)을 float 로 변환

    숫자 0 과 빈 값은 거절, 문자열 "0" 은 기본값 1일로 대체.
    음수는 이미 배달 가능한 편지가 된다. NaN/무한대는 거절.
    """
    if value is None or isinstance(value, bool) or (not isinstance(value, str) and value == 0):
        raise LetterBoxValidationError(INVALID_DELIVERY_TIME_MESSAGE)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise LetterBoxValidationError(INVALID_DELIVERY_TIME_MESSAGE)

    try:
        days = float(value)
    except (TypeError, ValueError):
        raise LetterBoxValidationError(INVALID_DELIVERY_TIME_MESSAGE)

    if not math.isfinite(days):
        raise LetterBoxValidationError(INVALID_DELIVERY_TIME_MESSAGE)

    return days or DEFAULT_DELIVERY_DAYS


def compute_delivery_time(now: datetime, delay_days: float) -> Tuple[datetime, int]:
    """(배달 시각, 지연 초) 계산. 지연 초는 정수로 반올림"""
    delivery_seconds = int(round(delay_days * SECONDS_PER_DAY))
    try:
        return now + timedelta(seconds=delivery_seconds), delivery_seconds
    except OverflowError:
        # datetime 표현 범위(서기 1~9999년)를 벗어나는 지연
        raise LetterBoxValidationError(INVALID_DELIVERY_TIME_MESSAGE)


def serialize_user_ref(user: User) -> Dict:
    return {
        "id": user.USER_ID,
        "pincode": user.PINCODE,
        "createdAt": to_iso(user.CREATED_AT),
    }


def serialize_delivery(delivery: Delivery) -> Dict:
    return {
        "id": delivery.DELIVERY_ID,
        "letterId": delivery.LETTER_ID,
        "status": delivery.STATUS,
        "deliveredAt": to_iso(delivery.DELIVERED_AT),
    }


def serialize_letter(letter: Letter, include_users: bool = True, include_delivery: bool = False) -> Dict:
    """편지 → API 응답 dict (스트로크는 역직렬화해서 포함)"""
    data = {
        "id": letter.LETTER_ID,
        "title": letter.TITLE,
        "content": letter.CONTENT,
        "receiverAddress": letter.RECEIVER_ADDRESS,
        "senderId": letter.SENDER_ID,
        "receiverId": letter.RECEIVER_ID,
        "deliveryTime": to_iso(letter.DELIVERY_TIME),
        "isDelivered": bool(letter.IS_DELIVERED),
        "createdAt": to_iso(letter.CREATED_AT),
        "brushStrokes": letter.strokes,
    }
    for field, column in LETTER_STYLE_COLUMNS.items():
        data[field] = getattr(letter, column)

    if include_users:
        data["sender"] = serialize_user_ref(letter.sender)
        data["receiver"] = serialize_user_ref(letter.receiver)
    if include_delivery and letter.delivery is not None:
        data["delivery"] = serialize_delivery(letter.delivery)
    return data


def _validate_create_request(request: LetterCreateRequest) -> float:
    required = (
        request.title,
        request.content,
        request.senderPincode,
        request.receiverPincode,
        request.receiverAddress,
    )
    if not all(required):
        logger.warning(
            f"필수 필드 누락: title={bool(request.title)}, content={bool(request.content)}, "
            f"senderPincode={request.senderPincode!r}, receiverPincode={request.receiverPincode!r}, "
            f"receiverAddress={bool(request.receiverAddress)}"
        )
        raise LetterBoxValidationError(MISSING_FIELDS_MESSAGE)

    try:
        delay_days = parse_delay_days(request.deliveryTime)
    except LetterBoxValidationError:
        logger.warning(f"잘못된 배달 시간: {request.deliveryTime!r}")
        raise

    if not (is_valid_pincode(request.senderPincode) and is_valid_pincode(request.receiverPincode)):
        raise LetterBoxValidationError(INVALID_PINCODE_MESSAGE)

    return delay_days


async def create_letter(session: AsyncSession, request: LetterCreateRequest, now: datetime) -> Dict:
    """편지 + 배달 레코드를 한 트랜잭션으로 생성"""
    delay_days = _validate_create_request(request)
    delivery_time, delivery_seconds = compute_delivery_time(now, delay_days)

    # 발신/수신자 upsert (롤백 시 만료되므로 ID만 바로 꺼내 둔다)
    sender, _ = await User.get_or_create(session, request.senderPincode)
    sender_id = sender.USER_ID
    receiver, _ = await User.get_or_create(session, request.receiverPincode)
    receiver_id = receiver.USER_ID

    styles = {
        column: getattr(request, field) or LETTER_STYLE_DEFAULTS[field]
        for field, column in LETTER_STYLE_COLUMNS.items()
    }
    strokes = [stroke.model_dump(exclude_unset=True) for stroke in request.brushStrokes or []]

    letter_id = str(uuid.uuid4())
    letter = Letter(
        LETTER_ID=letter_id,
        SENDER_ID=sender_id,
        RECEIVER_ID=receiver_id,
        TITLE=request.title,
        CONTENT=request.content,
        RECEIVER_ADDRESS=request.receiverAddress,
        BRUSH_STROKES=Letter.dump_strokes(strokes),
        DELIVERY_TIME=delivery_time,
        IS_DELIVERED=False,
        CREATED_AT=now,
        delivery=Delivery(DELIVERY_ID=str(uuid.uuid4()), STATUS=DELIVERY_PENDING),
        **styles
    )

    try:
        session.add(letter)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        f"편지 저장 완료: {letter_id} (strokes={len(strokes)}, "
        f"delay={delivery_seconds}s, delivery={to_iso(delivery_time)})"
    )

    return {
        "message": "Letter sent successfully",
        "letterId": letter_id,
        "deliveryTime": to_iso(delivery_time),
        "deliverySeconds": delivery_seconds,
    }


async def fetch_letters(
    session: AsyncSession,
    receiver_pincode: Optional[str] = None,
    sender_pincode: Optional[str] = None,
    include_pending: bool = False,
    now: Optional[datetime] = None,
) -> List[Letter]:
    """핀코드 기준 편지 조회 (최신순). 수신자 조회가 우선"""
    if not receiver_pincode and not sender_pincode:
        raise LetterBoxValidationError("Either receiverPincode or senderPincode is required")

    query = select(Letter).options(
        selectinload(Letter.sender),
        selectinload(Letter.receiver),
    )

    if receiver_pincode:
        user = await User.get_by_pincode(session, receiver_pincode)
        if not user:
            return []
        query = query.where(Letter.RECEIVER_ID == user.USER_ID)
        if not include_pending:
            query = query.where(Letter.DELIVERY_TIME <= now)
    else:
        user = await User.get_by_pincode(session, sender_pincode)
        if not user:
            return []
        query = query.where(Letter.SENDER_ID == user.USER_ID)

    result = await session.execute(query.order_by(Letter.CREATED_AT.desc()))
    return list(result.scalars().all())


async def list_letters(
    session: AsyncSession,
    receiver_pincode: Optional[str] = None,
    sender_pincode: Optional[str] = None,
    include_pending: bool = False,
    now: Optional[datetime] = None,
) -> List[Dict]:
    letters = await fetch_letters(session, receiver_pincode, sender_pincode, include_pending, now)
    logger.info(
        f"편지 조회: receiver={receiver_pincode}, sender={sender_pincode}, "
        f"includePending={include_pending}, count={len(letters)}"
    )
    return [serialize_letter(letter) for letter in letters]


async def deliver_letter(session: AsyncSession, letter_id: str, now: datetime) -> Dict:
    """개봉 처리: 배달 시각이 지났으면 IS_DELIVERED / 배달 상태를 함께 갱신

    이미 개봉된 편지에 다시 호출해도 같은 최종 상태를 돌려준다.
    """
    letter = await Letter.get_by_id(session, letter_id)
    if not letter:
        logger.warning(f"편지를 찾을 수 없음: letter_id={letter_id}")
        raise LetterNotFoundError(letter_id)

    if not letter.is_ready(now):
        logger.info(f"배달 전 개봉 시도 거절: {letter_id} (delivery={to_iso(letter.DELIVERY_TIME)})")
        raise LetterNotReadyError(letter.DELIVERY_TIME, now)

    if letter.IS_DELIVERED and letter.delivery is not None and letter.delivery.STATUS == DELIVERY_DELIVERED:
        logger.info(f"이미 배달 완료된 편지: {letter_id}")
        return serialize_letter(letter, include_delivery=True)

    letter.IS_DELIVERED = True
    if letter.delivery is None:
        # 구버전 데이터: 배달 레코드가 없으면 함께 만든다
        letter.delivery = Delivery(DELIVERY_ID=str(uuid.uuid4()), LETTER_ID=letter.LETTER_ID)
    letter.delivery.STATUS = DELIVERY_DELIVERED
    if letter.delivery.DELIVERED_AT is None:
        letter.delivery.DELIVERED_AT = now

    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"편지 배달 완료 처리: {letter_id}")
    return serialize_letter(letter, include_delivery=True)
