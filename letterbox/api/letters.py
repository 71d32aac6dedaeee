# letterbox/api/letters.py
"""
편지 작성 / 조회 / 개봉 API
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from letterbox.api.deps import get_async_session, get_current_time
from letterbox.config import settings
from letterbox.models import Letter, to_iso
from letterbox.schemas.letter_schemas import (
    LetterCreateRequest,
    LetterCreateResponse,
    LetterDeliverResponse,
    LetterListResponse,
)
from letterbox.services import letter_service, render_service
from letterbox.services.exceptions import (
    LetterBoxValidationError,
    LetterNotFoundError,
    LetterNotReadyError,
)
from letterbox.utils.logger import logger

router = APIRouter(tags=["letters"])


@router.post("/letters", response_model=LetterCreateResponse, status_code=201)
async def create_letter(
    request: LetterCreateRequest,
    session: AsyncSession = Depends(get_async_session),
    now: datetime = Depends(get_current_time),
):
    """편지 작성 + 배달 예약"""
    try:
        logger.info(
            f"편지 작성 요청: sender={request.senderPincode}, receiver={request.receiverPincode}, "
            f"deliveryTime={request.deliveryTime!r}, strokes={len(request.brushStrokes or [])}"
        )
        return await letter_service.create_letter(session, request, now)

    except LetterBoxValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except SQLAlchemyError as e:
        logger.error(f"편지 저장 실패: {e}")
        raise HTTPException(status_code=500, detail="Failed to create letter")
    except Exception as e:
        logger.error(f"편지 작성 API 오류: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/letters", response_model=LetterListResponse)
async def list_letters(
    receiverPincode: Optional[str] = None,
    senderPincode: Optional[str] = None,
    includePending: Optional[str] = None,
    session: AsyncSession = Depends(get_async_session),
    now: datetime = Depends(get_current_time),
):
    """핀코드별 편지 목록 (기본: 배달 시각이 지난 받은 편지만)"""
    try:
        letters = await letter_service.list_letters(
            session,
            receiver_pincode=receiverPincode,
            sender_pincode=senderPincode,
            include_pending=includePending == "true",
            now=now,
        )
        return {"letters": letters}

    except LetterBoxValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"편지 조회 실패: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.api_route("/letters/{letter_id}/deliver", methods=["POST", "PUT"], response_model=LetterDeliverResponse)
async def deliver_letter(
    letter_id: str,
    session: AsyncSession = Depends(get_async_session),
    now: datetime = Depends(get_current_time),
):
    """편지 개봉 → 배달 완료 처리 (POST/PUT 동일)"""
    try:
        letter = await letter_service.deliver_letter(session, letter_id, now)
        return {"message": "Letter marked as delivered", "letter": letter}

    except LetterNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except LetterNotReadyError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": e.message,
                "deliveryTime": to_iso(e.delivery_time),
                "currentTime": to_iso(e.current_time),
            },
        )
    except Exception as e:
        logger.error(f"편지 배달 처리 실패: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/letters/{letter_id}/overlay.png", response_class=Response)
async def render_letter_overlay(
    letter_id: str,
    width: int = Query(settings.overlay_width, ge=1, le=settings.overlay_max_side),
    height: int = Query(settings.overlay_height, ge=1, le=settings.overlay_max_side),
    paper: bool = False,
    session: AsyncSession = Depends(get_async_session),
):
    """저장된 스트로크를 PNG 로 렌더링"""
    try:
        letter = await Letter.get_by_id(session, letter_id)
        if not letter:
            raise HTTPException(status_code=404, detail="Letter not found")

        image = render_service.render_png(
            letter.strokes,
            width,
            height,
            seed=letter.LETTER_ID,
            background=letter.LETTER_COLOR if paper else None,
        )
        return Response(content=image, media_type="image/png", headers={"Cache-Control": "no-cache"})

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"오버레이 렌더링 실패: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
