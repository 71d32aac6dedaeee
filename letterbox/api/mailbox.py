# letterbox/api/mailbox.py
"""
우편함 API (도착 / 배송 중 분리 + 읽지 않은 편지 수)
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from letterbox.api.deps import get_async_session, get_current_time
from letterbox.schemas.mailbox_schemas import MailboxResponse
from letterbox.services import mailbox_service
from letterbox.services.exceptions import LetterBoxValidationError
from letterbox.utils.logger import logger

router = APIRouter(tags=["mailbox"])


@router.get("/mailbox", response_model=MailboxResponse)
async def get_mailbox(
    pincode: Optional[str] = None,
    session: AsyncSession = Depends(get_async_session),
    now: datetime = Depends(get_current_time),
):
    try:
        return await mailbox_service.build_mailbox(session, pincode, now)

    except LetterBoxValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"우편함 조회 실패: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
