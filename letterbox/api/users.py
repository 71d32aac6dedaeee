# letterbox/api/users.py
"""
핀코드 사용자 API
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from letterbox.api.deps import get_async_session
from letterbox.schemas.user_schemas import UserCreateRequest, UserCreateResponse, UserResponse
from letterbox.services import user_service
from letterbox.services.exceptions import LetterBoxValidationError, UserNotFoundError
from letterbox.utils.logger import logger

router = APIRouter(tags=["users"])


@router.post("/users", response_model=UserCreateResponse, responses={201: {"model": UserCreateResponse}})
async def register_user(request: UserCreateRequest, session: AsyncSession = Depends(get_async_session)):
    """핀코드 사용자 등록 (이미 있으면 200)"""
    try:
        user, created = await user_service.register_user(session, request.pincode)
        if created:
            return JSONResponse(
                status_code=201,
                content={"message": "User created successfully", "userId": user.USER_ID},
            )
        return {"message": "User already exists", "userId": user.USER_ID}

    except LetterBoxValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"사용자 등록 실패: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/users", response_model=UserResponse)
async def get_user(pincode: Optional[str] = None, session: AsyncSession = Depends(get_async_session)):
    """사용자 + 보낸/받은 편지 조회"""
    try:
        user = await user_service.get_user_with_letters(session, pincode)
        return {"user": user}

    except LetterBoxValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except Exception as e:
        logger.error(f"사용자 조회 실패: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
