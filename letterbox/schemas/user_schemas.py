# letterbox/schemas/user_schemas.py

from typing import List, Optional
from pydantic import BaseModel

from .commons_schemas import MessageResponse
from .letter_schemas import LetterOut


class UserCreateRequest(BaseModel):
    pincode: Optional[str] = None


class UserCreateResponse(MessageResponse):
    userId: str


class UserOut(BaseModel):
    id: str
    pincode: str
    createdAt: str
    sentLetters: List[LetterOut] = []
    receivedLetters: List[LetterOut] = []


class UserResponse(BaseModel):
    user: UserOut
