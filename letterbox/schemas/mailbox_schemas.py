# letterbox/schemas/mailbox_schemas.py

from typing import List
from pydantic import BaseModel

from .letter_schemas import LetterOut


class MailboxLetter(LetterOut):
    countdown: str


class MailboxResponse(BaseModel):
    pincode: str
    ready: List[MailboxLetter]
    pending: List[MailboxLetter]
    unreadCount: int
