# letterbox/schemas/__init__.py
"""
스키마 패키지
순환 import 방지를 위해 공통 스키마만 노출
"""

from .commons_schemas import ErrorResponse, MessageResponse

# 각 모듈별로 필요할 때 직접 import
# from .letter_schemas import LetterCreateRequest, LetterCreateResponse
# from .user_schemas import UserCreateRequest, UserResponse
# from .mailbox_schemas import MailboxResponse
