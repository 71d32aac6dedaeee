# letterbox/services/exceptions.py
"""
서비스 계층 예외 (라우터에서 HTTP 상태 코드로 변환)
"""

from datetime import datetime


class LetterBoxError(Exception):
    """서비스 공통 예외"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LetterBoxValidationError(LetterBoxError):
    """필수값 누락/형식 오류 → 400"""


class LetterNotFoundError(LetterBoxError):
    def __init__(self, letter_id: str):
        super().__init__("Letter not found")
        self.letter_id = letter_id


class UserNotFoundError(LetterBoxError):
    def __init__(self, pincode: str):
        super().__init__("User not found")
        self.pincode = pincode


class LetterNotReadyError(LetterBoxError):
    """배달 시각 전에 개봉 시도 → 400 (남은 시간 계산용 시각 포함)"""

    def __init__(self, delivery_time: datetime, current_time: datetime):
        super().__init__("Letter is not ready for delivery yet")
        self.delivery_time = delivery_time
        self.current_time = current_time
