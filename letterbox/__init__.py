"""
LetterBox Service

핀코드 기반 지연 배달 편지 서비스
- 편지 작성 + 배달 예약
- 배달 시각 지연 평가 (스케줄러 없음)
- 개봉 시 배달 상태 전환
- 손그림 스트로크 오버레이 렌더링
"""

__version__ = "1.0.0"
__author__ = "LetterBox Team"
