"""
진행도 맵 시스템 커스텀 예외 계층입니다.
진행도 모델의 쓰기/점수 계산 실패를 구조화된 에러 코드와 메시지로 제공합니다.
"""

from typing import Optional, Any


class ProgressMapError(Exception):
    """진행도 맵 시스템 기본 예외 클래스."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class NotFoundError(ProgressMapError):
    """참조한 부모 또는 엔티티 ID가 트리에 존재하지 않음 (404 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_NOT_FOUND_001", details=details)


class InvalidEntityError(ProgressMapError):
    """쓰기 요청의 엔티티가 유효하지 않음 (완료율 범위, 상태 불일치, ID 중복 등)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_ENTITY_001", details=details)


class InvalidWeightsError(ProgressMapError):
    """우선순위 가중치 맵이 잘못됨 (음수, 누락된 우선순위 등)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_WEIGHTS_001", details=details)
