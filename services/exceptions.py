from typing import Any, Optional


class ServiceError(Exception):
    """서비스 계층 공통 예외 (전역 에러 핸들러에서 JSON 에러로 변환)"""

    status_code = 400
    code = "SERVICE_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ServiceError):
    """잘못된 입력값 (음수 점수, 0 이하 만점, 범위를 벗어난 가중치 등)"""

    status_code = 422
    code = "VALIDATION_ERROR"


class NotFoundError(ServiceError):
    """요청한 엔티티가 존재하지 않음"""

    status_code = 404
    code = "NOT_FOUND"

