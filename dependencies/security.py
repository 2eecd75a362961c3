from dataclasses import dataclass
from typing import Optional, Annotated
from fastapi import Depends, Header, HTTPException
from config.settings import settings
import hmac

# ✅ 사용자 역할
ROLE_ADMIN = "ADMIN"
ROLE_TEACHER = "TEACHER"
ROLE_STUDENT = "STUDENT"
ROLE_PARENT = "PARENT"
ROLE_ACCOUNTANT = "ACCOUNTANT"
ALL_ROLES = {ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT, ROLE_PARENT, ROLE_ACCOUNTANT}

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]
UserIdHeader = Annotated[Optional[str], Header(alias="X-User-Id")]
UserRoleHeader = Annotated[Optional[str], Header(alias="X-User-Role")]


@dataclass
class CurrentUser:
    user_id: str
    role: str


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_api_token(authorization: AuthHeader = None):
    # 설정 누락 방지: 환경에서 토큰이 비어있으면 개발 중 오류를 명확히 드러냄
    if not settings.API_INTERNAL_TOKEN:
        raise HTTPException(status_code=500, detail="Server token not configured")

    if not authorization:
        raise _unauthorized("Missing Authorization header")

    # "Bearer <token>" 파싱
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise _unauthorized("Invalid Authorization header format")

    if scheme.lower() != "bearer":
        raise _unauthorized("Invalid auth scheme")

    # 타이밍 안전 비교
    if not hmac.compare_digest(token.strip(), settings.API_INTERNAL_TOKEN):
        raise _unauthorized("Invalid token")

    return {"client": "gateway"}


def get_current_user(
    _client: dict = Depends(require_api_token),
    user_id: UserIdHeader = None,
    role: UserRoleHeader = None,
) -> CurrentUser:
    """게이트웨이가 전달한 사용자 헤더(X-User-Id / X-User-Role) → CurrentUser"""
    if not user_id or not role:
        raise _unauthorized("User not authenticated")

    role = role.strip().upper()
    if role not in ALL_ROLES:
        raise HTTPException(status_code=403, detail=f"Unknown role: {role}")

    return CurrentUser(user_id=user_id.strip(), role=role)


def require_roles(*roles: str):
    """허용된 역할만 통과시키는 의존성 생성기"""
    allowed = set(roles)

    def _checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return _checker
