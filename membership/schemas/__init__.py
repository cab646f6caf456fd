"""Pydantic request/response schemas."""

from membership.schemas.auth import (
    CurrentUser,
    LoginRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    PhoneUpdateRequest,
    TokenResponse,
)
from membership.schemas.health import HealthResponse
from membership.schemas.members import (
    MemberChangeResponse,
    MembersListResponse,
    MemberStatsResponse,
    RoleUpdateRequest,
    StatusUpdateRequest,
)
from membership.schemas.user import (
    RegistrationCandidate,
    UserPublic,
    UserRecord,
    UserRole,
    UserStatus,
)

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MemberChangeResponse",
    "MemberStatsResponse",
    "MembersListResponse",
    "PasswordChangeRequest",
    "PasswordResetRequest",
    "PhoneUpdateRequest",
    "RegistrationCandidate",
    "RoleUpdateRequest",
    "StatusUpdateRequest",
    "TokenResponse",
    "UserPublic",
    "UserRecord",
    "UserRole",
    "UserStatus",
]
