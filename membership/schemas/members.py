"""Request/response schemas for the admin member-management endpoints."""

from pydantic import BaseModel, Field

from membership.schemas.user import CamelModel, UserPublic, UserRole, UserStatus


class StatusUpdateRequest(BaseModel):
    status: UserStatus


class RoleUpdateRequest(BaseModel):
    role: UserRole


class MemberChangeResponse(BaseModel):
    """Result of a status or role update; changed is False when the value was already set."""

    user: UserPublic
    changed: bool


class MembersListResponse(BaseModel):
    users: list[UserPublic]


class MemberStatsResponse(CamelModel):
    """Dashboard counts."""

    total_members: int = Field(..., ge=0, description="Members that are not rejected")
    new_this_month: int = Field(..., ge=0, description="Members created this calendar month (UTC)")
    by_status: dict[str, int]
