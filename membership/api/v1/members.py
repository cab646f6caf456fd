"""Admin member-management endpoints: list, approve/reject, role changes, deletion, stats."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from membership.api.v1.auth import require_admin
from membership.api.v1.deps import get_record_store, http_error
from membership.core.config import get_settings
from membership.core.errors import MembershipError
from membership.schemas.auth import CurrentUser
from membership.schemas.members import (
    MemberChangeResponse,
    MembersListResponse,
    MemberStatsResponse,
    RoleUpdateRequest,
    StatusUpdateRequest,
)
from membership.schemas.user import UserPublic, UserStatus
from membership.services.lifecycle import (
    delete_user,
    list_pending,
    list_users,
    member_stats,
    set_user_role,
    set_user_status,
)
from membership.services.record_store import RecordStore

router = APIRouter()


@router.get("", response_model=MembersListResponse)
def get_members(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_record_store)],
    status_filter: Annotated[UserStatus | None, Query(alias="status")] = None,
    q: Annotated[str | None, Query(max_length=255)] = None,
) -> MembersListResponse:
    """List members in registration order, optionally filtered by status and name/email search."""
    users = list_users(store, status=status_filter, query=q)
    return MembersListResponse(users=[UserPublic.from_record(u) for u in users])


@router.get("/pending", response_model=MembersListResponse)
def get_pending_members(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> MembersListResponse:
    """Registrations waiting for approval."""
    users = list_pending(store)
    return MembersListResponse(users=[UserPublic.from_record(u) for u in users])


@router.get("/stats", response_model=MemberStatsResponse)
def get_member_stats(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> MemberStatsResponse:
    return MemberStatsResponse.model_validate(member_stats(store))


@router.patch("/{member_id}/status", response_model=MemberChangeResponse)
def patch_member_status(
    member_id: str,
    body: StatusUpdateRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> MemberChangeResponse:
    """
    Approve, reject, deactivate or reactivate a member.
    changed=false means the member already had that status and nothing was written.
    """
    try:
        record, changed = set_user_status(store, member_id, body.status, get_settings())
    except MembershipError as e:
        raise http_error(e) from e
    return MemberChangeResponse(user=UserPublic.from_record(record), changed=changed)


@router.patch("/{member_id}/role", response_model=MemberChangeResponse)
def patch_member_role(
    member_id: str,
    body: RoleUpdateRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> MemberChangeResponse:
    try:
        record, changed = set_user_role(store, member_id, body.role, get_settings())
    except MembershipError as e:
        raise http_error(e) from e
    return MemberChangeResponse(user=UserPublic.from_record(record), changed=changed)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    member_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> Response:
    try:
        delete_user(store, member_id, get_settings())
    except MembershipError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
