"""Self-service account endpoints for the signed-in member."""

from typing import Annotated

from fastapi import APIRouter, Depends

from membership.api.v1.auth import get_current_user
from membership.api.v1.deps import get_record_store, http_error
from membership.core.errors import MembershipError
from membership.schemas.auth import CurrentUser, PasswordChangeRequest, PhoneUpdateRequest
from membership.schemas.members import MemberChangeResponse
from membership.schemas.user import UserPublic
from membership.services.account import change_credential, update_phone
from membership.services.record_store import RecordStore

router = APIRouter()


@router.patch("/phone", response_model=MemberChangeResponse)
def patch_phone(
    body: PhoneUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> MemberChangeResponse:
    """Update the member's contact phone; 409 if another member already uses it."""
    try:
        record, changed = update_phone(
            store, current_user.id, body.country_code, body.phone_number
        )
    except MembershipError as e:
        raise http_error(e) from e
    return MemberChangeResponse(user=UserPublic.from_record(record), changed=changed)


@router.post("/password", response_model=UserPublic)
def post_password(
    body: PasswordChangeRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UserPublic:
    try:
        record = change_credential(
            store,
            current_user.id,
            body.current_password,
            body.new_password,
            body.confirm_password,
        )
    except MembershipError as e:
        raise http_error(e) from e
    return UserPublic.from_record(record)
