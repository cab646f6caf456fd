"""Registration, JWT login, password reset, and auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from membership.api.v1.deps import get_record_store, http_error
from membership.core.config import get_settings
from membership.core.errors import AccountNotActive, MembershipError
from membership.core.security import decode_access_token
from membership.schemas.auth import (
    CurrentUser,
    LoginRequest,
    PasswordResetRequest,
    TokenResponse,
)
from membership.schemas.user import RegistrationCandidate, UserPublic
from membership.services.account import reset_credential
from membership.services.identity import ensure_can_sign_in, sign_in
from membership.services.record_store import RecordStore
from membership.services.registration import register_user

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(
    body: RegistrationCandidate,
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UserPublic:
    """
    Create a member account in status 'pending'. An administrator must approve
    it before the member can sign in.
    """
    try:
        record = register_user(store, body, get_settings())
    except MembershipError as e:
        raise http_error(e) from e
    return UserPublic.from_record(record)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> TokenResponse:
    """
    Authenticate with email or phone and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>

    Pending, rejected and deactivated accounts get 403 with their status in the detail.
    """
    try:
        result = sign_in(store, body.identifier, body.password)
    except AccountNotActive as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"status": e.status, "message": e.message},
        ) from e
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect credentials or user not found.",
        )
    record, token = result
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        user=UserPublic.from_record(record),
    )


@router.post("/password-reset", response_model=UserPublic)
def password_reset(
    body: PasswordResetRequest,
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UserPublic:
    """Set a new password for the member identified by email or phone."""
    try:
        record = reset_credential(
            store, body.identifier, body.new_password, body.confirm_password
        )
    except MembershipError as e:
        raise http_error(e) from e
    return UserPublic.from_record(record)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT for an active member. Raises 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )
    record = store.find(lambda r: r.id == sub)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        ensure_can_sign_in(record)
    except AccountNotActive as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return CurrentUser(id=record.id, email=record.email, role=record.role)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.get("/me", response_model=UserPublic)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UserPublic:
    """Return the signed-in member's profile."""
    try:
        record = store.get(current_user.id)
    except MembershipError as e:
        raise http_error(e) from e
    return UserPublic.from_record(record)
