"""Shared route dependencies: record store access and domain-error to HTTP mapping."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from membership.core.config import get_settings
from membership.core.database import get_db
from membership.core.errors import (
    AccountNotActive,
    DuplicateIdentity,
    InvalidCredential,
    InvalidTransition,
    MembershipError,
    PermanentlyBlocked,
    ProtectedRecord,
    RecordNotFound,
    StorageUnavailable,
)
from membership.services.record_store import RecordStore, SqlStorage

_STATUS_BY_ERROR: list[tuple[type[MembershipError], int]] = [
    (DuplicateIdentity, status.HTTP_409_CONFLICT),
    (PermanentlyBlocked, status.HTTP_403_FORBIDDEN),
    (AccountNotActive, status.HTTP_403_FORBIDDEN),
    (ProtectedRecord, status.HTTP_403_FORBIDDEN),
    (RecordNotFound, status.HTTP_404_NOT_FOUND),
    (InvalidTransition, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidCredential, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (StorageUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def get_record_store(db: Annotated[Session, Depends(get_db)]) -> RecordStore:
    """Dependency: member record store over the request's DB session."""
    return RecordStore(SqlStorage(db), get_settings().STORAGE_KEY)


def http_error(e: MembershipError) -> HTTPException:
    """Translate a domain error into the HTTPException routes raise."""
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(e, error_cls):
            return HTTPException(status_code=code, detail=e.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
