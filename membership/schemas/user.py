"""Pydantic schemas for member records: the persisted shape, its public projection, and sign-up input."""

import re
import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from membership.core.config import COUNTRY_CODE_PATTERN
from membership.core.passwords import password_policy_violation

UserStatus = Literal["pending", "active", "deactive", "rejected"]
UserRole = Literal["member", "user", "staff", "supervisor", "manager", "admin"]

STATUS_VALUES: frozenset[str] = frozenset({"pending", "active", "deactive", "rejected"})
ROLE_VALUES: frozenset[str] = frozenset(
    {"member", "user", "staff", "supervisor", "manager", "admin"}
)

DEFAULT_ROLE: UserRole = "member"
DEFAULT_STATUS: UserStatus = "pending"

# Older stored records used "approved" for what is now "active".
LEGACY_STATUS_ALIASES = {"approved": "active"}

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

# Stable ids for stored entries written before ids existed.
LEGACY_ID_NAMESPACE = uuid.UUID("6f1c8a5e-2a7b-4d8e-9c0f-3b5d7e9a1c24")


def phone_key(country_code: str, phone_number: str) -> str:
    """Comparison key for a phone: country code + number with all whitespace removed."""
    return "".join(f"{country_code}{phone_number}".split())


def _normalize_status(value: Any) -> Any:
    if isinstance(value, str):
        v = value.strip().lower()
        return LEGACY_STATUS_ALIASES.get(v, v)
    return value


class CamelModel(BaseModel):
    """Base for schemas exchanged as camelCase JSON (fullName, countryCode, ...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class UserRecord(CamelModel):
    """
    One registrant/member as persisted in the member collection.

    credential holds a bcrypt hash, never the plain password.
    Missing optional fields in stored data fall back to defaults.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    full_name: str = ""
    email: str
    country_code: str = ""
    phone_number: str = ""
    credential: str = ""
    role: UserRole = DEFAULT_ROLE
    status: UserStatus = DEFAULT_STATUS
    created_at: datetime | None = None
    instagram: str | None = None
    tiktok: str | None = None
    facebook: str | None = None
    id_card_image: str | None = None

    @model_validator(mode="before")
    @classmethod
    def fill_legacy_id(cls, data: Any) -> Any:
        """Derive a stable id from the email for entries stored without one."""
        if isinstance(data, dict) and not data.get("id") and data.get("email"):
            data = dict(data)
            email = str(data["email"]).strip().lower()
            data["id"] = str(uuid.uuid5(LEGACY_ID_NAMESPACE, email))
        return data

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return _normalize_status(v)

    @property
    def phone_key(self) -> str:
        return phone_key(self.country_code, self.phone_number)

    @property
    def email_key(self) -> str:
        return self.email.strip().casefold()

    def to_storage(self) -> dict[str, Any]:
        """Serialize with camelCase field names for the stored JSON array."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserPublic(CamelModel):
    """Member record as returned to clients (no credential)."""

    id: str
    full_name: str
    email: str
    country_code: str
    phone_number: str
    role: UserRole
    status: UserStatus
    created_at: datetime | None = None
    instagram: str | None = None
    tiktok: str | None = None
    facebook: str | None = None
    id_card_image: str | None = None

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserPublic":
        return cls.model_validate(record.model_dump(exclude={"credential"}))


class RegistrationCandidate(CamelModel):
    """Sign-up input. The only place registration fields are validated."""

    full_name: str = Field(default="", max_length=255)
    email: str = Field(..., max_length=255)
    country_code: str = Field(..., max_length=5)
    phone_number: str = Field(..., max_length=32)
    password: str = Field(..., max_length=128)
    instagram: str | None = Field(default=None, max_length=255)
    tiktok: str | None = Field(default=None, max_length=255)
    facebook: str | None = Field(default=None, max_length=255)
    id_card_image: str | None = None

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Email Address is required")
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, v: str) -> str:
        v = v.strip()
        if not COUNTRY_CODE_PATTERN.match(v):
            raise ValueError("Country code must be + followed by 1-4 digits")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, v: str) -> str:
        v = "".join(v.split())
        if not v:
            raise ValueError("Phone Number is required")
        if not (v.isascii() and v.isdigit()):
            raise ValueError("Please enter a valid phone number")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        reason = password_policy_violation(v)
        if reason:
            raise ValueError(reason)
        return v

    @field_validator("instagram", "tiktok", "facebook")
    @classmethod
    def blank_handle_to_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()
