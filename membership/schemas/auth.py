"""Request/response schemas for auth and self-service account endpoints."""

from pydantic import Field

from membership.schemas.user import CamelModel, UserPublic, UserRole


class LoginRequest(CamelModel):
    """Credentials for login; identifier is an email or country code + phone."""

    identifier: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias="emailOrPhone",
        description="Email address or country code + phone number",
    )
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(CamelModel):
    """JWT access token and the signed-in member."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserPublic


class PasswordResetRequest(CamelModel):
    """Forgot-password: identify the member and choose a new password."""

    identifier: str = Field(..., min_length=1, max_length=255)
    new_password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)


class PasswordChangeRequest(CamelModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)


class PhoneUpdateRequest(CamelModel):
    country_code: str = Field(..., pattern=r"^\+\d{1,4}$")
    phone_number: str = Field(..., min_length=1, max_length=32, pattern=r"^[\d\s]+$")


class CurrentUser(CamelModel):
    """Authenticated member (id, email, role) for dependency injection."""

    id: str
    email: str
    role: UserRole
