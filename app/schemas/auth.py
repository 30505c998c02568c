"""Auth schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for creating an account."""

    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=128)
    username: str | None = Field(None, max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    """Public account data (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: str | None = None


class LoginResponse(BaseModel):
    id: str
    email: str


class RecoveryLinkRequest(BaseModel):
    url: str | None = None


class RecoveryTokensOut(BaseModel):
    access_token: str
    refresh_token: str
