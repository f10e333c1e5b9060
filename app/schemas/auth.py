import uuid

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr | None = None
    password: str | None = None
    wallet_address: str
    role: str


class UserResponse(CamelModel):
    id: uuid.UUID
    email: str | None
    wallet_address: str
    role: str


class RegisterResponse(CamelModel):
    token: str
    refresh_token: str
    user: UserResponse


class LoginRequest(CamelModel):
    identifier: str
    password: str | None = None


class LoginResponse(CamelModel):
    access_token: str
    refresh_token: str


class RefreshTokenRequest(CamelModel):
    refresh_token: str | None = None


class VerifyTokenRequest(CamelModel):
    token: str | None = Field(default=None)
