# hostel_api/api/schemas/auth_schema.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    full_name: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8, max_length=200)


class LoginRequest(BaseModel):
    email: EmailStr
    # sem mínimo aqui: senha curta deve dar 401, não 400
    password: str = Field(min_length=1, max_length=200)


class UserResponse(BaseModel):
    id: int
    full_name: str
    email: EmailStr
    role: str


class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "Bearer"


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"


class SessionResponse(BaseModel):
    id: int
    user_agent: str | None
    ip_address: str | None
    fingerprint: str | None
    created_at: datetime
    last_used_at: datetime | None
    expires_at: datetime


class RevokedCountResponse(BaseModel):
    message: str
    revoked: int


class MessageResponse(BaseModel):
    message: str
