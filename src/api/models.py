"""Pydantic models for API request/response.

Field names follow the wire format of the GiftLink frontend.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., alias="firstName", min_length=1, max_length=100)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateRequest(BaseModel):
    """Request model for profile update."""
    name: str = Field(..., min_length=1, max_length=100, description="New first name")


class RegisterResponse(BaseModel):
    authtoken: str
    email: str


class LoginResponse(BaseModel):
    authtoken: str
    userName: str
    userEmail: str


class UpdateResponse(BaseModel):
    authtoken: str


class ErrorResponse(BaseModel):
    error: str
    code: str
