from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
import re


# ============================================================
# Request Schemas (What client sends)
# ============================================================

class UserRegister(BaseModel):
    """Schema for user registration request"""

    email: EmailStr
    password: str = Field(
        min_length=8,
        max_length=100,
        description="Password must be 8-100 characters"
    )
    full_name: str = Field(
        min_length=2,
        max_length=100,
        description="Full name must be 2-100 characters"
    )

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """
        Requirements: at least one uppercase letter, one lowercase
        letter and one digit (length is checked by the Field).
        """
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        """Remove extra whitespace from name"""
        return " ".join(v.split())

    class Config:
        json_schema_extra = {
            "example": {
                "email": "learner@example.edu",
                "password": "SecurePass123",
                "full_name": "Sara Tesfaye"
            }
        }


class UserLogin(BaseModel):
    """Schema for user login request"""

    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


# ============================================================
# Response Schemas (What server sends back)
# ============================================================

class UserResponse(BaseModel):
    """Schema for user data in responses (NO password!)"""

    id: UUID
    email: str
    full_name: str
    is_active: bool
    roles: List[str] = Field(default_factory=list)
    created_at: datetime
    last_login: Optional[datetime] = None


class TokenResponse(BaseModel):
    """Schema for authentication token response"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until access token expires
    user: UserResponse


class TokenRefreshResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


# ============================================================
# Error Schemas
# ============================================================

class ErrorResponse(BaseModel):
    """Schema for error responses"""

    detail: str

    class Config:
        json_schema_extra = {
            "example": {
                "detail": "Invalid email or password"
            }
        }
