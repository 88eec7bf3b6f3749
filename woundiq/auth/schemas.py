"""
Auth Schemas - Pydantic models for request validation and response serialization.
"""
from typing import Optional, Union
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from .models import User, UserRole
from ..patients.models import Patient
from ..clinicians.models import Clinician

class RegisterRequest(BaseModel):
    """
    Registration Schema - Used for self-registration of patients and clinicians

    Fields:
    - email: User's email address
    - password: Plain text password (length policy enforced by the service)
    - first_name / last_name: Display name for the profile record
    - role: clinician or patient
    """
    email: EmailStr
    password: str
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role: UserRole

class LoginRequest(BaseModel):
    """
    Login Schema - Used for authentication

    Fields:
    - email: User's email address
    - password: User's plain text password
    """
    email: EmailStr
    password: str

class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)

class ChangePasswordRequest(BaseModel):
    """
    Password Change Schema - Used by an authenticated user

    Fields:
    - old_password: Current password
    - new_password: Replacement password
    """
    old_password: str
    new_password: str

class UserWithProfile(BaseModel):
    """
    Account data merged with its role-specific profile name fields.
    """
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_records(cls, user: User, profile: Union[Patient, Clinician]) -> "UserWithProfile":
        """
        Build the view from an account row and its profile row.

        Args:
            user: Account record
            profile: Patient or Clinician record owned by the account

        Returns:
            UserWithProfile: Combined view; NULL name columns become empty strings
        """
        return cls(
            id=user.id,
            email=user.email,
            first_name=profile.first_name or "",
            last_name=profile.last_name or "",
            role=user.role,
            is_active=user.is_active,
            email_verified=user.email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

class LoginResponse(BaseModel):
    """
    Token pair plus the authenticated user's profile.
    """
    user: UserWithProfile
    token: str
    refresh_token: str

class MessageResponse(BaseModel):
    message: str

class LogoutResponse(MessageResponse):
    revoked_tokens: int
