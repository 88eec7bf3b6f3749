"""
Authentication routes for the wound-care tracking system.

Handlers are sync so FastAPI runs them on its threadpool, one database
session per request. Auth errors propagate as AuthException subclasses and
are rendered by the global AppException handler.
"""
from fastapi import APIRouter, Depends, status
import logging

from .dependencies import get_auth_service, get_current_claims
from .schemas import (
    RegisterRequest, LoginRequest, RefreshTokenRequest, ChangePasswordRequest,
    LoginResponse, UserWithProfile, MessageResponse, LogoutResponse
)
from .service import AuthService
from .tokens import AccessTokenClaims

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/auth", tags=["Authentication"])

# ============================================================================
# PUBLIC ROUTES
# ============================================================================

@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED, summary="Register Patient or Clinician")
def register_route(
    registration: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Registration endpoint.

    Creates the account and its role-specific profile in one transaction
    and logs the new user in.

    Returns:
        LoginResponse with profile, access token and refresh token
    """
    return auth_service.register(
        email=registration.email,
        password=registration.password,
        first_name=registration.first_name,
        last_name=registration.last_name,
        role=registration.role
    )

@router.post("/login", response_model=LoginResponse, summary="User Login")
def login_route(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    User login endpoint.

    Returns:
        LoginResponse with profile, access token and refresh token
    """
    return auth_service.login(email=login_data.email, password=login_data.password)

@router.post("/refresh", response_model=LoginResponse, summary="Refresh Token Pair")
def refresh_token_route(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Exchange a refresh token for a new access/refresh pair.

    The presented refresh token is revoked and cannot be used again.
    """
    return auth_service.refresh(refresh_data.refresh_token)

# ============================================================================
# PROTECTED ROUTES (Bearer access token required)
# ============================================================================

@router.post("/logout", response_model=LogoutResponse, summary="User Logout")
def logout_route(
    claims: AccessTokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Logout endpoint.

    Revokes every refresh token of the caller. Access tokens are not
    tracked server-side and remain valid until they expire, so the client
    should discard its access token.
    """
    revoked = auth_service.logout(claims.user_id)
    return {"message": "Successfully logged out", "revoked_tokens": revoked}

@router.get("/profile", response_model=UserWithProfile, summary="Get Current User Profile")
def get_profile_route(
    claims: AccessTokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Return the caller's account merged with its role-specific profile."""
    return auth_service.get_profile(claims.user_id)

@router.post("/change-password", response_model=MessageResponse, summary="Change Own Password")
def change_password_route(
    password_data: ChangePasswordRequest,
    claims: AccessTokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Allows an authenticated user to change their own password."""
    auth_service.change_password(
        account_id=claims.user_id,
        old_password=password_data.old_password,
        new_password=password_data.new_password
    )
    return {"message": "Password changed successfully"}
