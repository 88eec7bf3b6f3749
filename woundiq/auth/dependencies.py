"""
FastAPI dependencies for authentication and authorization.

Access tokens are verified statelessly: the claims inside a valid token are
trusted without a database lookup.
"""
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional

from ..database import get_db
from .exceptions import InvalidTokenException, RoleDeniedException
from .models import UserRole
from .repository import AuthRepository
from .service import AuthService
from .tokens import AccessTokenClaims, TokenIssuer

# Extracts "Authorization: Bearer <token>"; auto_error is off so missing
# credentials go through the same 401 response as invalid ones
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login", auto_error=False)

def get_token_issuer(request: Request) -> TokenIssuer:
    """
    Return the issuer constructed at application startup.

    Args:
        request: Incoming request

    Returns:
        TokenIssuer: Application-wide token issuer
    """
    return request.app.state.token_issuer

def get_auth_service(
    db: Session = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer)
) -> AuthService:
    """Build the auth service for the request's database session."""
    return AuthService(AuthRepository(db), token_issuer)

def get_current_claims(
    token: Optional[str] = Depends(oauth2_scheme),
    token_issuer: TokenIssuer = Depends(get_token_issuer)
) -> AccessTokenClaims:
    """
    Get the verified claims of the bearer access token.

    Args:
        token: Bearer token from Authorization header
        token_issuer: Application-wide token issuer

    Returns:
        AccessTokenClaims: Claims of the authenticated caller

    Raises:
        InvalidTokenException: Missing, malformed or wrongly signed token
        TokenExpiredException: Token has expired
    """
    if not token:
        raise InvalidTokenException(detail="Not authenticated")
    return token_issuer.verify_access_token(token)

def require_roles(*allowed_roles: UserRole):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: Roles that are allowed access

    Returns:
        Function that checks the caller's role claim
    """
    allowed = {role.value for role in allowed_roles}

    def role_checker(claims: AccessTokenClaims = Depends(get_current_claims)) -> AccessTokenClaims:
        if claims.role not in allowed:
            raise RoleDeniedException(sorted(allowed), claims.role)
        return claims
    return role_checker

# Convenience dependencies for specific roles
require_clinician = require_roles(UserRole.CLINICIAN)
require_patient = require_roles(UserRole.PATIENT)
