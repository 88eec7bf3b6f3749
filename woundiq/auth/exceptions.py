"""
Authentication-specific exceptions.

Each exception carries the HTTP status it is reported with, so the service
layer raises them directly and the global AppException handler renders them.
"""
from fastapi import status
from typing import Union
from ..exceptions import AppException
from ..core.security import PasswordStrength, MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}

class AuthException(AppException):
    """Base class for authentication exceptions."""
    def __init__(self, status_code: int, detail: str, headers: dict = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)

class WeakPasswordException(AuthException):
    """Exception raised when a password fails the length policy."""
    def __init__(self, reason: Union[str, PasswordStrength]):
        self.reason = PasswordStrength(reason)
        if self.reason == PasswordStrength.TOO_LONG:
            detail = f"Password must not exceed {MAX_PASSWORD_LENGTH} characters"
        else:
            detail = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class InvalidRoleException(AuthException):
    """Exception raised when an unknown account role is requested."""
    def __init__(self, role: str):
        self.role = role
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid role specified: {role}")

class EmailAlreadyExistsException(AuthException):
    """Exception raised when email already exists."""
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class InvalidCredentialsException(AuthException):
    """Exception raised when credentials are invalid."""
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class UserInactiveException(AuthException):
    """Exception raised when an inactive account tries to authenticate."""
    def __init__(self, detail: str = "User account is inactive"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class InvalidTokenException(AuthException):
    """Exception raised when token is invalid."""
    def __init__(self, detail: str = "Invalid or expired token"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers=BEARER_HEADERS)

class TokenNotFoundException(InvalidTokenException):
    """Exception raised when a refresh token to revoke does not exist."""
    def __init__(self, detail: str = "Refresh token not found"):
        super().__init__(detail=detail)

class TokenExpiredException(AuthException):
    """Exception raised when token has expired."""
    def __init__(self, detail: str = "Token has expired"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers=BEARER_HEADERS)

class AccountNotFoundException(AuthException):
    """Exception raised when an account lookup finds no row."""
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ProfileMissingException(AuthException):
    """
    Exception raised when an account has no row in its role's profile table.

    This is a data-integrity fault, not a normal lookup miss.
    """
    def __init__(self, user_id: int, role: str):
        self.user_id = user_id
        self.role = role
        detail = (
            f"Profile not found: user_id {user_id} exists in users table but has no "
            f"matching record in {role} profile table. Please contact administrator"
        )
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class InternalErrorException(AuthException):
    """Exception raised when the credential store fails."""
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class RoleDeniedException(AuthException):
    """Exception raised when user doesn't have required role."""
    def __init__(self, required_roles: list, user_role: str):
        detail = f"Access denied. Required roles: {required_roles}. Your role: {user_role}"
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
