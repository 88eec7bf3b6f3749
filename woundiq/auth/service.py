"""
Authentication service layer for business logic.

AuthService is the only place where low-level store failures are turned
into the auth error taxonomy. Authentication itself reads only the users
table; the profile is fetched afterwards for display, and its absence is
reported as a data-integrity fault rather than as bad credentials.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..core.security import check_password_strength, hash_password, verify_password, PasswordStrength
from .models import User, UserRole
from .repository import AuthRepository, parse_role
from .schemas import LoginResponse, UserWithProfile
from .tokens import TokenIssuer
from .exceptions import (
    AccountNotFoundException,
    EmailAlreadyExistsException,
    InternalErrorException,
    InvalidCredentialsException,
    InvalidTokenException,
    ProfileMissingException,
    TokenExpiredException,
    UserInactiveException,
    WeakPasswordException,
)

# Set up logging
logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Translate credential store failures into InternalErrorException.

    Args:
        operation: Name of the operation, for the log line
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Credential store failure during {operation}: {str(e)}")
        raise InternalErrorException() from e


def ensure_strong_password(password: str) -> None:
    """
    Raises:
        WeakPasswordException: If the password fails the length policy
    """
    strength = check_password_strength(password)
    if strength != PasswordStrength.OK:
        raise WeakPasswordException(strength)


class AuthService:
    """
    Orchestrates registration, login, token refresh, logout and password changes.
    """

    def __init__(self, repository: AuthRepository, token_issuer: TokenIssuer):
        self.repository = repository
        self.token_issuer = token_issuer

    def _issue_tokens(self, user: User):
        access = self.token_issuer.create_access_token(user.id, user.email, user.role.value)
        refresh = self.token_issuer.create_refresh_token(user.id)
        return access, refresh

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Union[str, UserRole]
    ) -> LoginResponse:
        """
        Register a new account with its role-specific profile.

        Args:
            email: Account email
            password: Plain text password
            first_name: Profile first name
            last_name: Profile last name
            role: clinician or patient

        Returns:
            LoginResponse: Profile plus a fresh token pair

        Raises:
            WeakPasswordException: Password fails the length policy
            InvalidRoleException: Unknown role
            EmailAlreadyExistsException: Email already registered
            ProfileMissingException: Profile could not be read back after creation
        """
        logger.info(f"Registration attempt for email: {email}")
        ensure_strong_password(password)
        user_role = parse_role(role)

        with store_errors("registration"):
            if self.repository.email_exists(email):
                logger.warning(f"Registration failed: Email {email} already registered")
                raise EmailAlreadyExistsException()

            try:
                user = self.repository.create_account_with_profile(
                    email, password, user_role, first_name, last_name
                )
            except IntegrityError:
                # Concurrent registration won the unique index race
                logger.warning(f"Registration failed: Email {email} registered concurrently")
                raise EmailAlreadyExistsException()

            access, refresh = self._issue_tokens(user)
            self.repository.save_refresh_token(user.id, refresh.token, refresh.expires_at)

            try:
                profile = self.repository.get_profile(user.id)
            except AccountNotFoundException:
                logger.error(f"Account {user.id} vanished right after registration")
                raise ProfileMissingException(user.id, user_role.value)

        logger.info(f"Registration successful: User {user.id} ({email}) as {user_role.value}")
        return LoginResponse(user=profile, token=access.token, refresh_token=refresh.token)

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Authenticate an account and issue a token pair.

        Unknown email and wrong password produce the same error so callers
        cannot probe which emails are registered.

        Args:
            email: Account email
            password: Plain text password

        Returns:
            LoginResponse: Profile plus a fresh token pair

        Raises:
            InvalidCredentialsException: Unknown email or wrong password
            UserInactiveException: Account is deactivated
            ProfileMissingException: Authenticated account has no profile row
        """
        logger.info(f"Login attempt for email: {email}")

        with store_errors("login"):
            try:
                user = self.repository.get_account_by_email(email)
            except AccountNotFoundException:
                logger.warning(f"Login failed: Invalid credentials for {email}")
                raise InvalidCredentialsException()

            if not user.is_active:
                logger.warning(f"Login failed: User {user.id} is inactive")
                raise UserInactiveException()

            if not verify_password(password, user.password_hash):
                logger.warning(f"Login failed: Invalid credentials for {email}")
                raise InvalidCredentialsException()

            access, refresh = self._issue_tokens(user)

        try:
            self.repository.save_refresh_token(user.id, refresh.token, refresh.expires_at)
        except SQLAlchemyError as e:
            # The access token alone keeps the session usable
            logger.warning(f"Failed to save refresh token for user {user.id}: {str(e)}")

        with store_errors("login profile fetch"):
            try:
                profile = self.repository.get_profile(user.id)
            except ProfileMissingException:
                logger.error(
                    f"Login for user {user.id} ({email}) authenticated but no "
                    f"{user.role.value} profile exists; data integrity problem"
                )
                raise

        logger.info(f"Login successful: User {user.id} ({email})")
        return LoginResponse(user=profile, token=access.token, refresh_token=refresh.token)

    def refresh(self, refresh_token: str) -> LoginResponse:
        """
        Exchange a refresh token for a new token pair, revoking the old token.

        Args:
            refresh_token: Refresh token presented by the client

        Returns:
            LoginResponse: Profile plus the rotated token pair

        Raises:
            InvalidTokenException: Token malformed, expired, revoked or unknown
            UserInactiveException: Account is deactivated
        """
        try:
            self.token_issuer.verify_refresh_token(refresh_token)
        except TokenExpiredException:
            raise InvalidTokenException()

        with store_errors("token refresh"):
            stored = self.repository.validate_refresh_token(refresh_token)

            try:
                user = self.repository.get_account_by_id(stored.user_id)
            except AccountNotFoundException:
                raise InvalidTokenException()

            if not user.is_active:
                logger.warning(f"Token refresh rejected: User {user.id} is inactive")
                raise UserInactiveException()

            # Profile first: an integrity fault must leave the presented token usable
            profile = self.repository.get_profile(user.id)
            access, refresh = self._issue_tokens(user)
            self.repository.rotate_refresh_token(
                refresh_token, user.id, refresh.token, refresh.expires_at
            )

        logger.info(f"Token refreshed for user {user.id} ({user.email})")
        return LoginResponse(user=profile, token=access.token, refresh_token=refresh.token)

    def logout(self, account_id: int) -> int:
        """
        Revoke every active refresh token of an account.

        Access tokens already issued stay valid until they expire.

        Returns:
            int: Number of refresh tokens revoked
        """
        with store_errors("logout"):
            revoked = self.repository.revoke_all_tokens_for_account(account_id)
        logger.info(f"Logout: revoked {revoked} refresh token(s) for user {account_id}")
        return revoked

    def change_password(self, account_id: int, old_password: str, new_password: str) -> None:
        """
        Change an account's password after checking the current one.

        Raises:
            AccountNotFoundException: No account with this ID
            InvalidCredentialsException: Current password is wrong
            WeakPasswordException: New password fails the length policy
        """
        with store_errors("password change"):
            user = self.repository.get_account_by_id(account_id)

            if not verify_password(old_password, user.password_hash):
                logger.warning(f"Password change failed: wrong current password for user {account_id}")
                raise InvalidCredentialsException(detail="Invalid current password")

            ensure_strong_password(new_password)
            self.repository.update_password_hash(account_id, hash_password(new_password))

        logger.info(f"User {account_id} successfully changed their password")

    def get_profile(self, account_id: int) -> UserWithProfile:
        """
        Raises:
            AccountNotFoundException: No account with this ID
            ProfileMissingException: Account exists but its profile row does not
        """
        with store_errors("profile fetch"):
            return self.repository.get_profile(account_id)
