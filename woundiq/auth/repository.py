"""
Auth repository - persistence operations over the credential store.

Every write runs inside database.transaction, so a failure in any step
rolls back the whole operation. SQLAlchemy errors other than the mapped
lookup misses propagate unchanged; AuthService translates them.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Type, Union

from sqlalchemy.orm import Session

from ..database import transaction
from ..core.security import hash_password
from ..patients.models import Patient
from ..clinicians.models import Clinician
from .models import User, UserRole, RefreshToken
from .schemas import UserWithProfile
from .exceptions import (
    AccountNotFoundException,
    InvalidRoleException,
    InvalidTokenException,
    ProfileMissingException,
    TokenNotFoundException,
)

# Set up logging
logger = logging.getLogger(__name__)

Profile = Union[Patient, Clinician]

# Role tag -> profile table. Every UserRole member must have an entry.
PROFILE_MODELS: Dict[UserRole, Type[Profile]] = {
    UserRole.PATIENT: Patient,
    UserRole.CLINICIAN: Clinician,
}


def parse_role(role: Union[str, UserRole]) -> UserRole:
    """
    Convert a role tag into a UserRole.

    Raises:
        InvalidRoleException: If the tag is not a known role
    """
    try:
        return UserRole(role)
    except ValueError:
        raise InvalidRoleException(str(role))


class AuthRepository:
    """
    Transactional access to accounts, profiles and refresh tokens.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Accounts and profiles
    # ------------------------------------------------------------------

    def create_account_with_profile(
        self,
        email: str,
        password: str,
        role: Union[str, UserRole],
        first_name: str,
        last_name: str
    ) -> User:
        """
        Create an account and its role-specific profile in one transaction.

        Args:
            email: Account email
            password: Plain text password, hashed before storage
            role: clinician or patient
            first_name: Profile first name
            last_name: Profile last name

        Returns:
            User: The committed account

        Raises:
            InvalidRoleException: Unknown role, raised before any write
        """
        user_role = parse_role(role)
        profile_model = PROFILE_MODELS[user_role]
        password_hash = hash_password(password)

        with transaction(self.db):
            user = User(
                email=email,
                password_hash=password_hash,
                role=user_role,
                is_active=True,
                email_verified=False,
            )
            self.db.add(user)
            # Flush to get the generated ID for the profile's derived fields
            self.db.flush()

            profile = profile_model.placeholder(user.id, first_name, last_name)
            self.db.add(profile)
            self.db.flush()

        self.db.refresh(user)
        logger.info(f"Account {user.id} created with {user_role.value} profile")
        return user

    def get_account_by_email(self, email: str) -> User:
        """
        Raises:
            AccountNotFoundException: No account with this email
        """
        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            raise AccountNotFoundException()
        return user

    def get_account_by_id(self, account_id: int) -> User:
        """
        Raises:
            AccountNotFoundException: No account with this ID
        """
        user = self.db.query(User).filter(User.id == account_id).first()
        if user is None:
            raise AccountNotFoundException()
        return user

    def get_profile(self, account_id: int) -> UserWithProfile:
        """
        Load an account together with the profile row its role points to.

        Args:
            account_id: Account ID

        Returns:
            UserWithProfile: Combined account and profile view

        Raises:
            AccountNotFoundException: No account with this ID
            ProfileMissingException: Account exists but its profile row does not
        """
        user = self.get_account_by_id(account_id)
        profile_model = PROFILE_MODELS[user.role]

        profile = self.db.query(profile_model).filter(profile_model.user_id == user.id).first()
        if profile is None:
            logger.error(
                f"Data integrity fault: user {user.id} ({user.email}) has role "
                f"'{user.role.value}' but no row in {profile_model.__tablename__}"
            )
            raise ProfileMissingException(user.id, user.role.value)

        return UserWithProfile.from_records(user, profile)

    def email_exists(self, email: str) -> bool:
        return self.db.query(User.id).filter(User.email == email).first() is not None

    def update_password_hash(self, account_id: int, password_hash: str) -> None:
        """
        Raises:
            AccountNotFoundException: No account with this ID
        """
        with transaction(self.db):
            updated = (
                self.db.query(User)
                .filter(User.id == account_id)
                .update(
                    {"password_hash": password_hash, "updated_at": datetime.now(timezone.utc)},
                    synchronize_session=False
                )
            )
            if updated == 0:
                raise AccountNotFoundException()

    # ------------------------------------------------------------------
    # Refresh tokens
    # ------------------------------------------------------------------

    def save_refresh_token(self, account_id: int, token: str, expires_at: datetime) -> RefreshToken:
        with transaction(self.db):
            refresh_token = RefreshToken(user_id=account_id, token=token, expires_at=expires_at)
            self.db.add(refresh_token)
        return refresh_token

    def validate_refresh_token(self, token: str) -> RefreshToken:
        """
        Find a refresh token that is neither revoked nor expired.

        Raises:
            InvalidTokenException: Token unknown, revoked or expired
        """
        now = datetime.now(timezone.utc)
        refresh_token = (
            self.db.query(RefreshToken)
            .filter(
                RefreshToken.token == token,
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .first()
        )
        if refresh_token is None:
            raise InvalidTokenException()
        return refresh_token

    def revoke_refresh_token(self, token: str) -> None:
        """
        Raises:
            TokenNotFoundException: No stored token with this value
        """
        with transaction(self.db):
            revoked = (
                self.db.query(RefreshToken)
                .filter(RefreshToken.token == token)
                .update({"revoked": True}, synchronize_session=False)
            )
            if revoked == 0:
                raise TokenNotFoundException()

    def rotate_refresh_token(
        self,
        old_token: str,
        account_id: int,
        new_token: str,
        expires_at: datetime
    ) -> RefreshToken:
        """
        Revoke a refresh token and store its successor in one transaction.

        The revoke only matches a token that is still active, so of two
        concurrent rotations of the same token exactly one succeeds.

        Args:
            old_token: Token presented by the client
            account_id: Owner of both tokens
            new_token: Replacement token
            expires_at: Expiry of the replacement token

        Returns:
            RefreshToken: The stored replacement

        Raises:
            InvalidTokenException: The old token was already revoked; nothing is written
        """
        with transaction(self.db):
            revoked = (
                self.db.query(RefreshToken)
                .filter(
                    RefreshToken.token == old_token,
                    RefreshToken.user_id == account_id,
                    RefreshToken.revoked.is_(False),
                )
                .update({"revoked": True}, synchronize_session=False)
            )
            if revoked != 1:
                raise InvalidTokenException()

            replacement = RefreshToken(user_id=account_id, token=new_token, expires_at=expires_at)
            self.db.add(replacement)
        return replacement

    def revoke_all_tokens_for_account(self, account_id: int) -> int:
        """
        Revoke every active refresh token of an account.

        Returns:
            int: Number of tokens revoked
        """
        with transaction(self.db):
            revoked = (
                self.db.query(RefreshToken)
                .filter(RefreshToken.user_id == account_id, RefreshToken.revoked.is_(False))
                .update({"revoked": True}, synchronize_session=False)
            )
        return revoked
