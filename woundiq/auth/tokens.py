"""
JWT token creation and verification.

Access tokens are self-contained and never stored; refresh tokens are
persisted by the repository so they can be revoked early. Both are signed
with the same key, which is handed to TokenIssuer once at startup.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt, JWTError, ExpiredSignatureError

from ..config import Settings
from .exceptions import InvalidTokenException, TokenExpiredException

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenSettings:
    """
    Immutable signing configuration for TokenIssuer.

    Attributes:
        secret_key: HMAC signing key
        algorithm: JWT algorithm (HS256 family)
        access_token_ttl: Lifetime of access tokens
        refresh_token_ttl: Lifetime of refresh tokens
    """
    secret_key: str
    algorithm: str = "HS256"
    access_token_ttl: timedelta = timedelta(hours=24)
    refresh_token_ttl: timedelta = timedelta(days=7)

    def __post_init__(self):
        if not self.secret_key:
            raise ValueError("Token signing key must not be empty")
        if not self.algorithm.startswith("HS"):
            raise ValueError(f"Unsupported signing algorithm: {self.algorithm}")

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenSettings":
        """Build token settings from the application settings."""
        return cls(
            secret_key=config.secret_key,
            algorithm=config.algorithm,
            access_token_ttl=timedelta(hours=config.access_token_expire_hours),
            refresh_token_ttl=timedelta(days=config.refresh_token_expire_days),
        )


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token and the moment it stops being valid."""
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class AccessTokenClaims:
    """Verified claims of an access token."""
    user_id: int
    email: str
    role: str
    expires_at: datetime


class TokenIssuer:
    """
    Signs and verifies access and refresh tokens with one signing key.
    """

    def __init__(self, token_settings: TokenSettings):
        self._settings = token_settings

    @property
    def refresh_token_ttl(self) -> timedelta:
        return self._settings.refresh_token_ttl

    def _encode(self, claims: Dict[str, Any], ttl: timedelta) -> IssuedToken:
        now = datetime.now(timezone.utc)
        expire = now + ttl
        to_encode = dict(claims)
        to_encode.update({"iat": now, "exp": expire})
        encoded_jwt = jwt.encode(to_encode, self._settings.secret_key, algorithm=self._settings.algorithm)
        return IssuedToken(token=encoded_jwt, expires_at=expire)

    def _decode(self, token: str, expected_type: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, self._settings.secret_key, algorithms=[self._settings.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredException()
        except JWTError:
            raise InvalidTokenException()

        if payload.get("type") != expected_type:
            raise InvalidTokenException(detail="Invalid token type")
        return payload

    def create_access_token(self, user_id: int, email: str, role: str) -> IssuedToken:
        """
        Create a signed access token.

        Args:
            user_id: Account ID
            email: Account email
            role: Account role value

        Returns:
            IssuedToken: Encoded JWT and its expiry
        """
        claims = {
            "user_id": user_id,
            "email": email,
            "role": role,
            "type": ACCESS_TOKEN_TYPE,
            "nbf": datetime.now(timezone.utc),
        }
        return self._encode(claims, self._settings.access_token_ttl)

    def create_refresh_token(self, user_id: int) -> IssuedToken:
        """
        Create a signed refresh token.

        A random jti keeps every token value unique, even for two tokens
        issued to the same account within the same second.

        Args:
            user_id: Account ID

        Returns:
            IssuedToken: Encoded JWT and its expiry
        """
        claims = {
            "sub": str(user_id),
            "type": REFRESH_TOKEN_TYPE,
            "jti": uuid.uuid4().hex,
        }
        return self._encode(claims, self._settings.refresh_token_ttl)

    def verify_access_token(self, token: str) -> AccessTokenClaims:
        """
        Verify and decode an access token.

        Args:
            token: JWT token string

        Returns:
            AccessTokenClaims: Verified claims

        Raises:
            TokenExpiredException: Signature is valid but the token has expired
            InvalidTokenException: Malformed token, bad signature, wrong type or missing claims
        """
        payload = self._decode(token, ACCESS_TOKEN_TYPE)
        try:
            return AccessTokenClaims(
                user_id=int(payload["user_id"]),
                email=str(payload["email"]),
                role=str(payload["role"]),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenException(detail="Invalid token payload")

    def verify_refresh_token(self, token: str) -> int:
        """
        Verify a refresh token's signature and expiry.

        Args:
            token: JWT token string

        Returns:
            int: Account ID the token was issued to

        Raises:
            TokenExpiredException: Signature is valid but the token has expired
            InvalidTokenException: Malformed token, bad signature, wrong type or missing claims
        """
        payload = self._decode(token, REFRESH_TOKEN_TYPE)
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenException(detail="Invalid token payload")
