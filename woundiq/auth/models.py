"""
Authentication Models - Accounts and refresh tokens.

The users table holds authentication data only; display and demographic
data lives in the role-specific profile tables (patients, clinicians).
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
import enum
from ..database import Base

class UserRole(str, enum.Enum):
    """
    Enumeration for account roles in the wound-care system.

    Roles:
    - CLINICIAN: Care providers who record wound assessments
    - PATIENT: Patients whose wounds are being tracked
    """
    CLINICIAN = "clinician"
    PATIENT = "patient"

class User(Base):
    """
    User Model - Authentication identity record

    Fields:
    - id: Primary key for user identification
    - email: Unique email address used for login (case-sensitive as stored)
    - password_hash: bcrypt hash (never store raw passwords)
    - role: Account role; immutable after creation
    - is_active: Whether the account may log in and refresh tokens
    - email_verified: Whether the email address has been verified
    - created_at: Timestamp when the account was created
    - updated_at: Timestamp when the account was last updated
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

class RefreshToken(Base):
    """
    RefreshToken Model - Store-tracked, revocable refresh credentials

    A token is usable only while revoked is false and expires_at is in the
    future. Rows only ever move from active to revoked.
    """
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    token = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    revoked = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, revoked={self.revoked})>"
