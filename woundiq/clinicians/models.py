"""
Clinician Model - Stores clinician profile information.

One row per clinician account, created in the same transaction as the account.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base

PLACEHOLDER_JOB_TITLE = "Clinician"
PLACEHOLDER_DEPARTMENT = "General Medicine"
PLACEHOLDER_CONTACT_INFO = "Not Provided"

class Clinician(Base):
    """
    Clinician Model - Stores clinician-specific information

    Fields:
    - id: Primary key for clinician profile
    - user_id: Foreign key to User model (one profile per account)
    - first_name / last_name / full_name: Display name
    - role: Job title (e.g. Wound Care Nurse), unrelated to the account role
    - department: Department the clinician works in
    - contact_info: Free-form contact details
    - license_number: Unique professional license number
    - created_at: When the clinician profile was created
    - updated_at: When the clinician profile was last updated
    """
    __tablename__ = "clinicians"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    full_name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    department = Column(String, nullable=False)
    contact_info = Column(String, nullable=False)
    license_number = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User")

    def __repr__(self):
        """String representation of the Clinician model"""
        return f"<Clinician(id={self.id}, user_id={self.user_id}, department='{self.department}')>"

    @classmethod
    def placeholder(cls, user_id: int, first_name: str, last_name: str) -> "Clinician":
        """Build the initial profile for a newly registered clinician account."""
        return cls(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            full_name=f"{first_name} {last_name}",
            role=PLACEHOLDER_JOB_TITLE,
            department=PLACEHOLDER_DEPARTMENT,
            contact_info=PLACEHOLDER_CONTACT_INFO,
            license_number=f"LIC-{user_id}",
        )
