"""
Patient Model - Stores patient profile information.

One row per patient account, created in the same transaction as the account.
"""
from datetime import date
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Date, func
from sqlalchemy.orm import relationship
from ..database import Base

# Placeholders until the patient record is completed by a clinician
PLACEHOLDER_DATE_OF_BIRTH = date(1900, 1, 1)
PLACEHOLDER_GENDER = "Unknown"

class Patient(Base):
    """
    Patient Model - Stores patient-specific information

    Fields:
    - id: Primary key for patient profile
    - user_id: Foreign key to User model (one profile per account)
    - first_name / last_name / full_name: Display name
    - date_of_birth: Patient's date of birth
    - gender: Patient's gender
    - medical_record_number: Unique medical record number (MRN)
    - created_at: When the patient profile was created
    - updated_at: When the patient profile was last updated
    """
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    full_name = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String, nullable=False)
    medical_record_number = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User")

    def __repr__(self):
        """String representation of the Patient model"""
        return f"<Patient(id={self.id}, user_id={self.user_id})>"

    @classmethod
    def placeholder(cls, user_id: int, first_name: str, last_name: str) -> "Patient":
        """
        Build the initial profile for a newly registered patient account.

        Args:
            user_id: ID of the owning account
            first_name: Patient's first name
            last_name: Patient's last name

        Returns:
            Patient: Unsaved profile with placeholder demographics and generated MRN
        """
        return cls(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            full_name=f"{first_name} {last_name}",
            date_of_birth=PLACEHOLDER_DATE_OF_BIRTH,
            gender=PLACEHOLDER_GENDER,
            medical_record_number=f"MRN-{user_id}",
        )
