"""
Candidate models
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from verifyhub.core.database import Base
from verifyhub.core.timeutils import utcnow


class Candidate(Base):
    """Candidate under background verification"""

    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)

    # Personal information
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(50))
    city = Column(String(100), index=True)
    joining_designation = Column(String(255))

    # Resume reference (location in file storage, never the bytes)
    resume_url = Column(String(1000))
    resume_uploaded_at = Column(DateTime(timezone=True))

    # Metadata
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    employments = relationship(
        "EmploymentVerification",
        back_populates="candidate",
        order_by="EmploymentVerification.id",
    )
    notes = relationship(
        "CandidateNote",
        back_populates="candidate",
        order_by="CandidateNote.id",
    )


class CandidateNote(Base):
    """HR annotation on a candidate"""

    __tablename__ = "candidate_notes"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False, index=True)
    note = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    candidate = relationship("Candidate", back_populates="notes")
