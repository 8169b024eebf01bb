"""
Employment verification models
"""
import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, JSON, Enum
from sqlalchemy.orm import relationship, validates
from verifyhub.core.database import Base
from verifyhub.core.timeutils import ensure_utc, utcnow
from verifyhub.verifications.status import VerificationStatus, coerce_status, is_terminal, transition


class DocumentType(str, enum.Enum):
    """Documents a previous employer may attach to a response"""

    OFFER_LETTER = "OFFER_LETTER"
    RELIEVING_LETTER = "RELIEVING_LETTER"


class EmploymentVerification(Base):
    """One employer-reference check for a prior employment of a candidate"""

    __tablename__ = "employment_verifications"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False, index=True)

    # Employment as declared by the candidate
    previous_company_name = Column(String(255), nullable=False)
    previous_company_email = Column(String(255), nullable=False)
    designation = Column(String(255))
    tenure_from = Column(Date)
    tenure_to = Column(Date)
    reason_for_exit = Column(Text)
    hr_contact_name = Column(String(255))
    hr_contact_phone = Column(String(50))

    # Public form access
    verification_token = Column(String(128), unique=True, nullable=False, index=True)
    token_expires_at = Column(DateTime(timezone=True), nullable=False)

    # Lifecycle
    status = Column(
        Enum(VerificationStatus, name="verification_status"),
        default=VerificationStatus.PENDING,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    completed_at = Column(DateTime(timezone=True))

    # Relationships
    candidate = relationship("Candidate", back_populates="employments")
    response = relationship(
        "VerificationResponse",
        back_populates="employment_verification",
        uselist=False,
        cascade="all, delete-orphan",
    )
    calling_logs = relationship(
        "CallingLog",
        back_populates="employment_verification",
        order_by="CallingLog.id",
        cascade="all, delete-orphan",
    )

    @validates("status")
    def _validate_status(self, key, value):
        target = coerce_status(value)
        if self.status is None:
            # New records always enter the lifecycle as PENDING
            if target is not VerificationStatus.PENDING:
                return transition(None, target)
            return target
        return transition(self.status, target)

    def transition_to(self, target: VerificationStatus, now: Optional[datetime] = None) -> VerificationStatus:
        """Move along the lifecycle, stamping completion on terminal states"""
        self.status = target
        if is_terminal(target):
            self.completed_at = now or utcnow()
        return self.status

    def is_token_valid(self, now: Optional[datetime] = None) -> bool:
        now = ensure_utc(now or utcnow())
        return now < ensure_utc(self.token_expires_at)


class VerificationResponse(Base):
    """Answers submitted by the previous employer"""

    __tablename__ = "verification_responses"

    id = Column(Integer, primary_key=True, index=True)
    employment_verification_id = Column(
        Integer, ForeignKey("employment_verifications.id"), unique=True, nullable=False
    )
    answers = Column(JSON, nullable=False)
    submitted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    employment_verification = relationship("EmploymentVerification", back_populates="response")
    documents = relationship(
        "VerificationDocument",
        back_populates="response",
        order_by="VerificationDocument.id",
        cascade="all, delete-orphan",
    )


class VerificationDocument(Base):
    """Stored document attached to a response"""

    __tablename__ = "verification_documents"

    id = Column(Integer, primary_key=True, index=True)
    response_id = Column(Integer, ForeignKey("verification_responses.id"), nullable=False, index=True)
    document_type = Column(Enum(DocumentType, name="document_type"), nullable=False)
    file_url = Column(String(1000), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    response = relationship("VerificationResponse", back_populates="documents")


class CallingLog(Base):
    """Manual HR call made to the previous employer"""

    __tablename__ = "calling_logs"

    id = Column(Integer, primary_key=True, index=True)
    employment_verification_id = Column(
        Integer, ForeignKey("employment_verifications.id"), nullable=False, index=True
    )
    call_time = Column(DateTime(timezone=True), nullable=False)
    outcome = Column(String(255), nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    employment_verification = relationship("EmploymentVerification", back_populates="calling_logs")
