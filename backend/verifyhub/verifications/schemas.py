"""
Employment verification Pydantic schemas
"""
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime

from verifyhub.verifications.status import VerificationStatus


class VerificationCreate(BaseModel):
    """Employment details supplied by HR for a new verification"""
    candidate_id: int
    previous_company_name: str = Field(..., min_length=1, max_length=255)
    previous_company_email: EmailStr
    designation: Optional[str] = None
    tenure_from: Optional[date] = None
    tenure_to: Optional[date] = None
    reason_for_exit: Optional[str] = None
    hr_contact_name: Optional[str] = None
    hr_contact_phone: Optional[str] = None


class VerificationResponseSchema(BaseModel):
    """Verification record as returned to HR"""
    id: int
    candidate_id: int
    previous_company_name: str
    previous_company_email: str
    designation: Optional[str]
    tenure_from: Optional[date]
    tenure_to: Optional[date]
    reason_for_exit: Optional[str]
    hr_contact_name: Optional[str]
    hr_contact_phone: Optional[str]
    verification_token: str
    token_expires_at: datetime
    status: VerificationStatus
    created_at: datetime
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FormQuestion(BaseModel):
    key: str
    label: str
    type: str


class VerificationFormResponse(BaseModel):
    """Non-sensitive subset shown on the public employer form"""
    previous_company_name: str
    designation: Optional[str]
    tenure_from: Optional[date]
    tenure_to: Optional[date]
    questions: List[FormQuestion]


class SubmissionResponse(BaseModel):
    message: str


class CallingLogCreate(BaseModel):
    call_time: datetime
    outcome: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = None


class CallingLogResponse(BaseModel):
    id: int
    employment_verification_id: int
    call_time: datetime
    outcome: str
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class StatusUpdate(BaseModel):
    """Administrative status change"""
    status: VerificationStatus
    reason: Optional[str] = None
