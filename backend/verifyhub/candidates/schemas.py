"""
Candidate Pydantic schemas
"""
from typing import Optional, List
from pydantic import BaseModel, EmailStr
from datetime import datetime

from verifyhub.candidates.queue import QueueBucket
from verifyhub.candidates.timeline import TimelineEventType
from verifyhub.verifications.status import CandidateStatus, VerificationStatus


class CandidateCreate(BaseModel):
    """Candidate intake schema; name and email are checked by the service"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    joining_designation: Optional[str] = None


class CandidateResponse(BaseModel):
    """Candidate response schema"""
    id: int
    name: str
    email: str
    phone: Optional[str]
    city: Optional[str]
    joining_designation: Optional[str]
    resume_url: Optional[str] = None
    resume_uploaded_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CandidateOverviewResponse(BaseModel):
    candidate_id: int
    name: str
    email: str
    phone: Optional[str]
    city: Optional[str]
    position: str
    verification_status: CandidateStatus


class EmploymentBreakdownItem(BaseModel):
    employment_id: int
    company: str
    status: VerificationStatus
    risk: int


class CandidateNoteResponse(BaseModel):
    id: int
    candidate_id: int
    note: str
    created_at: datetime

    class Config:
        from_attributes = True


class CandidateSummaryResponse(BaseModel):
    candidate_id: int
    overall_status: CandidateStatus
    risk_score: int
    remarks: List[str]
    employment_breakdown: List[EmploymentBreakdownItem]
    hr_notes: List[CandidateNoteResponse]


class TimelineEvent(BaseModel):
    timestamp: datetime
    type: TimelineEventType
    employment_id: int
    company: str
    message: str
    document_type: Optional[str] = None
    file_url: Optional[str] = None


class TimelineResponse(BaseModel):
    candidate_id: int
    timeline: List[TimelineEvent]


class QueueItem(BaseModel):
    id: int
    name: str
    email: str
    city: Optional[str]
    joining_designation: Optional[str]
    verification_status: QueueBucket
    risk_score: int
    progress: str
    tat_days: Optional[int]
    last_updated: datetime


class QueueResponse(BaseModel):
    count: int
    results: List[QueueItem]


class SearchResult(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str]
    city: Optional[str]
    joining_designation: Optional[str]
    verification_status: CandidateStatus


class SearchResponse(BaseModel):
    count: int
    results: List[SearchResult]


class NoteCreate(BaseModel):
    note: Optional[str] = None


class ResumeUploadResponse(BaseModel):
    message: str
    resume_url: str
