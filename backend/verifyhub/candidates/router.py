"""
Candidate routes
"""
from typing import Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
import structlog

from verifyhub.core.config import settings
from verifyhub.candidates.queue import QueueBucket
from verifyhub.candidates.schemas import (
    CandidateCreate,
    CandidateNoteResponse,
    CandidateOverviewResponse,
    CandidateResponse,
    CandidateSummaryResponse,
    NoteCreate,
    QueueResponse,
    ResumeUploadResponse,
    SearchResponse,
    TimelineResponse,
)
from verifyhub.candidates.service import CandidateService, get_candidate_service
from verifyhub.storage.service import read_upload

router = APIRouter(prefix=f"{settings.API_PREFIX}/candidates", tags=["Candidates"])
logger = structlog.get_logger()


@router.post("", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
def create_candidate(
    candidate_data: CandidateCreate,
    service: CandidateService = Depends(get_candidate_service),
):
    """Create a new candidate"""
    return service.create_candidate(candidate_data)


@router.get("/queue", response_model=QueueResponse)
def get_verification_queue(
    bucket: QueueBucket = Query(QueueBucket.ALL, alias="status"),
    city: Optional[str] = None,
    designation: Optional[str] = None,
    q: Optional[str] = None,
    service: CandidateService = Depends(get_candidate_service),
):
    """HR work queue with bucket, city, designation and free-text filters"""
    results = service.get_queue(bucket=bucket, city=city, designation=designation, q=q)
    return {"count": len(results), "results": results}


@router.get("/search", response_model=SearchResponse)
def search_candidates(
    q: Optional[str] = None,
    service: CandidateService = Depends(get_candidate_service),
):
    """Search candidates by name, email or phone"""
    results = service.search(q)
    return {"count": len(results), "results": results}


@router.get("/{candidate_id}/overview", response_model=CandidateOverviewResponse)
def get_candidate_overview(
    candidate_id: int,
    service: CandidateService = Depends(get_candidate_service),
):
    return service.get_overview(candidate_id)


@router.get("/{candidate_id}/summary", response_model=CandidateSummaryResponse)
def get_candidate_summary(
    candidate_id: int,
    service: CandidateService = Depends(get_candidate_service),
):
    """Risk score, verdict, per-employment breakdown and recent HR notes"""
    return service.get_summary(candidate_id)


@router.get("/{candidate_id}/employment-timeline", response_model=TimelineResponse)
def get_employment_timeline(
    candidate_id: int,
    service: CandidateService = Depends(get_candidate_service),
):
    return service.get_timeline(candidate_id)


@router.post(
    "/{candidate_id}/notes",
    response_model=CandidateNoteResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_candidate_note(
    candidate_id: int,
    data: NoteCreate,
    service: CandidateService = Depends(get_candidate_service),
):
    return service.add_note(candidate_id, data.note)


@router.post("/{candidate_id}/resume", response_model=ResumeUploadResponse)
def upload_candidate_resume(
    candidate_id: int,
    resume: Optional[UploadFile] = File(None),
    service: CandidateService = Depends(get_candidate_service),
):
    """Upload the candidate's resume to file storage"""
    candidate = service.upload_resume(candidate_id, read_upload(resume))
    return ResumeUploadResponse(
        message="Resume uploaded successfully",
        resume_url=candidate.resume_url,
    )
