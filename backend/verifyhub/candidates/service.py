"""
Candidate service - intake, aggregated views, queue, search, notes, resumes
"""
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
import structlog

from verifyhub.candidates.queue import QueueBucket, build_queue_entry, filter_by_bucket
from verifyhub.candidates.schemas import CandidateCreate
from verifyhub.candidates.timeline import build_timeline
from verifyhub.core.database import get_db
from verifyhub.core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from verifyhub.core.timeutils import utcnow
from verifyhub.models.candidate import Candidate, CandidateNote
from verifyhub.models.verification import EmploymentVerification, VerificationResponse
from verifyhub.storage.service import RESUME_FOLDER, FileStorage, UploadedFile, get_storage
from verifyhub.verifications.status import (
    overall_status_from_statuses,
    risk_for_status,
    summarize_employments,
)

logger = structlog.get_logger()

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 10
SUMMARY_NOTES_LIMIT = 5


def _text_match(query: str):
    """Case-insensitive name/email match or case-sensitive phone substring"""
    return or_(
        Candidate.name.icontains(query, autoescape=True),
        Candidate.email.icontains(query, autoescape=True),
        Candidate.phone.contains(query, autoescape=True),
    )


class CandidateService:
    """Service for candidates and their aggregated verification views"""

    def __init__(self, db: Session, storage: FileStorage):
        self.db = db
        self.storage = storage

    def create_candidate(self, data: CandidateCreate) -> Candidate:
        name = (data.name or "").strip()
        if not name or not data.email:
            raise ValidationError("Name and email are required")

        existing = self.db.query(Candidate).filter(Candidate.email == data.email).first()
        if existing:
            raise ConflictError("Candidate with this email already exists")

        candidate = Candidate(
            name=name,
            email=data.email,
            phone=data.phone,
            city=data.city,
            joining_designation=data.joining_designation,
        )
        self.db.add(candidate)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent insert of the same email
            self.db.rollback()
            raise ConflictError("Candidate with this email already exists")
        self.db.refresh(candidate)

        logger.info("candidate_created", candidate_id=candidate.id)
        return candidate

    def get_candidate(self, candidate_id: int) -> Candidate:
        candidate = self.db.query(Candidate).filter(Candidate.id == candidate_id).first()
        if not candidate:
            raise NotFoundError("Candidate", str(candidate_id))
        return candidate

    def get_overview(self, candidate_id: int) -> Dict[str, Any]:
        candidate = self.get_candidate(candidate_id)

        latest_employment = (
            self.db.query(EmploymentVerification)
            .filter(EmploymentVerification.candidate_id == candidate.id)
            .order_by(EmploymentVerification.created_at.desc(), EmploymentVerification.id.desc())
            .first()
        )
        statuses = [
            row.status
            for row in self.db.query(EmploymentVerification.status).filter(
                EmploymentVerification.candidate_id == candidate.id
            )
        ]

        position = candidate.joining_designation
        if not position and latest_employment is not None:
            position = latest_employment.designation

        return {
            "candidate_id": candidate.id,
            "name": candidate.name,
            "email": candidate.email,
            "phone": candidate.phone,
            "city": candidate.city,
            "position": position or "-",
            "verification_status": overall_status_from_statuses(statuses),
        }

    def get_summary(self, candidate_id: int) -> Dict[str, Any]:
        candidate = self.get_candidate(candidate_id)

        employments = (
            self.db.query(EmploymentVerification)
            .filter(EmploymentVerification.candidate_id == candidate.id)
            .order_by(EmploymentVerification.id)
            .all()
        )
        notes = (
            self.db.query(CandidateNote)
            .filter(CandidateNote.candidate_id == candidate.id)
            .order_by(CandidateNote.created_at.desc(), CandidateNote.id.desc())
            .limit(SUMMARY_NOTES_LIMIT)
            .all()
        )

        breakdown = [
            {
                "employment_id": emp.id,
                "company": emp.previous_company_name,
                "status": emp.status,
                "risk": risk_for_status(emp.status),
            }
            for emp in employments
        ]
        summary = summarize_employments(emp.status for emp in employments)

        return {
            "candidate_id": candidate.id,
            **summary,
            "employment_breakdown": breakdown,
            "hr_notes": notes,
        }

    def get_timeline(self, candidate_id: int) -> Dict[str, Any]:
        candidate = self.get_candidate(candidate_id)

        employments = (
            self.db.query(EmploymentVerification)
            .options(
                selectinload(EmploymentVerification.response).selectinload(VerificationResponse.documents),
                selectinload(EmploymentVerification.calling_logs),
            )
            .filter(EmploymentVerification.candidate_id == candidate.id)
            .order_by(EmploymentVerification.id)
            .all()
        )

        return {"candidate_id": candidate.id, "timeline": build_timeline(employments)}

    def get_queue(
        self,
        bucket: QueueBucket = QueueBucket.ALL,
        city: Optional[str] = None,
        designation: Optional[str] = None,
        q: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        query = self.db.query(Candidate).options(selectinload(Candidate.employments))

        if city:
            query = query.filter(func.lower(Candidate.city) == city.lower())
        if designation:
            query = query.filter(Candidate.joining_designation.icontains(designation, autoescape=True))
        if q:
            query = query.filter(_text_match(q))

        candidates = query.order_by(Candidate.created_at.desc(), Candidate.id.desc()).all()

        now = utcnow()
        entries = [build_queue_entry(c, now) for c in candidates]
        return filter_by_bucket(entries, bucket)

    def search(self, q: Optional[str]) -> List[Dict[str, Any]]:
        query_text = (q or "").strip()
        if len(query_text) < SEARCH_MIN_LENGTH:
            raise ValidationError(f"Search query must be at least {SEARCH_MIN_LENGTH} characters")

        candidates = (
            self.db.query(Candidate)
            .options(selectinload(Candidate.employments))
            .filter(_text_match(query_text))
            .order_by(Candidate.id)
            .limit(SEARCH_LIMIT)
            .all()
        )

        return [
            {
                "id": c.id,
                "name": c.name,
                "email": c.email,
                "phone": c.phone,
                "city": c.city,
                "joining_designation": c.joining_designation,
                "verification_status": overall_status_from_statuses(e.status for e in c.employments),
            }
            for c in candidates
        ]

    def add_note(self, candidate_id: int, note: Optional[str]) -> CandidateNote:
        if not note or not note.strip():
            raise ValidationError("Note is required")

        candidate = self.get_candidate(candidate_id)
        created = CandidateNote(candidate_id=candidate.id, note=note)
        self.db.add(created)
        self.db.commit()
        self.db.refresh(created)

        logger.info("candidate_note_added", candidate_id=candidate.id, note_id=created.id)
        return created

    def upload_resume(self, candidate_id: int, upload: Optional[UploadedFile]) -> Candidate:
        if upload is None:
            raise ValidationError("Resume file is required")

        candidate = self.get_candidate(candidate_id)
        try:
            url = self.storage.save(upload, RESUME_FOLDER)
        except StorageError as e:
            logger.error("resume_upload_failed", candidate_id=candidate.id, error=e.message)
            raise StorageError("Failed to upload resume") from e

        candidate.resume_url = url
        candidate.resume_uploaded_at = utcnow()
        self.db.commit()
        self.db.refresh(candidate)

        logger.info("resume_uploaded", candidate_id=candidate.id)
        return candidate


def get_candidate_service(
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
) -> CandidateService:
    return CandidateService(db=db, storage=storage)
