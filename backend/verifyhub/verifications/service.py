"""
Verification lifecycle - create, public form, employer submission, call logs
"""
import secrets
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import structlog

from verifyhub.core.config import settings
from verifyhub.core.database import get_db
from verifyhub.core.exceptions import (
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from verifyhub.core.timeutils import utcnow
from verifyhub.models.candidate import Candidate
from verifyhub.models.verification import (
    CallingLog,
    DocumentType,
    EmploymentVerification,
    VerificationDocument,
    VerificationResponse,
)
from verifyhub.notifications.mailer import Mailer, build_form_url, get_mailer
from verifyhub.storage.service import (
    OFFER_LETTER_FOLDER,
    RELIEVING_LETTER_FOLDER,
    FileStorage,
    UploadedFile,
    get_storage,
)
from verifyhub.verifications.schemas import CallingLogCreate, VerificationCreate
from verifyhub.verifications.status import VerificationStatus, has_discrepancy

logger = structlog.get_logger()

FORM_QUESTIONS = [
    {"key": "designation_match", "label": "Is designation correct?", "type": "boolean"},
    {"key": "tenure_match", "label": "Is tenure correct?", "type": "boolean"},
    {"key": "remarks", "label": "Remarks", "type": "text"},
]

DOCUMENT_FOLDERS = {
    DocumentType.OFFER_LETTER: OFFER_LETTER_FOLDER,
    DocumentType.RELIEVING_LETTER: RELIEVING_LETTER_FOLDER,
}

# Statuses HR may set by hand; CLEAR and DISCREPANCY only come from employer submissions
MANUAL_STATUSES = {VerificationStatus.IN_PROGRESS, VerificationStatus.FAILED}


def generate_verification_token() -> str:
    return secrets.token_urlsafe(32)


class VerificationService:
    """Service for the employment verification lifecycle"""

    def __init__(self, db: Session, mailer: Mailer, storage: FileStorage):
        self.db = db
        self.mailer = mailer
        self.storage = storage

    def create_verification(self, data: VerificationCreate) -> EmploymentVerification:
        """Persist a PENDING verification and email the form link to the previous employer"""
        candidate = self.db.query(Candidate).filter(Candidate.id == data.candidate_id).first()
        if not candidate:
            raise NotFoundError("Candidate", str(data.candidate_id))

        now = utcnow()
        verification = EmploymentVerification(
            candidate_id=candidate.id,
            previous_company_name=data.previous_company_name,
            previous_company_email=data.previous_company_email,
            designation=data.designation,
            tenure_from=data.tenure_from,
            tenure_to=data.tenure_to,
            reason_for_exit=data.reason_for_exit,
            hr_contact_name=data.hr_contact_name,
            hr_contact_phone=data.hr_contact_phone,
            verification_token=generate_verification_token(),
            token_expires_at=now + timedelta(days=settings.VERIFICATION_TOKEN_TTL_DAYS),
            status=VerificationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.db.add(verification)
        self.db.commit()
        self.db.refresh(verification)

        logger.info(
            "verification_created",
            verification_id=verification.id,
            candidate_id=candidate.id,
        )

        self.mailer.send_verification_request(
            verification.previous_company_email,
            build_form_url(verification.verification_token),
        )
        return verification

    def get_by_token(self, token: str) -> EmploymentVerification:
        """Resolve a public token; unknown and expired tokens are indistinguishable"""
        verification = (
            self.db.query(EmploymentVerification)
            .filter(EmploymentVerification.verification_token == token)
            .first()
        )
        if not verification or not verification.is_token_valid(utcnow()):
            logger.warning("verification_token_rejected", found=verification is not None)
            raise InvalidTokenError()
        return verification

    def get_form(self, token: str) -> Dict[str, Any]:
        verification = self.get_by_token(token)
        return {
            "previous_company_name": verification.previous_company_name,
            "designation": verification.designation,
            "tenure_from": verification.tenure_from,
            "tenure_to": verification.tenure_to,
            "questions": FORM_QUESTIONS,
        }

    def submit(
        self,
        token: str,
        answers: Dict[str, Any],
        documents: Optional[List[Tuple[DocumentType, UploadedFile]]] = None,
    ) -> EmploymentVerification:
        """
        Record the employer's answers and documents and finalize the verification.

        The response, its documents and the status change commit together. On any
        failure the transaction is rolled back and files already stored for this
        submission are removed again.
        """
        if not isinstance(answers, dict):
            raise ValidationError("answers must be a JSON object")

        verification = self.get_by_token(token)
        if verification.response is not None:
            raise ConflictError(
                "Verification already submitted",
                details={"verification_id": verification.id},
            )

        now = utcnow()
        stored_urls: List[str] = []
        try:
            response = VerificationResponse(answers=answers, submitted_at=now)
            verification.response = response

            for document_type, upload in documents or []:
                url = self.storage.save(upload, DOCUMENT_FOLDERS[document_type])
                stored_urls.append(url)
                response.documents.append(
                    VerificationDocument(
                        document_type=document_type,
                        file_url=url,
                        uploaded_at=utcnow(),
                    )
                )

            if verification.status == VerificationStatus.PENDING:
                verification.transition_to(VerificationStatus.IN_PROGRESS, now)
            outcome = (
                VerificationStatus.DISCREPANCY if has_discrepancy(answers) else VerificationStatus.CLEAR
            )
            verification.transition_to(outcome, now)

            self.db.commit()
        except Exception as e:
            self.db.rollback()
            for url in stored_urls:
                self.storage.delete(url)
            logger.error(
                "verification_submission_rolled_back",
                verification_id=verification.id,
                removed_files=len(stored_urls),
            )
            if isinstance(e, IntegrityError):
                # Another submission for this token committed first
                raise ConflictError(
                    "Verification already submitted",
                    details={"verification_id": verification.id},
                ) from e
            raise

        self.db.refresh(verification)
        logger.info(
            "verification_submitted",
            verification_id=verification.id,
            status=verification.status.value,
            documents=len(stored_urls),
        )
        return verification

    def add_calling_log(self, verification_id: int, data: CallingLogCreate) -> CallingLog:
        verification = self._get(verification_id)

        log = CallingLog(
            employment_verification_id=verification.id,
            call_time=data.call_time,
            outcome=data.outcome,
            notes=data.notes,
        )
        self.db.add(log)
        self.db.commit()
        self.db.refresh(log)

        logger.info("calling_log_added", verification_id=verification.id, outcome=data.outcome)
        return log

    def update_status(
        self,
        verification_id: int,
        target: VerificationStatus,
        reason: Optional[str] = None,
    ) -> EmploymentVerification:
        """Administrative move to IN_PROGRESS or FAILED"""
        if target not in MANUAL_STATUSES:
            raise ValidationError(
                f"Status {target.value} cannot be set manually",
                details={"allowed": sorted(s.value for s in MANUAL_STATUSES)},
            )

        verification = self._get(verification_id)
        previous = verification.status
        verification.transition_to(target, utcnow())
        self.db.commit()
        self.db.refresh(verification)

        logger.info(
            "verification_status_updated",
            verification_id=verification.id,
            from_status=previous.value,
            to_status=target.value,
            reason=reason,
        )
        return verification

    def _get(self, verification_id: int) -> EmploymentVerification:
        verification = (
            self.db.query(EmploymentVerification)
            .filter(EmploymentVerification.id == verification_id)
            .first()
        )
        if not verification:
            raise NotFoundError("Employment verification", str(verification_id))
        return verification


def get_verification_service(
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    storage: FileStorage = Depends(get_storage),
) -> VerificationService:
    return VerificationService(db=db, mailer=mailer, storage=storage)
