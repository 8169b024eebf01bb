"""
Employment verification routes
"""
import json
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, Depends, Request, status
from starlette.datastructures import UploadFile
import structlog

from verifyhub.core.config import settings
from verifyhub.core.exceptions import ValidationError
from verifyhub.models.verification import DocumentType
from verifyhub.storage.service import UploadedFile, read_upload_async
from verifyhub.verifications.schemas import (
    CallingLogCreate,
    CallingLogResponse,
    StatusUpdate,
    SubmissionResponse,
    VerificationCreate,
    VerificationFormResponse,
    VerificationResponseSchema,
)
from verifyhub.verifications.service import VerificationService, get_verification_service

router = APIRouter(
    prefix=f"{settings.API_PREFIX}/employment-verifications",
    tags=["Employment Verifications"],
)
logger = structlog.get_logger()

# Multipart field name -> document kind
DOCUMENT_FIELDS = {
    "offerLetter": DocumentType.OFFER_LETTER,
    "relievingLetter": DocumentType.RELIEVING_LETTER,
}


def _parse_answers(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise ValidationError("answers must be a valid JSON object")
    if not isinstance(raw, dict):
        raise ValidationError("answers must be a valid JSON object")
    return raw


async def parse_submission(request: Request) -> Tuple[Dict[str, Any], List[Tuple[DocumentType, UploadedFile]]]:
    """Accept either multipart form data (answers as a JSON string plus files) or a JSON body"""
    content_type = request.headers.get("content-type", "")
    documents: List[Tuple[DocumentType, UploadedFile]] = []

    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        answers = _parse_answers(form.get("answers"))
        for field, document_type in DOCUMENT_FIELDS.items():
            upload = form.get(field)
            if isinstance(upload, UploadFile):
                document = await read_upload_async(upload)
                if document is not None:
                    documents.append((document_type, document))
        return answers, documents

    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be JSON or multipart form data")
    if not isinstance(body, dict):
        raise ValidationError("answers must be a valid JSON object")
    return _parse_answers(body.get("answers")), documents


@router.post("", response_model=VerificationResponseSchema, status_code=status.HTTP_201_CREATED)
def create_verification(
    data: VerificationCreate,
    service: VerificationService = Depends(get_verification_service),
):
    """Create a verification and email the form link to the previous employer"""
    return service.create_verification(data)


@router.get("/form/{token}", response_model=VerificationFormResponse)
def get_verification_form(
    token: str,
    service: VerificationService = Depends(get_verification_service),
):
    """Public form for the previous employer"""
    return service.get_form(token)


@router.post("/submit/{token}", response_model=SubmissionResponse)
def submit_verification(
    token: str,
    submission: Tuple[Dict[str, Any], List[Tuple[DocumentType, UploadedFile]]] = Depends(parse_submission),
    service: VerificationService = Depends(get_verification_service),
):
    """Employer answers plus optional offer/relieving letters"""
    answers, documents = submission
    service.submit(token, answers, documents)
    return SubmissionResponse(message="Verification submitted successfully")


@router.post(
    "/{verification_id}/calling-log",
    response_model=CallingLogResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_calling_log(
    verification_id: int,
    data: CallingLogCreate,
    service: VerificationService = Depends(get_verification_service),
):
    """Record a manual HR call to the previous employer"""
    return service.add_calling_log(verification_id, data)


@router.patch("/{verification_id}/status", response_model=VerificationResponseSchema)
def update_verification_status(
    verification_id: int,
    data: StatusUpdate,
    service: VerificationService = Depends(get_verification_service),
):
    """Administrative status change (start work or mark as failed)"""
    return service.update_status(verification_id, data.status, data.reason)
