"""
Database models
"""
from verifyhub.models.candidate import Candidate, CandidateNote
from verifyhub.models.verification import (
    CallingLog,
    DocumentType,
    EmploymentVerification,
    VerificationDocument,
    VerificationResponse,
)

__all__ = [
    "Candidate",
    "CandidateNote",
    "EmploymentVerification",
    "VerificationResponse",
    "VerificationDocument",
    "DocumentType",
    "CallingLog",
]
