"""
Verification lifecycle and risk classification
"""
import enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from verifyhub.core.exceptions import InvalidTransitionError


class VerificationStatus(str, enum.Enum):
    """Lifecycle status of a single employment verification"""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    CLEAR = "CLEAR"
    DISCREPANCY = "DISCREPANCY"
    FAILED = "FAILED"


class CandidateStatus(str, enum.Enum):
    """Candidate-level verdict shown on overviews and summaries"""

    CLEAR = "CLEAR"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    HIGH_RISK = "HIGH_RISK"


ALLOWED_TRANSITIONS = {
    VerificationStatus.PENDING: {VerificationStatus.IN_PROGRESS, VerificationStatus.FAILED},
    VerificationStatus.IN_PROGRESS: {
        VerificationStatus.CLEAR,
        VerificationStatus.DISCREPANCY,
        VerificationStatus.FAILED,
    },
    VerificationStatus.CLEAR: set(),
    VerificationStatus.DISCREPANCY: set(),
    VerificationStatus.FAILED: set(),
}

TERMINAL_STATUSES = frozenset(
    {VerificationStatus.CLEAR, VerificationStatus.DISCREPANCY, VerificationStatus.FAILED}
)
OPEN_STATUSES = frozenset({VerificationStatus.PENDING, VerificationStatus.IN_PROGRESS})

RISK_WEIGHTS = {
    VerificationStatus.CLEAR: 0,
    VerificationStatus.PENDING: 10,
    VerificationStatus.IN_PROGRESS: 10,
    VerificationStatus.DISCREPANCY: 40,
    VerificationStatus.FAILED: 70,
}

MULTIPLE_EMPLOYMENT_PENALTY = 5
MAX_RISK = 100

StatusLike = Union[VerificationStatus, str, None]


def coerce_status(status: StatusLike) -> Optional[VerificationStatus]:
    """Map raw values to the enum, None for anything unrecognised"""
    if isinstance(status, VerificationStatus):
        return status
    try:
        return VerificationStatus(status)
    except ValueError:
        return None


def _normalize(statuses: Iterable[StatusLike]) -> List[Optional[VerificationStatus]]:
    return [coerce_status(s) for s in statuses]


def transition(current: StatusLike, target: StatusLike) -> VerificationStatus:
    """
    Validate a lifecycle move and return the new status.

    PENDING -> IN_PROGRESS -> CLEAR | DISCREPANCY, with FAILED reachable from
    any open state. Terminal states accept nothing.
    """
    current_status = coerce_status(current)
    target_status = coerce_status(target)
    if current_status is None or target_status is None:
        raise InvalidTransitionError(str(current), str(target))
    if target_status not in ALLOWED_TRANSITIONS[current_status]:
        raise InvalidTransitionError(current_status.value, target_status.value)
    return target_status


def is_terminal(status: StatusLike) -> bool:
    return coerce_status(status) in TERMINAL_STATUSES


def risk_for_status(status: StatusLike) -> int:
    """Per-verification risk weight; unknown statuses carry no risk"""
    return RISK_WEIGHTS.get(coerce_status(status), 0)


def clamp_risk(score: float) -> int:
    return int(max(0, min(MAX_RISK, score)))


def overall_status_from_statuses(statuses: Iterable[StatusLike]) -> CandidateStatus:
    """
    Candidate verdict from its verification statuses, first match wins:
    FAILED > DISCREPANCY > PENDING/IN_PROGRESS > CLEAR.
    """
    normalized = set(_normalize(statuses))
    if VerificationStatus.FAILED in normalized:
        return CandidateStatus.HIGH_RISK
    if VerificationStatus.DISCREPANCY in normalized:
        return CandidateStatus.REVIEW
    if normalized & OPEN_STATUSES:
        return CandidateStatus.IN_PROGRESS
    return CandidateStatus.CLEAR


def candidate_risk_score(statuses: Iterable[StatusLike]) -> int:
    """Highest per-status weight plus a penalty when there are several employments"""
    normalized = _normalize(statuses)
    if not normalized:
        return 0
    highest = max(risk_for_status(s) for s in normalized)
    penalty = MULTIPLE_EMPLOYMENT_PENALTY if len(normalized) > 1 else 0
    return clamp_risk(highest + penalty)


def overall_status_from_risk(risk_score: float) -> CandidateStatus:
    if risk_score <= 20:
        return CandidateStatus.CLEAR
    if risk_score <= 50:
        return CandidateStatus.REVIEW
    return CandidateStatus.HIGH_RISK


def build_remarks(statuses: Iterable[StatusLike]) -> List[str]:
    normalized = _normalize(statuses)
    remarks: List[str] = []

    if VerificationStatus.DISCREPANCY in normalized:
        remarks.append("One or more employment verifications have discrepancies")
    if VerificationStatus.FAILED in normalized:
        remarks.append("One or more employment verifications failed")
    if len(normalized) > 1:
        remarks.append("Multiple previous employments detected")

    return remarks


def summarize_employments(statuses: Iterable[StatusLike]) -> Dict[str, Any]:
    """Risk score, verdict and remarks for the candidate summary view"""
    normalized = _normalize(statuses)
    if not normalized:
        return {
            "overall_status": CandidateStatus.CLEAR,
            "risk_score": 0,
            "remarks": ["No previous employments found"],
        }

    risk_score = candidate_risk_score(normalized)
    return {
        "overall_status": overall_status_from_risk(risk_score),
        "risk_score": risk_score,
        "remarks": build_remarks(normalized),
    }


def has_discrepancy(answers: Mapping[str, Any]) -> bool:
    """An employer answer explicitly contradicts designation or tenure"""
    return answers.get("designation_match") is False or answers.get("tenure_match") is False
