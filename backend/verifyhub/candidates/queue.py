"""
Verification queue derivation for HR work queues
"""
import enum
import math
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from verifyhub.core.timeutils import ensure_utc
from verifyhub.verifications.status import (
    OPEN_STATUSES,
    TERMINAL_STATUSES,
    VerificationStatus,
    coerce_status,
    risk_for_status,
)

ONE_DAY = timedelta(days=1)


class QueueBucket(str, enum.Enum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


def derive_queue_bucket(statuses: Iterable) -> QueueBucket:
    normalized = {coerce_status(s) for s in statuses}
    if VerificationStatus.FAILED in normalized or VerificationStatus.DISCREPANCY in normalized:
        return QueueBucket.FAILED
    if normalized & OPEN_STATUSES:
        return QueueBucket.PENDING
    return QueueBucket.COMPLETED


def calculate_candidate_risk(statuses: Iterable) -> int:
    return max((risk_for_status(s) for s in statuses), default=0)


def calculate_progress(statuses: Iterable) -> str:
    normalized = [coerce_status(s) for s in statuses]
    completed = sum(1 for s in normalized if s in TERMINAL_STATUSES)
    return f"{completed}/{len(normalized)}"


def calculate_tat_days(created_dates: Iterable[datetime], now: datetime) -> Optional[int]:
    """Whole days (rounded up) since the earliest employment was added"""
    dates = [ensure_utc(d) for d in created_dates if d is not None]
    if not dates:
        return None
    elapsed = ensure_utc(now) - min(dates)
    return math.ceil(elapsed / ONE_DAY)


def latest_update(candidate_created_at: datetime, updated_dates: Iterable[Optional[datetime]]) -> datetime:
    latest = ensure_utc(candidate_created_at)
    for updated in updated_dates:
        updated = ensure_utc(updated)
        if updated is not None and updated > latest:
            latest = updated
    return latest


def build_queue_entry(candidate, now: datetime) -> Dict[str, Any]:
    """Queue row for one candidate and its employments"""
    employments = list(candidate.employments)
    statuses = [e.status for e in employments]

    return {
        "id": candidate.id,
        "name": candidate.name,
        "email": candidate.email,
        "city": candidate.city,
        "joining_designation": candidate.joining_designation,
        "verification_status": derive_queue_bucket(statuses),
        "risk_score": calculate_candidate_risk(statuses),
        "progress": calculate_progress(statuses),
        "tat_days": calculate_tat_days((e.created_at for e in employments), now),
        "last_updated": latest_update(candidate.created_at, (e.updated_at for e in employments)),
    }


def filter_by_bucket(entries: Iterable[Dict[str, Any]], bucket: QueueBucket) -> List[Dict[str, Any]]:
    if bucket == QueueBucket.ALL:
        return list(entries)
    return [e for e in entries if e["verification_status"] == bucket]
