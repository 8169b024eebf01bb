"""
Fleet-wide verification dashboard
"""
from datetime import datetime, timedelta
from typing import Dict, Iterable, Mapping, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session
import structlog

from verifyhub.core.config import settings
from verifyhub.core.timeutils import ensure_utc
from verifyhub.models.verification import EmploymentVerification
from verifyhub.verifications.status import VerificationStatus, coerce_status

logger = structlog.get_logger()

ONE_DAY = timedelta(days=1)


def count_by_bucket(status_counts: Mapping) -> Dict[str, int]:
    counts = {coerce_status(s): n for s, n in status_counts.items()}
    return {
        "total_verifications": sum(counts.values()),
        "pending_verifications": counts.get(VerificationStatus.PENDING, 0)
        + counts.get(VerificationStatus.IN_PROGRESS, 0),
        "completed_verifications": counts.get(VerificationStatus.CLEAR, 0),
        "failed_or_discrepancy": counts.get(VerificationStatus.FAILED, 0)
        + counts.get(VerificationStatus.DISCREPANCY, 0),
    }


def compute_turnaround(
    completed: Iterable[Tuple[datetime, datetime]],
    sla_days: float,
) -> Dict[str, float]:
    """
    Average TAT and SLA compliance over (created_at, completed_at) pairs.

    TAT is fractional days; a verification meets the SLA when its TAT is at
    most sla_days. Both figures are 0 when nothing has completed.
    """
    total_tat_days = 0.0
    on_time = 0
    count = 0

    for created_at, completed_at in completed:
        tat_days = (ensure_utc(completed_at) - ensure_utc(created_at)) / ONE_DAY
        total_tat_days += tat_days
        count += 1
        if tat_days <= sla_days:
            on_time += 1

    if count == 0:
        return {"average_tat_days": 0, "sla_compliance_rate": 0}

    return {
        "average_tat_days": round(total_tat_days / count, 2),
        "sla_compliance_rate": round(on_time / count * 100, 2),
    }


def get_verification_dashboard(db: Session) -> Dict[str, float]:
    status_counts = dict(
        db.query(EmploymentVerification.status, func.count(EmploymentVerification.id))
        .group_by(EmploymentVerification.status)
        .all()
    )
    completed = (
        db.query(EmploymentVerification.created_at, EmploymentVerification.completed_at)
        .filter(EmploymentVerification.completed_at.isnot(None))
        .all()
    )

    dashboard = {
        **count_by_bucket(status_counts),
        **compute_turnaround(completed, settings.SLA_DAYS),
    }
    logger.info("dashboard_computed", total=dashboard["total_verifications"])
    return dashboard
