"""
Dashboard routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from verifyhub.core.config import settings
from verifyhub.core.database import get_db
from verifyhub.dashboard.schemas import VerificationDashboardResponse
from verifyhub.dashboard.service import get_verification_dashboard

router = APIRouter(prefix=f"{settings.API_PREFIX}/dashboard", tags=["Dashboard"])


@router.get("/verifications", response_model=VerificationDashboardResponse)
def verification_dashboard(db: Session = Depends(get_db)):
    """Counts, average turnaround and SLA compliance over all verifications"""
    return get_verification_dashboard(db)
