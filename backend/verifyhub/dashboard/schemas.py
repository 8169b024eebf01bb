"""
Dashboard Pydantic schemas
"""
from pydantic import BaseModel


class VerificationDashboardResponse(BaseModel):
    total_verifications: int
    pending_verifications: int
    completed_verifications: int
    failed_or_discrepancy: int
    average_tat_days: float
    sla_compliance_rate: float
