import pytest

from verifyhub.core.exceptions import InvalidTransitionError
from verifyhub.verifications.status import (
    CandidateStatus,
    VerificationStatus as S,
    build_remarks,
    candidate_risk_score,
    has_discrepancy,
    overall_status_from_risk,
    overall_status_from_statuses,
    risk_for_status,
    summarize_employments,
    transition,
)


class TestRiskWeights:
    @pytest.mark.parametrize(
        "status,expected",
        [(S.CLEAR, 0), (S.PENDING, 10), (S.IN_PROGRESS, 10), (S.DISCREPANCY, 40), (S.FAILED, 70)],
    )
    def test_weights(self, status, expected):
        assert risk_for_status(status) == expected

    def test_raw_strings_and_unknown(self):
        assert risk_for_status("DISCREPANCY") == 40
        assert risk_for_status("ARCHIVED") == 0
        assert risk_for_status(None) == 0


class TestOverallStatusFromStatuses:
    def test_priority_order(self):
        assert overall_status_from_statuses([S.CLEAR, S.DISCREPANCY]) == CandidateStatus.REVIEW
        assert overall_status_from_statuses([S.FAILED, S.CLEAR]) == CandidateStatus.HIGH_RISK
        assert overall_status_from_statuses([S.FAILED, S.DISCREPANCY, S.PENDING]) == CandidateStatus.HIGH_RISK
        assert overall_status_from_statuses([S.DISCREPANCY, S.IN_PROGRESS]) == CandidateStatus.REVIEW
        assert overall_status_from_statuses([S.CLEAR, S.IN_PROGRESS]) == CandidateStatus.IN_PROGRESS
        assert overall_status_from_statuses([S.PENDING]) == CandidateStatus.IN_PROGRESS
        assert overall_status_from_statuses([S.CLEAR, S.CLEAR]) == CandidateStatus.CLEAR

    def test_empty_is_clear(self):
        assert overall_status_from_statuses([]) == CandidateStatus.CLEAR


class TestRiskScore:
    def test_multiple_employment_penalty(self):
        assert candidate_risk_score([S.DISCREPANCY, S.CLEAR]) == 45
        assert candidate_risk_score([S.DISCREPANCY]) == 40

    def test_clamped(self):
        score = candidate_risk_score([S.FAILED] * 10)
        assert score == 75
        assert 0 <= score <= 100
        assert candidate_risk_score([]) == 0

    def test_overall_status_from_risk(self):
        assert overall_status_from_risk(45) == CandidateStatus.REVIEW
        assert overall_status_from_risk(20) == CandidateStatus.CLEAR
        assert overall_status_from_risk(50) == CandidateStatus.REVIEW
        assert overall_status_from_risk(51) == CandidateStatus.HIGH_RISK


class TestRemarksAndSummary:
    def test_remarks_order(self):
        assert build_remarks([S.FAILED, S.DISCREPANCY]) == [
            "One or more employment verifications have discrepancies",
            "One or more employment verifications failed",
            "Multiple previous employments detected",
        ]

    def test_no_remarks_for_single_clear(self):
        assert build_remarks([S.CLEAR]) == []

    def test_summary_without_employments(self):
        assert summarize_employments([]) == {
            "overall_status": CandidateStatus.CLEAR,
            "risk_score": 0,
            "remarks": ["No previous employments found"],
        }

    def test_summary_with_failure(self):
        summary = summarize_employments([S.FAILED, S.CLEAR])
        assert summary["risk_score"] == 75
        assert summary["overall_status"] == CandidateStatus.HIGH_RISK


class TestTransitions:
    def test_happy_path(self):
        assert transition(S.PENDING, S.IN_PROGRESS) == S.IN_PROGRESS
        assert transition(S.IN_PROGRESS, S.CLEAR) == S.CLEAR
        assert transition(S.IN_PROGRESS, S.DISCREPANCY) == S.DISCREPANCY

    def test_failed_reachable_from_open_states(self):
        assert transition(S.PENDING, S.FAILED) == S.FAILED
        assert transition(S.IN_PROGRESS, S.FAILED) == S.FAILED

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING, S.CLEAR),
            (S.CLEAR, S.DISCREPANCY),
            (S.DISCREPANCY, S.CLEAR),
            (S.FAILED, S.IN_PROGRESS),
            (S.IN_PROGRESS, S.PENDING),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidTransitionError):
            transition(current, target)

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidTransitionError):
            transition("ARCHIVED", S.CLEAR)


class TestDiscrepancy:
    def test_explicit_false_only(self):
        assert has_discrepancy({"designation_match": False, "tenure_match": True})
        assert has_discrepancy({"designation_match": True, "tenure_match": False})
        assert not has_discrepancy({"designation_match": True, "tenure_match": True})
        assert not has_discrepancy({"remarks": "ok"})
        assert not has_discrepancy({"designation_match": "false"})
