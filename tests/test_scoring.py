"""Tests for compliance scoring."""
from __future__ import annotations

import pytest

from baselinegate.adapters.base import DetectedFeature
from baselinegate.core.scoring import compliance_score, severity_weight
from baselinegate.core.status import BaselineStatus
from baselinegate.rules.base_rule import Severity, Violation
from baselinegate.rules.remediation import Remediation


def _violation(severity: Severity) -> Violation:
    return Violation(
        feature=DetectedFeature(feature_id="grid"), current_status=BaselineStatus.LIMITED,
        severity=severity, remediation=Remediation(), violation_id="00000000",
        timestamp="2025-06-01T12:00:00.000Z",
    )


class TestComplianceScore:
    def test_empty_run_scores_100(self) -> None:
        assert compliance_score(0, []) == 100

    def test_no_violations(self) -> None:
        assert compliance_score(5, []) == 100

    def test_all_high_scores_zero(self) -> None:
        violations = [_violation(Severity.HIGH) for _ in range(3)]
        assert compliance_score(3, violations, {"high": 1.0}) == 0

    def test_never_negative(self) -> None:
        violations = [_violation(Severity.HIGH) for _ in range(10)]
        assert compliance_score(2, violations) == 0

    def test_rounds_half_up(self) -> None:
        # 1 - 0.5 / 4 = 87.5%
        assert compliance_score(4, [_violation(Severity.MEDIUM)], {"medium": 0.5}) == 88

    def test_default_weights(self) -> None:
        violations = [_violation(Severity.HIGH), _violation(Severity.LOW)]
        assert compliance_score(10, violations) == 87

    @pytest.mark.parametrize("count", [1, 2, 5, 20])
    def test_bounds(self, count) -> None:
        score = compliance_score(count, [_violation(Severity.MEDIUM)] * count)
        assert 0 <= score <= 100


class TestSeverityWeight:
    def test_missing_weight_counts_fully(self) -> None:
        assert severity_weight(Severity.LOW, {"high": 1.0}) == 1.0

    def test_negative_weight_is_zero(self) -> None:
        assert severity_weight("high", {"high": -2}) == 0.0
        assert compliance_score(1, [_violation(Severity.HIGH)], {"high": -2}) == 100
