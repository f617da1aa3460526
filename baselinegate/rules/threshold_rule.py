"""Rule: the feature's Baseline status must reach its category threshold."""

from __future__ import annotations

from typing import TYPE_CHECKING

from baselinegate.core.threshold import meets_threshold, severity_from_gap, threshold_for_feature
from baselinegate.rules.base_rule import BaseRule, RuleContext, Violation, make_violation_id
from baselinegate.rules.remediation import build_remediation

if TYPE_CHECKING:
    from baselinegate.adapters.base import DetectedFeature
    from baselinegate.core.status import BaselineFeatureInfo, BaselineStatus

__all__ = ["ThresholdRule"]


class ThresholdRule(BaseRule):
    rule_id = "baseline-threshold"
    description = "Flags features whose Baseline status is below the configured threshold."

    def evaluate(
        self,
        feature: DetectedFeature,
        status: BaselineStatus,
        info: BaselineFeatureInfo | None,
        context: RuleContext,
    ) -> Violation | None:
        required = threshold_for_feature(feature, context.settings.rules)
        if meets_threshold(status, required):
            return None
        return Violation(
            feature=feature, current_status=status, required_status=required,
            severity=severity_from_gap(status, required),
            remediation=build_remediation(feature, status, info),
            violation_id=make_violation_id(feature), timestamp=context.timestamp,
            violation_type="threshold", feature_info=info,
        )
