"""Rule: enforce features by how long ago they entered Baseline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from baselinegate.core.yearly import EnforcementLevel, enforcement_level_for_year, level_to_severity
from baselinegate.rules.base_rule import BaseRule, RuleContext, Violation, make_violation_id
from baselinegate.rules.remediation import build_yearly_remediation, yearly_message

if TYPE_CHECKING:
    from baselinegate.adapters.base import DetectedFeature
    from baselinegate.core.status import BaselineFeatureInfo, BaselineStatus

__all__ = ["YearlyRule"]

logger = logging.getLogger(__name__)


class YearlyRule(BaseRule):
    rule_id = "baseline-yearly"
    description = "Flags features by Baseline age, using yearly overrides and the interop boost."

    def level_for(
        self,
        feature: DetectedFeature,
        info: BaselineFeatureInfo | None,
        context: RuleContext,
    ) -> EnforcementLevel | None:
        baseline_year = info.baseline.baseline_year if info is not None else None
        if baseline_year is None:
            logger.debug("No baseline date for feature: %s", feature.feature_id)
            return None
        enforcement = context.settings.enforcement
        return enforcement_level_for_year(
            baseline_year, enforcement.yearly_rules, context.current_year,
            feature_id=feature.feature_id, interop_priority=enforcement.interop_priority,
        )

    def evaluate(
        self,
        feature: DetectedFeature,
        status: BaselineStatus,
        info: BaselineFeatureInfo | None,
        context: RuleContext,
    ) -> Violation | None:
        level = self.level_for(feature, info, context)
        if level is None or level is EnforcementLevel.OFF:
            return None
        baseline_year = info.baseline.baseline_year if info is not None else None
        age = context.current_year - baseline_year if baseline_year is not None else None
        return Violation(
            feature=feature, current_status=status,
            severity=level_to_severity(level),
            remediation=build_yearly_remediation(feature, status, level, age, info),
            violation_id=make_violation_id(feature), timestamp=context.timestamp,
            violation_type="yearly", violation_level=level.value,
            baseline_year=baseline_year, feature_age=age,
            message=yearly_message(feature.feature_id, level, baseline_year, age),
            feature_info=info,
        )
