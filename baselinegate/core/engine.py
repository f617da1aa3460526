"""Policy engine – ties the resolver, rules, exceptions and scoring together."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from baselinegate.adapters.base import BaselineSource, DetectedFeature
from baselinegate.config.settings import BaselineGateSettings
from baselinegate.core.exemptions import is_exempt
from baselinegate.core.resolver import BaselineStatusResolver
from baselinegate.core.scoring import compliance_score
from baselinegate.core.status import BaselineStatus, FeatureCategory
from baselinegate.rules.base_rule import BaseRule, RuleContext, Severity, Violation
from baselinegate.rules.threshold_rule import ThresholdRule
from baselinegate.rules.yearly_rule import YearlyRule

__all__ = ["PolicyEngine", "EvaluationResult", "ViolationSummary", "sort_violations"]

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sort_violations(violations: Iterable[Violation]) -> list[Violation]:
    """Severity descending, then file, then line; ties keep input order."""
    return sorted(
        violations,
        key=lambda v: (-v.severity.rank, v.feature.file or "", v.feature.location.line or 0),
    )


@dataclass
class ViolationSummary:
    total: int = 0
    total_features: int = 0
    by_feature_type: dict[str, int] = field(default_factory=dict)
    by_severity: dict[str, int] = field(default_factory=lambda: {s.value: 0 for s in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)})
    by_file: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_violations(cls, violations: list[Violation], total_features: int) -> ViolationSummary:
        summary = cls(total=len(violations), total_features=total_features)
        by_type: Counter[str] = Counter()
        by_file: Counter[str] = Counter()
        for v in violations:
            by_type[FeatureCategory.from_type(v.feature.type).value] += 1
            summary.by_severity[v.severity.value] += 1
            by_file[v.feature.file] += 1
        summary.by_feature_type = dict(by_type)
        summary.by_file = dict(by_file)
        return summary

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "totalFeatures": self.total_features,
            "byFeatureType": dict(self.by_feature_type),
            "bySeverity": dict(self.by_severity),
            "byFile": dict(self.by_file),
        }


class EvaluationResult:
    def __init__(
        self,
        violations: list[Violation],
        compliance_score: int,
        summary: ViolationSummary,
        settings: BaselineGateSettings,
    ) -> None:
        self.violations = violations
        self.compliance_score = compliance_score
        self.summary = summary
        self.settings = settings

    @property
    def has_high(self) -> bool:
        return any(v.severity is Severity.HIGH for v in self.violations)

    @property
    def failed(self) -> bool:
        if not self.violations:
            return False
        enforcement = self.settings.enforcement
        if enforcement.on_violation == "error":
            return True
        return len(self.violations) > enforcement.max_violations

    @property
    def exit_code(self) -> int:
        if not self.failed:
            return 0
        return 2 if self.has_high else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "violations": [v.to_dict() for v in self.violations],
            "complianceScore": self.compliance_score,
            "summary": self.summary.to_dict(),
        }


class PolicyEngine:
    """Evaluates detected features against Baseline policies.

    Holds no state between calls: every :meth:`evaluate` is a pure function of
    its inputs, the Baseline snapshot and the clock.
    """

    def __init__(
        self,
        settings: BaselineGateSettings | None = None,
        source: BaselineSource | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings or BaselineGateSettings()
        self.resolver = BaselineStatusResolver(source)
        self._clock = clock or _utc_now

    @staticmethod
    def build_rules(settings: BaselineGateSettings) -> list[BaseRule]:
        mode = settings.enforcement.mode
        rules: list[BaseRule] = []
        if mode in ("yearly", "hybrid"):
            rules.append(YearlyRule())
        if mode in ("per-feature", "hybrid"):
            rules.append(ThresholdRule())
        return rules

    def _evaluate_feature(
        self,
        feature: DetectedFeature,
        rules: list[BaseRule],
        context: RuleContext,
    ) -> list[Violation]:
        if not feature.feature_id:
            logger.debug("Skipping feature without featureId: %s", feature.name)
            return []
        status = self.resolver.resolve_status(feature.feature_id)
        if status is BaselineStatus.UNKNOWN:
            logger.debug("Unknown Baseline status for feature: %s", feature.feature_id)
            return []
        info = self.resolver.resolve_info(feature.feature_id)
        exceptions = context.settings.rules.for_category(feature.category).allowed_exceptions

        found: list[Violation] = []
        for rule in rules:
            violation = rule.evaluate(feature, status, info, context)
            if violation is None:
                continue
            if is_exempt(feature, exceptions):
                return []
            found.append(violation)
        return found

    def evaluate(
        self,
        features: list[DetectedFeature],
        settings: BaselineGateSettings | None = None,
    ) -> EvaluationResult:
        active = settings or self.settings
        now = self._clock()
        context = RuleContext(
            settings=active,
            current_year=now.year,
            timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )
        rules = self.build_rules(active)

        logger.info("Evaluating %d detected features against Baseline policies", len(features))
        collected: list[Violation] = []
        for feature in features:
            collected.extend(self._evaluate_feature(feature, rules, context))

        violations = sort_violations(collected)
        logger.info("Found %d Baseline compliance violations", len(violations))
        score = compliance_score(len(features), violations, active.enforcement.severity_weights)
        summary = ViolationSummary.from_violations(violations, len(features))
        return EvaluationResult(violations=violations, compliance_score=score, summary=summary, settings=active)
