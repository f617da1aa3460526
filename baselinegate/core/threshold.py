"""Per-feature threshold evaluation on the ordinal Baseline scale."""

from __future__ import annotations

from typing import TYPE_CHECKING

from baselinegate.core.status import STATUS_ORDER, BaselineStatus, FeatureCategory
from baselinegate.rules.base_rule import Severity

if TYPE_CHECKING:
    from baselinegate.adapters.base import DetectedFeature
    from baselinegate.config.settings import RulesConfig

__all__ = ["status_index", "meets_threshold", "severity_from_gap", "threshold_for_feature"]


def status_index(status: str | BaselineStatus | None) -> int:
    """Position on ``limited < newly < widely``; ``-1`` when off-scale."""
    value = status.value if isinstance(status, BaselineStatus) else status
    try:
        return STATUS_ORDER.index(value)  # type: ignore[arg-type]
    except ValueError:
        return -1


def meets_threshold(current: str | BaselineStatus | None, required: str | BaselineStatus | None) -> bool:
    current_index = status_index(current)
    required_index = status_index(required)
    if current_index == -1 or required_index == -1:
        return False
    return current_index >= required_index


def severity_from_gap(current: str | BaselineStatus | None, required: str | BaselineStatus | None) -> Severity:
    gap = status_index(required) - status_index(current)
    if gap >= 2:
        return Severity.HIGH
    if gap >= 1:
        return Severity.MEDIUM
    return Severity.LOW


def threshold_for_feature(feature: DetectedFeature, rules: RulesConfig) -> str:
    category = FeatureCategory.from_type(feature.type)
    return rules.for_category(category).baseline_threshold
