"""Yearly-age enforcement: map a feature's Baseline year to an enforcement level."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from baselinegate.rules.base_rule import Severity

__all__ = [
    "EnforcementLevel",
    "LEVEL_ORDER",
    "INTEROP_FEATURES",
    "age_band",
    "is_interop_feature",
    "boost_level",
    "enforcement_level_for_year",
    "level_to_severity",
]


class EnforcementLevel(str, Enum):
    OFF = "off"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


LEVEL_ORDER: tuple[EnforcementLevel, ...] = (
    EnforcementLevel.OFF,
    EnforcementLevel.INFO,
    EnforcementLevel.WARN,
    EnforcementLevel.ERROR,
)

INTEROP_FEATURES: frozenset[str] = frozenset({
    "anchor-positioning", "container-queries", "has", "nesting",
    "view-transitions", "subgrid", "grid", "scrollbar-gutter",
    "scrollbar-width", "scrollbar-color", "scroll-driven-animations", "scope",
    "popover", "dialog", "datalist", "customized-built-in-elements",
    "file-system-access", "notifications", "web-bluetooth",
})

_SEVERITY_BY_LEVEL: dict[EnforcementLevel, Severity] = {
    EnforcementLevel.ERROR: Severity.HIGH,
    EnforcementLevel.WARN: Severity.MEDIUM,
    EnforcementLevel.INFO: Severity.LOW,
    EnforcementLevel.OFF: Severity.LOW,
}


def age_band(age: int) -> EnforcementLevel:
    if age >= 3:
        return EnforcementLevel.ERROR
    if age >= 2:
        return EnforcementLevel.WARN
    if age >= 1:
        return EnforcementLevel.INFO
    return EnforcementLevel.OFF


def is_interop_feature(feature_id: str | None) -> bool:
    return feature_id in INTEROP_FEATURES


def boost_level(level: EnforcementLevel) -> EnforcementLevel:
    """Escalate one step along ``off → info → warn → error``; ``error`` stays put."""
    index = LEVEL_ORDER.index(level)
    return LEVEL_ORDER[min(index + 1, len(LEVEL_ORDER) - 1)]


def _explicit_rule(yearly_rules: Mapping, year: int) -> EnforcementLevel | None:
    raw = yearly_rules.get(year)
    if raw is None:
        raw = yearly_rules.get(str(year))
    if raw is None:
        return None
    try:
        return EnforcementLevel(getattr(raw, "value", raw))
    except ValueError:
        return None


def enforcement_level_for_year(
    baseline_year: int | None,
    yearly_rules: Mapping,
    current_year: int,
    *,
    feature_id: str | None = None,
    interop_priority: bool = False,
) -> EnforcementLevel | None:
    """Return the enforcement level for a feature that entered Baseline in *baseline_year*.

    ``None`` means the feature cannot be judged by age (no Baseline date).
    An explicit ``yearly_rules`` entry overrides the age bands; the interop
    boost applies on top of either.
    """
    if baseline_year is None:
        return None
    level = _explicit_rule(yearly_rules, baseline_year)
    if level is None:
        level = age_band(current_year - baseline_year)
    if interop_priority and is_interop_feature(feature_id):
        level = boost_level(level)
    return level


def level_to_severity(level: EnforcementLevel | str) -> Severity:
    try:
        return _SEVERITY_BY_LEVEL[EnforcementLevel(level)]
    except ValueError:
        return Severity.MEDIUM
