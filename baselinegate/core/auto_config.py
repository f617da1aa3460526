"""Derive enforcement settings from official Baseline browserslist queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from baselinegate.core.status import FeatureCategory
from baselinegate.core.yearly import EnforcementLevel, age_band

if TYPE_CHECKING:
    from baselinegate.config.settings import BaselineGateSettings

__all__ = ["HISTORICAL_FLOOR", "BaselineQueryInfo", "generate_yearly_rules", "apply_baseline_queries"]

logger = logging.getLogger(__name__)

HISTORICAL_FLOOR = 2015


@dataclass
class BaselineQueryInfo:
    """Baseline queries found in a browserslist configuration."""

    queries: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    years: list[int] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)

    @property
    def has_baseline_queries(self) -> bool:
        return bool(self.queries)


def generate_yearly_rules(years: Iterable[int], current_year: int) -> dict[int, str]:
    """Build a ``yearly-rules`` table from the years named in ``baseline YYYY`` queries.

    Listed years and years after the newest one follow the age bands. Gaps
    between listed years, and the two years before the oldest one, are
    ``error``.
    """
    listed = sorted(set(years))
    if not listed:
        return {}
    oldest, newest = listed[0], listed[-1]
    rules: dict[int, str] = {}
    for year in range(max(oldest - 2, HISTORICAL_FLOOR), oldest):
        rules[year] = EnforcementLevel.ERROR.value
    for year in range(oldest, newest + 1):
        if year in listed:
            rules[year] = age_band(current_year - year).value
        else:
            rules[year] = EnforcementLevel.ERROR.value
    for year in range(newest + 1, current_year + 1):
        rules[year] = age_band(current_year - year).value
    return rules


def _with_threshold(settings: BaselineGateSettings, threshold: str) -> BaselineGateSettings:
    rules = settings.rules.model_copy(update={
        category.value: settings.rules.for_category(category).model_copy(
            update={"baseline_threshold": threshold},
        )
        for category in FeatureCategory
    })
    enforcement = settings.enforcement.model_copy(update={"mode": "per-feature"})
    return settings.model_copy(update={"rules": rules, "enforcement": enforcement})


def apply_baseline_queries(
    settings: BaselineGateSettings,
    info: BaselineQueryInfo | None,
    current_year: int,
) -> BaselineGateSettings:
    """Return *settings* adjusted for *info*; unchanged when no Baseline query is declared.

    Precedence: year list, then "widely available", then "newly available".
    Explicit ``yearly-rules`` entries already present in *settings* win over
    generated ones.
    """
    if info is None or not info.has_baseline_queries:
        return settings

    if "yearly" in info.types and info.years:
        generated = generate_yearly_rules(info.years, current_year)
        enforcement = settings.enforcement.model_copy(update={
            "mode": "yearly",
            "yearly_rules": {**generated, **settings.enforcement.yearly_rules},
        })
        adjusted = settings.model_copy(update={"enforcement": enforcement})
        logger.info("Auto-configured yearly enforcement for years: %s", ", ".join(map(str, info.years)))
    elif "widely" in info.types:
        adjusted = _with_threshold(settings, "widely")
        logger.info('Auto-configured strict enforcement for "widely available" features')
    elif "newly" in info.types:
        adjusted = _with_threshold(settings, "newly")
        logger.info('Auto-configured balanced enforcement for "newly available" features')
    else:
        adjusted = settings

    return adjusted.model_copy(update={"baseline_queries": info})
