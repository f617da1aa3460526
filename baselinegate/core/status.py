"""Baseline status scale, feature categories and snapshot feature records."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "BaselineStatus",
    "STATUS_ORDER",
    "FeatureCategory",
    "BaselineDates",
    "BaselineFeatureInfo",
    "parse_baseline_year",
]


class BaselineStatus(str, Enum):
    LIMITED = "limited"
    NEWLY = "newly"
    WIDELY = "widely"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value: object) -> BaselineStatus:
        """Map any raw status value onto the enum, falling back to ``UNKNOWN``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.UNKNOWN


STATUS_ORDER: tuple[str, ...] = ("limited", "newly", "widely")


class FeatureCategory(str, Enum):
    CSS = "css"
    JAVASCRIPT = "javascript"
    HTML = "html"

    @classmethod
    def from_type(cls, feature_type: str | None) -> FeatureCategory:
        """Map a detector type tag (``css-property``, ``js-api-call``…) to its category."""
        tag = (feature_type or "").lower()
        if tag.startswith("js-"):
            return cls.JAVASCRIPT
        if tag.startswith("html-"):
            return cls.HTML
        return cls.CSS


_YEAR_RE = re.compile(r"(\d{4})")


def parse_baseline_year(raw_date: str | None) -> int | None:
    """Extract the calendar year of a Baseline date.

    web-features marks approximate dates as ``≤2020-03-24``; the marker is
    ignored. Returns ``None`` for empty or unparseable values.
    """
    if not raw_date:
        return None
    match = _YEAR_RE.search(str(raw_date))
    if match is None:
        return None
    return int(match.group(1))


@dataclass(frozen=True)
class BaselineDates:
    status: BaselineStatus = BaselineStatus.UNKNOWN
    low_date: str | None = None
    high_date: str | None = None

    @property
    def baseline_year(self) -> int | None:
        return parse_baseline_year(self.low_date)


@dataclass(frozen=True)
class BaselineFeatureInfo:
    """One feature record of the Baseline data snapshot."""

    id: str
    name: str
    baseline: BaselineDates = field(default_factory=BaselineDates)
    description: str = ""
    mdn_url: str = ""
    spec: tuple[str, ...] = ()
    group: str = ""

    @property
    def status(self) -> BaselineStatus:
        return self.baseline.status
