"""Remediation hints attached to every violation."""

from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass, replace
from datetime import date
from typing import TYPE_CHECKING, Any

from baselinegate.core.status import BaselineStatus, FeatureCategory
from baselinegate.core.yearly import EnforcementLevel, is_interop_feature

if TYPE_CHECKING:
    from baselinegate.adapters.base import DetectedFeature
    from baselinegate.core.status import BaselineFeatureInfo

__all__ = [
    "DocLink",
    "CodeExample",
    "ProgressiveEnhancement",
    "Recommendation",
    "Remediation",
    "build_remediation",
    "build_yearly_remediation",
    "yearly_message",
    "estimate_widely_available",
]

# Baseline "widely available" is reached 30 months after "newly available".
_WIDELY_AFTER_MONTHS = 30

POLYFILLS: dict[str, tuple[str, ...]] = {
    "fetch": ("whatwg-fetch", "isomorphic-fetch"),
    "intersection-observer": ("intersection-observer",),
    "resize-observer": ("resize-observer-polyfill",),
    "custom-properties": ("css-vars-ponyfill",),
    "grid": ("css-grid-polyfill",),
    "container-queries": ("container-query-polyfill",),
    "autonomous-custom-elements": ("@webcomponents/webcomponentsjs",),
    "url-search-params": ("url-search-params-polyfill",),
    "dialog": ("dialog-polyfill",),
    "popover": ("@oddbird/popover-polyfill",),
    "anchor-positioning": ("@oddbird/css-anchor-positioning",),
    "scroll-driven-animations": ("scroll-timeline-polyfill",),
}

ALTERNATIVES: dict[str, tuple[str, ...]] = {
    "grid": ("flexbox", "float-layout"),
    "subgrid": ("grid",),
    "container-queries": ("media-queries",),
    "has": ("descendant-combinator",),
    "nesting": ("sass-nesting",),
    "intersection-observer": ("scroll-events",),
    "resize-observer": ("resize-events",),
    "web-share": ("clipboard-api", "mailto-links"),
    "popover": ("dialog",),
}


@dataclass(frozen=True)
class ProgressiveEnhancement:
    approach: str
    description: str
    example: str


PROGRESSIVE: dict[str, ProgressiveEnhancement] = {
    "grid": ProgressiveEnhancement(
        approach="Feature Detection",
        description="Use @supports (display: grid) to apply grid layout with a flexbox fallback",
        example="@supports not (display: grid) { .container { display: flex; } }",
    ),
    "container-queries": ProgressiveEnhancement(
        approach="Feature Detection",
        description="Keep a media-query layout and layer container queries on top inside @supports",
        example="@supports (container-type: inline-size) { .card { container-type: inline-size; } }",
    ),
    "intersection-observer": ProgressiveEnhancement(
        approach="Feature Detection",
        description="Check for IntersectionObserver support and fall back to scroll listeners",
        example="if ('IntersectionObserver' in window) { /* use observer */ } else { /* scroll fallback */ }",
    ),
    "custom-properties": ProgressiveEnhancement(
        approach="Preprocessor Variables",
        description="Declare a static value before the var() declaration so older engines keep a colour",
        example=".button { color: #0055ff; color: var(--brand, #0055ff); }",
    ),
}

_JS_DETECTION: dict[str, str] = {
    "fetch": "if ('fetch' in window) { /* use fetch */ } else { /* use XMLHttpRequest */ }",
    "intersection-observer": "if ('IntersectionObserver' in window) { /* use observer */ } else { /* scroll fallback */ }",
    "resize-observer": "if ('ResizeObserver' in window) { /* use observer */ } else { /* resize event fallback */ }",
}

_CSS_QUERIES: dict[str, str] = {
    "grid": "@supports (display: grid) { .container { display: grid; } }",
    "custom-properties": "@supports (--custom: value) { .element { color: var(--primary-color); } }",
    "container-queries": "@supports (container-type: inline-size) { @container (min-width: 300px) { /* styles */ } }",
    "has": "@supports selector(:has(*)) { .card:has(img) { padding: 0; } }",
}


@dataclass(frozen=True)
class DocLink:
    title: str
    url: str


@dataclass(frozen=True)
class CodeExample:
    title: str
    code: str
    language: str


@dataclass(frozen=True)
class Recommendation:
    type: str
    message: str
    urgency: str


@dataclass(frozen=True)
class Remediation:
    polyfill_suggestions: tuple[str, ...] = ()
    alternative_features: tuple[str, ...] = ()
    progressive_enhancement: ProgressiveEnhancement | None = None
    estimated_availability_date: str | None = None
    documentation: tuple[DocLink, ...] = ()
    code_examples: tuple[CodeExample, ...] = ()
    yearly_recommendations: tuple[Recommendation, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "polyfillSuggestions": list(self.polyfill_suggestions),
            "alternativeFeatures": list(self.alternative_features),
            "progressiveEnhancement": (
                asdict(self.progressive_enhancement) if self.progressive_enhancement else None
            ),
            "estimatedAvailabilityDate": self.estimated_availability_date,
            "documentation": [asdict(d) for d in self.documentation],
            "codeExamples": [asdict(c) for c in self.code_examples],
            "yearlyRecommendations": [asdict(r) for r in self.yearly_recommendations],
        }


def estimate_widely_available(info: BaselineFeatureInfo) -> str | None:
    """Best guess of the date a newly-available feature becomes widely available."""
    if info.baseline.high_date:
        return info.baseline.high_date.lstrip("≤")
    if not info.baseline.low_date:
        return None
    try:
        since = date.fromisoformat(info.baseline.low_date.lstrip("≤")[:10])
    except ValueError:
        return None
    months = since.month - 1 + _WIDELY_AFTER_MONTHS
    year, month = since.year + months // 12, months % 12 + 1
    return date(year, month, min(since.day, calendar.monthrange(year, month)[1])).isoformat()


def _code_examples(feature: DetectedFeature) -> tuple[CodeExample, ...]:
    label = feature.name or feature.feature_id
    category = FeatureCategory.from_type(feature.type)
    if category is FeatureCategory.JAVASCRIPT:
        code = _JS_DETECTION.get(feature.feature_id or "", f"// Feature detection for {label}")
        return (CodeExample(title="Feature Detection", code=code, language="javascript"),)
    if category is FeatureCategory.CSS and (feature.type or "").startswith("css-"):
        code = _CSS_QUERIES.get(feature.feature_id or "", f"/* Feature query for {label} */")
        return (CodeExample(title="CSS Feature Query", code=code, language="css"),)
    return ()


def _documentation(info: BaselineFeatureInfo | None) -> tuple[DocLink, ...]:
    if info is None:
        return ()
    links: list[DocLink] = []
    if info.mdn_url:
        links.append(DocLink(title="MDN Documentation", url=info.mdn_url))
    links.extend(DocLink(title="Specification", url=url) for url in info.spec)
    return tuple(links)


def build_remediation(
    feature: DetectedFeature,
    status: BaselineStatus,
    info: BaselineFeatureInfo | None,
) -> Remediation:
    key = feature.feature_id or ""
    return Remediation(
        polyfill_suggestions=POLYFILLS.get(key, ()),
        alternative_features=ALTERNATIVES.get(key, ()),
        progressive_enhancement=PROGRESSIVE.get(key),
        estimated_availability_date=(
            estimate_widely_available(info)
            if info is not None and status is BaselineStatus.NEWLY else None
        ),
        documentation=_documentation(info),
        code_examples=_code_examples(feature),
    )


def build_yearly_remediation(
    feature: DetectedFeature,
    status: BaselineStatus,
    level: EnforcementLevel,
    age: int | None,
    info: BaselineFeatureInfo | None,
) -> Remediation:
    recommendations: list[Recommendation] = []
    years = age or 0
    if level is EnforcementLevel.ERROR and years >= 3:
        recommendations.append(Recommendation(
            type="adoption",
            message=f"This feature has been baseline for {years} years - strongly consider adoption",
            urgency="high",
        ))
    elif level is EnforcementLevel.WARN and years >= 2:
        recommendations.append(Recommendation(
            type="evaluation",
            message=f"This feature has been baseline for {years} years - evaluate for adoption",
            urgency="medium",
        ))
    elif level is EnforcementLevel.INFO:
        recommendations.append(Recommendation(
            type="awareness",
            message="This feature became baseline recently - monitor for future adoption",
            urgency="low",
        ))
    if is_interop_feature(feature.feature_id):
        recommendations.append(Recommendation(
            type="interop",
            message="This is a top interoperability issue - prioritize for cross-browser consistency",
            urgency="high",
        ))
    base = build_remediation(feature, status, info)
    return replace(base, yearly_recommendations=tuple(recommendations))


def yearly_message(
    feature_id: str | None,
    level: EnforcementLevel,
    baseline_year: int | None,
    age: int | None,
) -> str:
    if baseline_year is None:
        return f"Feature '{feature_id}' used but no baseline year available"
    age_text = f"{age} year{'s' if age > 1 else ''} old" if age else "recent"
    prefix = f"Feature '{feature_id}' from Baseline {baseline_year} ({age_text})"
    if level is EnforcementLevel.ERROR:
        return f"{prefix} - enforcement required"
    if level is EnforcementLevel.WARN:
        return f"{prefix} - consider adopting"
    if level is EnforcementLevel.INFO:
        return f"{prefix} - informational"
    return prefix
