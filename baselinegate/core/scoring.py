"""Compliance scoring for BaselineGate."""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from baselinegate.rules.base_rule import Severity, Violation

__all__ = ["DEFAULT_SEVERITY_WEIGHTS", "severity_weight", "compliance_score"]

DEFAULT_SEVERITY_WEIGHTS: dict[str, float] = {"high": 1.0, "medium": 0.6, "low": 0.3}

_MISSING_WEIGHT = 1.0


def severity_weight(severity: Severity | str, weights: Mapping[str, float]) -> float:
    """Configured weight of *severity*; unset counts fully, negatives count as zero."""
    key = severity.value if isinstance(severity, Severity) else str(severity)
    raw = weights.get(key)
    if raw is None:
        return _MISSING_WEIGHT
    try:
        return max(0.0, float(raw))
    except (TypeError, ValueError):
        return 0.0


def compliance_score(
    total_features: int,
    violations: Iterable[Violation],
    weights: Mapping[str, float] | None = None,
) -> int:
    """Return ``round(max(0, 1 - Σweight / total) * 100)`` clamped to ``[0, 100]``.

    *total_features* counts every detected feature, evaluable or not. An empty
    run scores 100. Rounding is half-up.
    """
    if total_features <= 0:
        return 100
    w = DEFAULT_SEVERITY_WEIGHTS if weights is None else weights
    penalty = sum(severity_weight(v.severity, w) for v in violations)
    raw = max(0.0, (1 - penalty / total_features) * 100)
    return min(100, int(math.floor(raw + 0.5)))
