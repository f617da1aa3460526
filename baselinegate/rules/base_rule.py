"""Base rule interface and violation model for the BaselineGate policy engine."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from baselinegate.adapters.base import DetectedFeature
    from baselinegate.config.settings import BaselineGateSettings
    from baselinegate.core.status import BaselineFeatureInfo, BaselineStatus
    from baselinegate.rules.remediation import Remediation

__all__ = ["Severity", "Violation", "RuleContext", "BaseRule", "make_violation_id"]


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


def make_violation_id(feature: DetectedFeature) -> str:
    """Stable 8-hex-char ID of an occurrence: ``featureId|file|line|column``."""
    raw = f"{feature.feature_id}|{feature.file}|{feature.location.line}|{feature.location.column}"
    return hashlib.md5(raw.encode("utf-8")).hexdigest()[:8]


@dataclass(frozen=True)
class Violation:
    feature: DetectedFeature
    current_status: BaselineStatus
    severity: Severity
    remediation: Remediation
    violation_id: str
    timestamp: str
    violation_type: str = "threshold"
    required_status: str | None = None
    violation_level: str | None = None
    baseline_year: int | None = None
    feature_age: int | None = None
    message: str = ""
    feature_info: BaselineFeatureInfo | None = None

    @property
    def is_yearly(self) -> bool:
        return self.violation_type == "yearly"

    def to_dict(self) -> dict[str, Any]:
        loc = self.feature.location
        data: dict[str, Any] = {
            "violationId": self.violation_id,
            "violationType": self.violation_type,
            "severity": self.severity.value,
            "currentStatus": self.current_status.value,
            "feature": {
                "featureId": self.feature.feature_id,
                "type": self.feature.type,
                "name": self.feature.name,
                "file": self.feature.file,
                "location": {
                    "line": loc.line, "column": loc.column,
                    "endLine": loc.end_line, "endColumn": loc.end_column,
                },
            },
            "remediation": self.remediation.to_dict(),
            "timestamp": self.timestamp,
        }
        if self.is_yearly:
            data.update({
                "violationLevel": self.violation_level,
                "baselineYear": self.baseline_year,
                "featureAge": self.feature_age,
                "message": self.message,
            })
        else:
            data["requiredStatus"] = self.required_status
        return data


@dataclass(frozen=True)
class RuleContext:
    """Per-run inputs shared by every rule: merged settings and a frozen clock."""

    settings: BaselineGateSettings
    current_year: int
    timestamp: str


class BaseRule(ABC):
    rule_id: str = "base"
    description: str = ""

    @abstractmethod
    def evaluate(
        self,
        feature: DetectedFeature,
        status: BaselineStatus,
        info: BaselineFeatureInfo | None,
        context: RuleContext,
    ) -> Violation | None:
        """Return a violation when *feature* fails this rule, else ``None``."""
