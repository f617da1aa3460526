"""Input records and the abstract Baseline data source."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from baselinegate.core.status import BaselineFeatureInfo, BaselineStatus, FeatureCategory

__all__ = ["SourceLocation", "DetectedFeature", "BaselineSource"]


@dataclass(frozen=True)
class SourceLocation:
    line: int = 0
    column: int = 0
    end_line: int | None = None
    end_column: int | None = None


@dataclass(frozen=True)
class DetectedFeature:
    """A single web-platform feature occurrence reported by a detector."""

    feature_id: str | None
    type: str = ""
    file: str = ""
    location: SourceLocation = field(default_factory=SourceLocation)
    name: str = ""
    value: str = ""
    context: str = ""

    @property
    def category(self) -> FeatureCategory:
        return FeatureCategory.from_type(self.type)


class BaselineSource(ABC):
    """Synchronous lookup interface over a pre-populated Baseline snapshot."""

    @abstractmethod
    def get_status(self, feature_id: str) -> BaselineStatus:
        """Return the Baseline status of *feature_id* (``UNKNOWN`` when absent)."""

    @abstractmethod
    def get_info(self, feature_id: str) -> BaselineFeatureInfo | None:
        """Return the full feature record, or ``None`` when absent."""
