"""Baseline status resolution against a preloaded snapshot."""

from __future__ import annotations

from baselinegate.adapters.base import BaselineSource
from baselinegate.core.status import BaselineFeatureInfo, BaselineStatus

__all__ = ["BaselineStatusResolver"]


class BaselineStatusResolver:
    """Pure lookups; an absent snapshot resolves everything to ``unknown``."""

    def __init__(self, source: BaselineSource | None = None) -> None:
        self.source = source

    def resolve_status(self, feature_id: str | None) -> BaselineStatus:
        if self.source is None or not feature_id:
            return BaselineStatus.UNKNOWN
        return BaselineStatus.coerce(self.source.get_status(feature_id))

    def resolve_info(self, feature_id: str | None) -> BaselineFeatureInfo | None:
        if self.source is None or not feature_id:
            return None
        return self.source.get_info(feature_id)
