"""Allow-list matching of feature occurrences against configured exceptions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from wcmatch import glob

if TYPE_CHECKING:
    from baselinegate.adapters.base import DetectedFeature
    from baselinegate.config.settings import FeatureException

__all__ = ["GLOB_FLAGS", "file_matches", "exception_matches", "is_exempt"]

logger = logging.getLogger(__name__)

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.FORCEUNIX


def file_matches(path: str, pattern: str) -> bool:
    """Glob match with ``**`` and ``{a,b}`` support; a broken pattern never matches."""
    if not path:
        return False
    try:
        return glob.globmatch(path, pattern, flags=GLOB_FLAGS)
    except Exception as exc:  # noqa: BLE001 - bad patterns, brace expansion over the limit
        logger.debug("Ignoring unusable exception pattern %r: %s", pattern, exc)
        return False


def exception_matches(feature: DetectedFeature, exception: FeatureException) -> bool:
    if exception.feature and exception.feature != feature.feature_id:
        return False
    if exception.files is not None:
        return any(file_matches(feature.file, pattern) for pattern in exception.files)
    return True


def is_exempt(feature: DetectedFeature, exceptions: Iterable[FeatureException]) -> bool:
    for exception in exceptions:
        if exception_matches(feature, exception):
            logger.debug(
                "Feature %s in %s allowed by exception (%s)",
                feature.feature_id, feature.file, exception.reason or "no reason given",
            )
            return True
    return False
