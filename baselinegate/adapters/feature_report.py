"""Reader for detector output: a JSON/YAML list of detected feature occurrences."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from baselinegate.adapters.base import DetectedFeature, SourceLocation

__all__ = ["FeatureReportError", "parse_detected_feature", "load_detected_features"]

logger = logging.getLogger(__name__)


class FeatureReportError(Exception):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load detected features from {path}: {reason}")


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _as_int(value: Any, default: int | None) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_detected_feature(raw: Mapping[str, Any]) -> DetectedFeature:
    """Build a :class:`DetectedFeature` from camelCase or snake_case detector output."""
    location = raw.get("location") or {}
    if not isinstance(location, Mapping):
        location = {}
    feature_id = _pick(raw, "featureId", "feature_id")
    return DetectedFeature(
        feature_id=str(feature_id) if feature_id else None,
        type=str(raw.get("type") or ""),
        file=str(raw.get("file") or ""),
        location=SourceLocation(
            line=_as_int(location.get("line"), 0),
            column=_as_int(location.get("column"), 0),
            end_line=_as_int(_pick(location, "endLine", "end_line"), None),
            end_column=_as_int(_pick(location, "endColumn", "end_column"), None),
        ),
        name=str(raw.get("name") or ""),
        value=str(raw.get("value") or ""),
        context=str(raw.get("context") or ""),
    )


def load_detected_features(path: Path) -> list[DetectedFeature]:
    resolved = Path(path).resolve()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise FeatureReportError(resolved, exc.strerror or str(exc)) from exc
    try:
        data = json.loads(text) if resolved.suffix == ".json" else yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise FeatureReportError(resolved, f"invalid document ({exc})") from exc

    if isinstance(data, Mapping):
        data = data.get("features")
    if data is None:
        return []
    if not isinstance(data, list):
        raise FeatureReportError(resolved, "expected a list of features")

    features: list[DetectedFeature] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, Mapping):
            logger.warning("Skipping malformed feature entry #%d in %s", index, resolved)
            continue
        features.append(parse_detected_feature(entry))
    logger.info("Loaded %d detected features from %s", len(features), resolved)
    return features
