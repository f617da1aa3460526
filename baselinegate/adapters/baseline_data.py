"""In-memory Baseline snapshot and its JSON/YAML loader."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from baselinegate.adapters.base import BaselineSource
from baselinegate.core.status import BaselineDates, BaselineFeatureInfo, BaselineStatus
from baselinegate.core.yearly import age_band

__all__ = [
    "BaselineDataError",
    "BaselineSnapshot",
    "map_baseline_status",
    "load_baseline_data",
]

logger = logging.getLogger(__name__)

_STATUS_ALIASES: dict[str, BaselineStatus] = {
    "high": BaselineStatus.WIDELY,
    "widely": BaselineStatus.WIDELY,
    "low": BaselineStatus.NEWLY,
    "newly": BaselineStatus.NEWLY,
    "false": BaselineStatus.LIMITED,
    "limited": BaselineStatus.LIMITED,
}


class BaselineDataError(Exception):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load Baseline data from {path}: {reason}")


def map_baseline_status(raw: Any) -> BaselineStatus:
    """Normalise web-features (``high``/``low``/``False``) and API status spellings."""
    if raw is False:
        return BaselineStatus.LIMITED
    if raw is None or raw is True:
        return BaselineStatus.UNKNOWN
    return _STATUS_ALIASES.get(str(raw).strip().lower(), BaselineStatus.UNKNOWN)


def _as_links(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, Mapping):
        url = raw.get("url")
        return (str(url),) if url else ()
    if not isinstance(raw, (list, tuple)):
        return ()
    links: list[str] = []
    for item in raw:
        links.extend(_as_links(item))
    return tuple(links)


def _as_date(raw: Any) -> str | None:
    # unquoted YAML dates load as datetime.date
    return str(raw) if raw else None


class BaselineSnapshot(BaselineSource):
    """Feature ID → :class:`BaselineFeatureInfo` map populated once per run."""

    def __init__(self, features: Iterable[BaselineFeatureInfo] = ()) -> None:
        self._features: dict[str, BaselineFeatureInfo] = {f.id: f for f in features}

    def __len__(self) -> int:
        return len(self._features)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._features

    def get_status(self, feature_id: str) -> BaselineStatus:
        info = self._features.get(feature_id)
        return info.status if info is not None else BaselineStatus.UNKNOWN

    def get_info(self, feature_id: str) -> BaselineFeatureInfo | None:
        return self._features.get(feature_id)

    def features_by_year(self, year: int) -> list[BaselineFeatureInfo]:
        return sorted(
            (f for f in self._features.values() if f.baseline.baseline_year == year),
            key=lambda f: f.id,
        )

    def yearly_summary(self, current_year: int) -> dict[int, dict[str, Any]]:
        """Group features by the year they entered Baseline."""
        buckets: dict[int, list[BaselineFeatureInfo]] = defaultdict(list)
        for info in self._features.values():
            year = info.baseline.baseline_year
            if year is not None:
                buckets[year].append(info)
        summary: dict[int, dict[str, Any]] = {}
        for year in sorted(buckets):
            features = buckets[year]
            breakdown = {"limited": 0, "newly": 0, "widely": 0}
            for f in features:
                if f.status.value in breakdown:
                    breakdown[f.status.value] += 1
            summary[year] = {
                "count": len(features),
                "age": current_year - year,
                "status_breakdown": breakdown,
                "recommended_enforcement": age_band(current_year - year).value,
                "features": sorted(f.id for f in features),
            }
        return summary

    @classmethod
    def from_web_features(cls, features: Mapping[str, Any]) -> BaselineSnapshot:
        """Build from the web-features ``data.json`` ``features`` mapping."""
        records: list[BaselineFeatureInfo] = []
        for feature_id, raw in features.items():
            if not isinstance(raw, Mapping) or not raw.get("name"):
                continue
            status = raw.get("status") or {}
            if not isinstance(status, Mapping):
                logger.warning("Skipping feature %s with malformed status", feature_id)
                continue
            records.append(BaselineFeatureInfo(
                id=str(feature_id),
                name=str(raw["name"]),
                baseline=BaselineDates(
                    status=map_baseline_status(status.get("baseline")),
                    low_date=_as_date(status.get("baseline_low_date")),
                    high_date=_as_date(status.get("baseline_high_date")),
                ),
                description=str(raw.get("description") or ""),
                spec=_as_links(raw.get("spec")),
                group=str(raw.get("group") or ""),
            ))
        return cls(records)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> BaselineSnapshot:
        """Build from processed records (``feature_id``/``id``, ``name``, ``baseline``)."""
        features: list[BaselineFeatureInfo] = []
        for raw in records:
            if not isinstance(raw, Mapping):
                continue
            feature_id = raw.get("feature_id") or raw.get("id")
            if not feature_id or not raw.get("name"):
                continue
            baseline = raw.get("baseline") or {}
            if not isinstance(baseline, Mapping):
                logger.warning("Skipping feature %s with malformed baseline", feature_id)
                continue
            features.append(BaselineFeatureInfo(
                id=str(feature_id),
                name=str(raw["name"]),
                baseline=BaselineDates(
                    status=map_baseline_status(baseline.get("status")),
                    low_date=_as_date(baseline.get("low_date")),
                    high_date=_as_date(baseline.get("high_date")),
                ),
                description=str(raw.get("description") or ""),
                mdn_url=str(raw.get("mdn_url") or ""),
                spec=_as_links(raw.get("spec")),
                group=str(raw.get("group") or ""),
            ))
        return cls(features)


def load_baseline_data(path: Path) -> BaselineSnapshot:
    """Load a snapshot file in either the web-features or the processed layout."""
    resolved = Path(path).resolve()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise BaselineDataError(resolved, exc.strerror or str(exc)) from exc
    try:
        data = json.loads(text) if resolved.suffix == ".json" else yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise BaselineDataError(resolved, f"invalid document ({exc})") from exc

    if isinstance(data, Mapping) and isinstance(data.get("features"), Mapping):
        snapshot = BaselineSnapshot.from_web_features(data["features"])
    elif isinstance(data, Mapping) and isinstance(data.get("features"), list):
        snapshot = BaselineSnapshot.from_records(data["features"])
    elif isinstance(data, list):
        snapshot = BaselineSnapshot.from_records(data)
    else:
        raise BaselineDataError(resolved, "expected a feature list or a 'features' mapping")

    logger.info("Loaded %d Baseline features from %s", len(snapshot), resolved)
    return snapshot
