"""Shared pytest fixtures for the BaselineGate test suite."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from baselinegate.adapters.base import DetectedFeature, SourceLocation
from baselinegate.adapters.baseline_data import BaselineSnapshot
from baselinegate.config.settings import BaselineGateSettings

SNAPSHOT_RECORDS: list[dict[str, Any]] = [
    {
        "feature_id": "grid", "name": "Grid",
        "baseline": {"status": "widely", "low_date": "2017-10-17", "high_date": "2020-04-17"},
        "mdn_url": "https://developer.mozilla.org/docs/Web/CSS/CSS_grid_layout",
        "spec": ["https://drafts.csswg.org/css-grid-1/"],
    },
    {
        "feature_id": "container-queries", "name": "Container queries",
        "baseline": {"status": "newly", "low_date": "2023-02-14", "high_date": None},
    },
    {
        "feature_id": "has", "name": ":has()",
        "baseline": {"status": "newly", "low_date": "2023-12-19", "high_date": None},
    },
    {
        "feature_id": "fetch", "name": "Fetch",
        "baseline": {"status": "widely", "low_date": "2017-03-27", "high_date": "2019-09-27"},
    },
    {
        "feature_id": "view-transitions", "name": "View transitions",
        "baseline": {"status": "limited", "low_date": None, "high_date": None},
    },
    {
        "feature_id": "web-share", "name": "Web Share",
        "baseline": {"status": "limited", "low_date": None, "high_date": None},
    },
    {
        "feature_id": "popover", "name": "Popover",
        "baseline": {"status": "newly", "low_date": "2024-04-16", "high_date": None},
    },
    {
        "feature_id": "dialog", "name": "<dialog>",
        "baseline": {"status": "widely", "low_date": "2022-03-14", "high_date": "2024-09-14"},
    },
    {
        "feature_id": "abortcontroller", "name": "AbortController",
        "baseline": {"status": "widely", "low_date": "2021-04-26", "high_date": "2023-10-26"},
    },
]

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def snapshot() -> BaselineSnapshot:
    return BaselineSnapshot.from_records(SNAPSHOT_RECORDS)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "baseline.json"
    path.write_text(json.dumps(SNAPSHOT_RECORDS))
    return path


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def default_settings() -> BaselineGateSettings:
    return BaselineGateSettings()


@pytest.fixture
def make_feature() -> Callable[..., DetectedFeature]:
    def _make(
        feature_id: str | None,
        type: str = "css-property",
        file: str = "src/styles.css",
        line: int = 1,
        column: int = 1,
        name: str = "",
    ) -> DetectedFeature:
        return DetectedFeature(
            feature_id=feature_id, type=type, file=file,
            location=SourceLocation(line=line, column=column), name=name or (feature_id or ""),
        )

    return _make
