"""Read browserslist queries and pick out the official Baseline ones."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from baselinegate.core.auto_config import BaselineQueryInfo

__all__ = ["read_browserslist_queries", "detect_baseline_queries"]

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"on (\d{4}-\d{2}-\d{2})")
_YEAR_RE = re.compile(r"baseline (\d{4})")


def read_browserslist_queries(directory: Path) -> list[str]:
    """Raw queries from ``.browserslistrc`` or the ``browserslist`` key of ``package.json``."""
    rc_file = directory / ".browserslistrc"
    if rc_file.is_file():
        try:
            lines = rc_file.read_text(encoding="utf-8").splitlines()
        except OSError:
            logger.debug("Failed to read %s", rc_file, exc_info=True)
        else:
            return [
                line.strip() for line in lines
                if line.strip() and not line.strip().startswith(("#", "["))
            ]

    package_json = directory / "package.json"
    if package_json.is_file():
        try:
            section = json.loads(package_json.read_text(encoding="utf-8")).get("browserslist")
        except (OSError, ValueError, AttributeError):
            logger.debug("Failed to read browserslist from %s", package_json, exc_info=True)
            return []
        if isinstance(section, str):
            return [section]
        if isinstance(section, list):
            return [str(q) for q in section]
    return []


def detect_baseline_queries(queries: list[str]) -> BaselineQueryInfo:
    info = BaselineQueryInfo()
    for query in queries:
        text = query.strip().lower()
        if not text.startswith("baseline"):
            continue
        info.queries.append(query)
        if "widely available" in text:
            info.types.append("widely")
            date_match = _DATE_RE.search(text)
            if date_match:
                info.dates.append(date_match.group(1))
        elif "newly available" in text:
            info.types.append("newly")
        else:
            year_match = _YEAR_RE.search(text)
            if year_match:
                info.types.append("yearly")
                info.years.append(int(year_match.group(1)))

    info.types = list(dict.fromkeys(info.types))
    info.years = sorted(set(info.years))
    info.dates = list(dict.fromkeys(info.dates))
    return info
