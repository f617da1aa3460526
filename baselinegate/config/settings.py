"""Pydantic-based configuration model and YAML loader for BaselineGate."""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from baselinegate.config.browserslist import detect_baseline_queries, read_browserslist_queries
from baselinegate.core.auto_config import BaselineQueryInfo, apply_baseline_queries
from baselinegate.core.status import FeatureCategory

__all__ = [
    "ConfigError",
    "FeatureException",
    "CategoryRules",
    "RulesConfig",
    "EnforcementConfig",
    "ReportingConfig",
    "BaselineGateSettings",
    "load_settings",
    "apply_env_overrides",
    "unconditional_exceptions",
    "example_config",
]

logger = logging.getLogger(__name__)

_CONFIG_FILE_NAMES: list[str] = [
    ".baseline.yaml",
    ".baseline.yml",
    "baseline.yaml",
    ".baseline.json",
    "baseline.config.json",
]

Threshold = Literal["limited", "newly", "widely"]
Level = Literal["off", "info", "warn", "error"]
Mode = Literal["per-feature", "yearly", "hybrid"]


class ConfigError(Exception):
    def __init__(self, source: str, problems: list[str]) -> None:
        self.source = source
        self.problems = problems
        super().__init__(f"Invalid configuration in {source}:\n" + "\n".join(f"  - {p}" for p in problems))


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FeatureException(_ConfigModel):
    """Allow-list entry: matches by feature ID and/or file globs."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    feature: str | None = Field(default=None, description="Feature ID to exempt.")
    files: list[str] | None = Field(default=None, description="Glob patterns of exempt files.")
    reason: str | None = Field(default=None, description="Why the exception exists.")

    @field_validator("files", mode="before")
    @classmethod
    def _single_pattern(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def is_unconditional(self) -> bool:
        return not self.feature and self.files is None


class CategoryRules(_ConfigModel):
    baseline_threshold: Threshold = Field(
        default="newly",
        alias="baseline-threshold",
        description="Minimum Baseline status a feature of this category must reach.",
    )
    allowed_exceptions: list[FeatureException] = Field(
        default_factory=list,
        alias="allowed-exceptions",
        description="Features and/or files exempt from violations.",
    )


class RulesConfig(_ConfigModel):
    css: CategoryRules = Field(default_factory=CategoryRules)
    javascript: CategoryRules = Field(default_factory=CategoryRules)
    html: CategoryRules = Field(default_factory=CategoryRules)

    def for_category(self, category: FeatureCategory) -> CategoryRules:
        return getattr(self, category.value)


class EnforcementConfig(_ConfigModel):
    mode: Mode = Field(
        default="per-feature",
        description="Evaluation strategy: per-feature thresholds, yearly age rules, or both.",
    )
    yearly_rules: dict[int, Level] = Field(
        default_factory=dict,
        alias="yearly-rules",
        description="Explicit enforcement level per Baseline year; overrides the age bands.",
    )
    interop_priority: bool = Field(
        default=False,
        alias="interop-priority",
        description="Escalate yearly levels one step for top interoperability features.",
    )
    severity_weights: dict[str, float] = Field(
        default_factory=lambda: {"high": 1.0, "medium": 0.6, "low": 0.3},
        alias="severity-weights",
        description="Score penalty per violation severity, each in [0, 1].",
    )
    max_violations: int = Field(
        default=0,
        ge=0,
        alias="max-violations",
        description="Violations tolerated before a warn-mode run fails.",
    )
    on_violation: Literal["error", "warn"] = Field(
        default="error",
        alias="on-violation",
        description="'error' fails on any violation; 'warn' only above max-violations.",
    )

    @field_validator("severity_weights")
    @classmethod
    def _weights_in_range(cls, value: dict[str, float]) -> dict[str, float]:
        for severity, weight in value.items():
            if weight < 0 or weight > 1:
                raise ValueError(f"Severity weight for {severity} must be a number between 0 and 1")
        return value


class ReportingConfig(_ConfigModel):
    include_remediation: bool = Field(default=True, alias="include-remediation")
    output_format: Literal["table", "json"] = Field(default="table", alias="output-format")


class BaselineGateSettings(_ConfigModel):
    """Top-level BaselineGate configuration."""

    rules: RulesConfig = Field(default_factory=RulesConfig)
    enforcement: EnforcementConfig = Field(default_factory=EnforcementConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    baseline_queries: BaselineQueryInfo | None = Field(
        default=None,
        alias="baseline-queries",
        description="Baseline browserslist queries that drove auto-configuration.",
    )


def _find_config_file(search_dir: Path) -> Path | None:
    """Walk up from *search_dir* looking for a config file."""
    current = search_dir.resolve()
    while True:
        for name in _CONFIG_FILE_NAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _read_document(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(str(path), [exc.strerror or str(exc)]) from exc
    try:
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(str(path), [f"not valid {path.suffix.lstrip('.') or 'YAML'}: {exc}"]) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(path), ["top level must be a mapping"])
    return data


def _package_json_section(directory: Path, key: str) -> Any:
    package_json = directory / "package.json"
    if not package_json.is_file():
        return None
    try:
        return json.loads(package_json.read_text(encoding="utf-8")).get(key)
    except (OSError, ValueError, AttributeError):
        logger.warning("Failed to read %s", package_json)
        return None


def _validate(raw: Mapping[str, Any], source: str) -> BaselineGateSettings:
    try:
        return BaselineGateSettings.model_validate(raw)
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        raise ConfigError(source, problems) from exc


def apply_env_overrides(
    settings: BaselineGateSettings,
    env: Mapping[str, str] | None = None,
) -> BaselineGateSettings:
    """Apply ``BASELINE_*`` environment variables on top of *settings*."""
    environ = os.environ if env is None else env
    raw = settings.model_dump(by_alias=True)
    changed = False

    threshold = environ.get("BASELINE_THRESHOLD")
    if threshold:
        for category in FeatureCategory:
            raw["rules"][category.value]["baseline-threshold"] = threshold.strip()
        changed = True
    max_violations = environ.get("BASELINE_MAX_VIOLATIONS")
    if max_violations:
        raw["enforcement"]["max-violations"] = max_violations.strip()
        changed = True
    mode = environ.get("BASELINE_MODE")
    if mode:
        raw["enforcement"]["mode"] = mode.strip()
        changed = True
    interop = environ.get("BASELINE_INTEROP_PRIORITY")
    if interop:
        raw["enforcement"]["interop-priority"] = interop.strip().lower() == "true"
        changed = True

    if not changed:
        return settings
    logger.info("Applying configuration from environment variables")
    return _validate(raw, "environment")


def unconditional_exceptions(settings: BaselineGateSettings) -> list[tuple[FeatureCategory, FeatureException]]:
    """Exception entries with neither ``feature`` nor ``files``: they exempt everything."""
    found: list[tuple[FeatureCategory, FeatureException]] = []
    for category in FeatureCategory:
        for exception in settings.rules.for_category(category).allowed_exceptions:
            if exception.is_unconditional:
                found.append((category, exception))
    return found


def load_settings(
    config_path: Path | None = None,
    search_dir: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    current_year: int | None = None,
) -> BaselineGateSettings:
    """Load settings from a YAML/JSON file, falling back to defaults.

    Layering (later wins): defaults, config file (or ``package.json``
    ``"baseline"``), Baseline browserslist queries, ``BASELINE_*`` variables.
    """
    root = (search_dir or Path.cwd()).resolve()
    raw: dict[str, Any] = {}
    source = "defaults"

    if config_path is not None:
        resolved = Path(config_path).resolve()
        if resolved.is_file():
            raw = _read_document(resolved)
            source = str(resolved)
    else:
        found = _find_config_file(root)
        if found is not None:
            raw = _read_document(found)
            source = str(found)
        else:
            section = _package_json_section(root, "baseline")
            if isinstance(section, dict):
                raw = section
                source = str(root / "package.json")

    logger.debug("Loading configuration from %s", source)
    settings = _validate(raw, source)

    queries = read_browserslist_queries(root)
    if queries:
        info = detect_baseline_queries(queries)
        if info.has_baseline_queries:
            logger.info("Detected official Baseline queries: %s", ", ".join(info.queries))
            year = current_year if current_year is not None else date.today().year
            settings = apply_baseline_queries(settings, info, year)

    settings = apply_env_overrides(settings, env)

    for category, exception in unconditional_exceptions(settings):
        logger.warning(
            "Exception in rules.%s has neither 'feature' nor 'files' and exempts every %s feature (%s)",
            category.value, category.value, exception.reason or "no reason given",
        )
    return settings


def example_config() -> str:
    """Starter ``.baseline.yaml`` written by ``baselinegate init``."""
    return """\
# BaselineGate configuration
rules:
  css:
    baseline-threshold: newly
    allowed-exceptions:
      - feature: container-queries
        reason: Progressive enhancement with fallback
        files:
          - "src/components/modern/**"
  javascript:
    baseline-threshold: newly
  html:
    baseline-threshold: newly

enforcement:
  # per-feature | yearly | hybrid
  mode: per-feature
  # Explicit level per Baseline year (off | info | warn | error)
  yearly-rules: {}
  interop-priority: false
  severity-weights:
    high: 1.0
    medium: 0.6
    low: 0.3
  max-violations: 0
  on-violation: error

reporting:
  include-remediation: true
  output-format: table
"""
