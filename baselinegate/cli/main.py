"""BaselineGate CLI – Typer multi-command application."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from baselinegate.adapters.baseline_data import BaselineDataError, load_baseline_data
from baselinegate.adapters.feature_report import FeatureReportError, load_detected_features
from baselinegate.config.browserslist import detect_baseline_queries
from baselinegate.config.settings import (
    BaselineGateSettings, ConfigError, apply_env_overrides, example_config,
    load_settings, unconditional_exceptions,
)
from baselinegate.core.auto_config import apply_baseline_queries
from baselinegate.core.engine import EvaluationResult, PolicyEngine
from baselinegate.core.status import FeatureCategory
from baselinegate.rules.base_rule import Violation
from baselinegate.utils.logger import (
    configure_logging, console, create_panel, create_table, print_error,
    print_info, print_success, print_warning, severity_style,
)

__all__ = ["app"]

app = typer.Typer(
    name="baselinegate",
    help="Baseline web-platform compliance gate for CI.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_LEVEL_SEVERITY = {"error": "high", "warn": "medium", "info": "low", "off": "off"}


def _banner() -> None:
    console.print(Panel(
        Text("BaselineGate", style="bold magenta", justify="center"),
        subtitle="Baseline compliance for CI",
        border_style="magenta", expand=False, padding=(0, 4),
    ))
    console.print()


def _load(config: Path | None, project_dir: Path | None, mode: str | None, threshold: str | None) -> BaselineGateSettings:
    root = (project_dir or Path.cwd()).resolve()
    try:
        settings = load_settings(config_path=config, search_dir=root)
        overrides = {}
        if mode:
            overrides["BASELINE_MODE"] = mode
        if threshold:
            overrides["BASELINE_THRESHOLD"] = threshold
        if overrides:
            settings = apply_env_overrides(settings, overrides)
    except ConfigError as exc:
        print_error(str(exc))
        raise typer.Exit(code=2)
    for category, _ in unconditional_exceptions(settings):
        print_warning(
            f"An exception in rules.{category.value} has neither 'feature' nor 'files' "
            f"and exempts every {category.value} feature."
        )
    return settings


def _print_violation(v: Violation, include_remediation: bool) -> None:
    style = severity_style(v.severity.value)
    if v.is_yearly:
        headline = v.message
    else:
        headline = (
            f"Feature '{v.feature.feature_id}' is Baseline {v.current_status.value}, "
            f"required {v.required_status}"
        )
    console.print(f"  [{style}]● {v.severity.value.upper()}[/{style}]  {headline}  [dim]({v.violation_id})[/dim]")
    console.print(f"    [dim]Line ~{v.feature.location.line}[/dim]")
    if not include_remediation:
        return
    r = v.remediation
    if r.polyfill_suggestions:
        console.print(f"    [dim]Polyfills:[/dim] {', '.join(r.polyfill_suggestions)}")
    if r.alternative_features:
        console.print(f"    [dim]Alternatives:[/dim] {', '.join(r.alternative_features)}")
    if r.progressive_enhancement is not None:
        console.print(f"    [dim]Progressive enhancement:[/dim] {r.progressive_enhancement.description}")
    if r.estimated_availability_date:
        console.print(f"    [dim]Widely available around:[/dim] {r.estimated_availability_date}")
    for rec in r.yearly_recommendations:
        console.print(f"    [dim]{rec.type.capitalize()}:[/dim] {rec.message}")
    for doc in r.documentation:
        console.print(f"    [dim]{doc.title}:[/dim] {doc.url}")


def _print_report(result: EvaluationResult) -> None:
    if not result.violations:
        print_success("All detected features comply with the Baseline policy.")
    else:
        by_file: dict[str, list[Violation]] = {}
        for v in result.violations:
            by_file.setdefault(v.feature.file or "<unknown>", []).append(v)
        include = result.settings.reporting.include_remediation
        for file_path, violations in by_file.items():
            console.print(Panel(f"[bold]{file_path}[/bold]  ({len(violations)} issue(s))", border_style="yellow", expand=True))
            for v in violations:
                _print_violation(v, include)
            console.print()

    s = result.summary
    console.print(Panel(
        f"[bold]Features: {s.total_features}[/bold]  [bold]Violations: {s.total}[/bold]  "
        f"[sev.high]High: {s.by_severity['high']}[/sev.high]  "
        f"[sev.medium]Medium: {s.by_severity['medium']}[/sev.medium]  "
        f"[sev.low]Low: {s.by_severity['low']}[/sev.low]\n"
        f"[bold]Compliance score:[/bold] {result.compliance_score}/100  "
        f"[bold]Mode:[/bold] {result.settings.enforcement.mode}",
        title="📋 Baseline Summary", border_style="cyan",
    ))


@app.command()
def evaluate(
    features: Path = typer.Option(..., "--features", "-F", help="Detected features (JSON/YAML list)"),
    baseline_data: Path = typer.Option(..., "--baseline-data", "-b", help="Baseline data snapshot (JSON/YAML)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to .baseline.yaml"),
    project_dir: Optional[Path] = typer.Option(None, "--dir", "-d", help="Project root directory"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Enforcement mode: per-feature|yearly|hybrid"),
    threshold: Optional[str] = typer.Option(None, "--threshold", "-t", help="Threshold for every category: limited|newly|widely"),
    output_format: Optional[str] = typer.Option(None, "--format", "-o", help="Output format: table|json"),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the JSON result to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Evaluate detected features against the Baseline policy."""
    configure_logging(verbose)
    settings = _load(config, project_dir, mode, threshold)
    fmt = output_format or settings.reporting.output_format
    if fmt not in ("table", "json"):
        print_error(f"Unknown output format: {fmt}")
        raise typer.Exit(code=2)

    try:
        snapshot = load_baseline_data(baseline_data)
        detected = load_detected_features(features)
    except (BaselineDataError, FeatureReportError) as exc:
        print_error(str(exc))
        raise typer.Exit(code=2)

    result = PolicyEngine(settings=settings, source=snapshot).evaluate(detected)

    if output is not None:
        try:
            output.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            print_error(f"Cannot write report to {output}: {exc.strerror or exc}")
            raise typer.Exit(code=2)
    if fmt == "json":
        typer.echo(json.dumps(result.to_dict(), indent=2))
        raise typer.Exit(code=result.exit_code)

    _banner()
    _print_report(result)
    if output is not None:
        print_info(f"Report saved to {output}")
    if result.failed:
        noun = "violation" if len(result.violations) == 1 else "violations"
        print_error(f"Baseline compliance check failed with {len(result.violations)} {noun}.")
    elif result.violations:
        print_warning(f"Found {len(result.violations)} Baseline compliance violations (warnings only).")
    raise typer.Exit(code=result.exit_code)


@app.command()
def rules(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to .baseline.yaml"),
    project_dir: Optional[Path] = typer.Option(None, "--dir", "-d", help="Project root directory"),
    query: Optional[List[str]] = typer.Option(None, "--query", "-q", help="Browserslist query, e.g. 'baseline 2022'"),
) -> None:
    """Show the effective enforcement configuration."""
    _banner()
    settings = _load(config, project_dir, None, None)
    if query:
        info = detect_baseline_queries(list(query))
        if not info.has_baseline_queries:
            print_warning("None of the given queries is an official Baseline query.")
        settings = apply_baseline_queries(settings, info, date.today().year)

    enforcement = settings.enforcement
    queries = settings.baseline_queries.queries if settings.baseline_queries else []
    console.print(create_panel(
        f"[bold]Mode:[/bold] {enforcement.mode}\n"
        f"[bold]Interop priority:[/bold] {'on' if enforcement.interop_priority else 'off'}\n"
        f"[bold]On violation:[/bold] {enforcement.on_violation} (max {enforcement.max_violations})\n"
        f"[bold]Baseline queries:[/bold] {escape(', '.join(queries)) or 'none'}",
        title="⚙️  Enforcement",
    ))
    console.print(create_table(
        "Thresholds",
        [("Category", "bold"), ("Threshold", "cyan"), ("Exceptions", "")],
        [
            [c.value, settings.rules.for_category(c).baseline_threshold,
             len(settings.rules.for_category(c).allowed_exceptions)]
            for c in FeatureCategory
        ],
    ))
    if enforcement.yearly_rules:
        console.print(create_table(
            "Yearly rules",
            [("Baseline year", "bold"), ("Level", "")],
            [
                [year, f"[{severity_style(_LEVEL_SEVERITY[level])}]{level}[/]"]
                for year, level in sorted(enforcement.yearly_rules.items())
            ],
        ))
    else:
        print_info("No explicit yearly rules; features are judged by age (3+ error, 2 warn, 1 info).")


@app.command()
def init(
    project_dir: Optional[Path] = typer.Option(None, "--dir", "-d", help="Project root directory"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .baseline.yaml"),
) -> None:
    """Write a starter .baseline.yaml."""
    target = (project_dir or Path.cwd()).resolve() / ".baseline.yaml"
    if target.exists() and not force:
        print_warning(f"{target} already exists – use --force to overwrite.")
        raise typer.Exit(code=1)
    target.write_text(example_config(), encoding="utf-8")
    print_success(f"Wrote {target}")


if __name__ == "__main__":
    app()
