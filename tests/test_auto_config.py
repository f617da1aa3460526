"""Tests for Baseline browserslist auto-configuration."""
from __future__ import annotations

from baselinegate.config.browserslist import detect_baseline_queries, read_browserslist_queries
from baselinegate.config.settings import BaselineGateSettings
from baselinegate.core.auto_config import BaselineQueryInfo, apply_baseline_queries, generate_yearly_rules


class TestGenerateYearlyRules:
    def test_listed_gap_and_lead_years(self) -> None:
        assert generate_yearly_rules([2023, 2021], 2025) == {
            2019: "error", 2020: "error", 2021: "error", 2022: "error",
            2023: "warn", 2024: "info", 2025: "off",
        }

    def test_historical_floor(self) -> None:
        rules = generate_yearly_rules([2016], 2025)
        assert min(rules) == 2015 and rules[2015] == "error"
        assert rules[2022] == "error" and rules[2023] == "warn" and rules[2025] == "off"

    def test_recent_listed_year_uses_age_band(self) -> None:
        assert generate_yearly_rules([2024], 2025)[2024] == "info"

    def test_no_years(self) -> None:
        assert generate_yearly_rules([], 2025) == {}


class TestApplyBaselineQueries:
    def test_yearly_sets_mode_and_keeps_explicit_entries(self) -> None:
        s = BaselineGateSettings.model_validate({"enforcement": {"yearly-rules": {2023: "error"}}})
        info = BaselineQueryInfo(queries=["baseline 2023"], types=["yearly"], years=[2023])
        out = apply_baseline_queries(s, info, 2025)
        assert out.enforcement.mode == "yearly"
        assert out.enforcement.yearly_rules[2023] == "error"
        assert out.enforcement.yearly_rules[2024] == "info"
        assert out.baseline_queries == info

    def test_widely_forces_threshold(self) -> None:
        s = BaselineGateSettings.model_validate({"enforcement": {"mode": "hybrid"}})
        info = BaselineQueryInfo(queries=["baseline widely available"], types=["widely"])
        out = apply_baseline_queries(s, info, 2025)
        assert out.enforcement.mode == "per-feature"
        assert {out.rules.css.baseline_threshold, out.rules.javascript.baseline_threshold,
                out.rules.html.baseline_threshold} == {"widely"}

    def test_widely_beats_newly(self) -> None:
        info = BaselineQueryInfo(queries=["a", "b"], types=["newly", "widely"])
        assert apply_baseline_queries(BaselineGateSettings(), info, 2025).rules.css.baseline_threshold == "widely"

    def test_no_queries_is_noop(self) -> None:
        s = BaselineGateSettings()
        assert apply_baseline_queries(s, BaselineQueryInfo(), 2025) is s
        assert apply_baseline_queries(s, None, 2025) is s


class TestBrowserslist:
    def test_detect_kinds(self) -> None:
        info = detect_baseline_queries([
            "defaults", "baseline 2022", "Baseline 2020",
            "baseline widely available on 2024-03-01", "baseline newly available",
        ])
        assert info.years == [2020, 2022]
        assert info.types == ["yearly", "widely", "newly"]
        assert info.dates == ["2024-03-01"]
        assert len(info.queries) == 4

    def test_non_baseline_queries(self) -> None:
        assert not detect_baseline_queries(["> 0.5%", "last 2 versions"]).has_baseline_queries

    def test_read_rc_file(self, tmp_path) -> None:
        (tmp_path / ".browserslistrc").write_text("# targets\n[production]\nbaseline 2022\n\nnot dead\n")
        assert read_browserslist_queries(tmp_path) == ["baseline 2022", "not dead"]

    def test_read_package_json(self, tmp_path) -> None:
        (tmp_path / "package.json").write_text('{"browserslist": "baseline widely available"}')
        assert read_browserslist_queries(tmp_path) == ["baseline widely available"]

    def test_nothing_declared(self, tmp_path) -> None:
        assert read_browserslist_queries(tmp_path) == []
