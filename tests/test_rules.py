"""Tests for the threshold and yearly rules."""
from __future__ import annotations

import pytest

from baselinegate.config.settings import BaselineGateSettings
from baselinegate.core.engine import PolicyEngine
from baselinegate.core.status import BaselineDates, BaselineFeatureInfo, BaselineStatus
from baselinegate.rules.base_rule import RuleContext, Severity
from baselinegate.rules.threshold_rule import ThresholdRule
from baselinegate.rules.yearly_rule import YearlyRule


@pytest.fixture
def context() -> RuleContext:
    return RuleContext(settings=BaselineGateSettings(), current_year=2025, timestamp="2025-06-01T12:00:00.000Z")


class TestThresholdRule:
    def test_passing_feature(self, snapshot, context, make_feature) -> None:
        assert ThresholdRule().evaluate(make_feature("grid"), BaselineStatus.WIDELY, snapshot.get_info("grid"), context) is None

    def test_failing_feature(self, snapshot, context, make_feature) -> None:
        info = snapshot.get_info("view-transitions")
        v = ThresholdRule().evaluate(make_feature("view-transitions"), BaselineStatus.LIMITED, info, context)
        assert v is not None and v.severity is Severity.MEDIUM and v.feature_info is info
        assert v.to_dict()["requiredStatus"] == "newly" and "violationLevel" not in v.to_dict()


class TestYearlyRule:
    def test_builds_yearly_violation(self, snapshot, context, make_feature) -> None:
        info = snapshot.get_info("dialog")
        v = YearlyRule().evaluate(make_feature("dialog", type="html-element"), BaselineStatus.WIDELY, info, context)
        assert v is not None and v.is_yearly
        assert v.to_dict()["violationLevel"] == "error" and v.to_dict()["featureAge"] == 3

    def test_recent_feature_is_off(self, context, make_feature) -> None:
        info = BaselineFeatureInfo(id="new", name="New", baseline=BaselineDates(BaselineStatus.NEWLY, "2025-01-10"))
        assert YearlyRule().level_for(make_feature("new"), info, context).value == "off"
        assert YearlyRule().evaluate(make_feature("new"), BaselineStatus.NEWLY, info, context) is None

    def test_no_info(self, context, make_feature) -> None:
        assert YearlyRule().evaluate(make_feature("x"), BaselineStatus.NEWLY, None, context) is None


class TestRuleSelection:
    @pytest.mark.parametrize("mode,expected", [
        ("per-feature", ["baseline-threshold"]),
        ("yearly", ["baseline-yearly"]),
        ("hybrid", ["baseline-yearly", "baseline-threshold"]),
    ])
    def test_mode_dispatch(self, mode, expected) -> None:
        s = BaselineGateSettings.model_validate({"enforcement": {"mode": mode}})
        assert [r.rule_id for r in PolicyEngine.build_rules(s)] == expected
