"""Tests for exception (allow-list) matching."""
from __future__ import annotations

import pytest

from baselinegate.config.settings import FeatureException
from baselinegate.core.exemptions import exception_matches, file_matches, is_exempt


class TestFileMatches:
    @pytest.mark.parametrize("path,pattern,expected", [
        ("src/components/modern/card.css", "src/components/modern/**", True),
        ("src/components/legacy/card.css", "src/components/modern/**", False),
        ("src/a/b/c/x.css", "src/**/*.css", True),
        ("src/app.ts", "src/*.{ts,js}", True),
        ("src/app.css", "src/*.{ts,js}", False),
        ("src/v1.css", "src/v[0-9].css", True),
    ])
    def test_glob_semantics(self, path, pattern, expected) -> None:
        assert file_matches(path, pattern) is expected

    def test_empty_path_never_matches(self) -> None:
        assert file_matches("", "**") is False


class TestExceptionMatches:
    def test_feature_and_files_both_required(self, make_feature) -> None:
        exc = FeatureException(feature="container-queries", files=["src/modern/**"])
        assert exception_matches(make_feature("container-queries", file="src/modern/a.css"), exc)
        assert not exception_matches(make_feature("container-queries", file="src/old/a.css"), exc)
        assert not exception_matches(make_feature("has", file="src/modern/a.css"), exc)

    def test_feature_only(self, make_feature) -> None:
        exc = FeatureException(feature="has")
        assert exception_matches(make_feature("has", file="anywhere.css"), exc)

    def test_files_only(self, make_feature) -> None:
        exc = FeatureException(files="vendor/**")
        assert exc.files == ["vendor/**"]
        assert exception_matches(make_feature("grid", file="vendor/lib.css"), exc)

    def test_empty_files_list_matches_nothing(self, make_feature) -> None:
        assert not exception_matches(make_feature("grid"), FeatureException(files=[]))

    def test_unconditional_matches_everything(self, make_feature) -> None:
        exc = FeatureException(reason="temporary")
        assert exc.is_unconditional
        assert exception_matches(make_feature("anything", file="x.js"), exc)


class TestIsExempt:
    def test_any_entry_exempts(self, make_feature) -> None:
        exceptions = [FeatureException(feature="grid"), FeatureException(files=["legacy/**"])]
        assert is_exempt(make_feature("has", file="legacy/old.css"), exceptions)
        assert is_exempt(make_feature("grid", file="src/a.css"), exceptions)
        assert not is_exempt(make_feature("has", file="src/a.css"), exceptions)

    def test_no_exceptions(self, make_feature) -> None:
        assert not is_exempt(make_feature("grid"), [])


class TestUnusablePatterns:
    def test_brace_expansion_over_limit_never_matches(self) -> None:
        assert file_matches("x.css", "{a,b}" * 12) is False

    def test_unusable_pattern_does_not_block_later_entries(self, make_feature) -> None:
        exceptions = [FeatureException(files=["{a,b}" * 12 + "/**"]), FeatureException(feature="grid")]
        assert is_exempt(make_feature("grid", file="src/a.css"), exceptions)
        assert not is_exempt(make_feature("has", file="src/a.css"), exceptions)
