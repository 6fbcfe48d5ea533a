"""Tests for severity labels and coercion."""

import pytest

from lwes_logger.severity import Severity, canonicalize, capitalize, to_severity


class TestCanonicalize:
    def test_enum_members(self):
        assert canonicalize(Severity.DEBUG) == "DEBUG"
        assert canonicalize(Severity.WARN) == "WARN"
        assert canonicalize(Severity.FATAL) == "FATAL"

    def test_none_is_sentinel(self):
        assert canonicalize(None) == "ANY"

    def test_unknown_level_is_sentinel(self):
        assert canonicalize(Severity.UNKNOWN) == "ANY"

    def test_integers(self):
        assert canonicalize(1) == "INFO"
        assert canonicalize(42) == "ANY"

    def test_names(self):
        assert canonicalize("error") == "ERROR"
        assert canonicalize("WARNING") == "WARN"
        assert canonicalize("critical") == "FATAL"
        assert canonicalize("verbose") == "ANY"

    def test_unconvertible_object_is_sentinel(self):
        assert canonicalize(object()) == "ANY"
        assert canonicalize([1]) == "ANY"


class TestCapitalize:
    @pytest.mark.parametrize("label, expected", [
        ("DEBUG", "Debug"),
        ("INFO", "Info"),
        ("ANY", "Any"),
    ])
    def test_title_case(self, label, expected):
        assert capitalize(label) == expected


class TestToSeverity:
    def test_passthrough(self):
        assert to_severity(Severity.ERROR) is Severity.ERROR

    def test_name_case_insensitive(self):
        assert to_severity(" Info ") is Severity.INFO

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError):
            to_severity("loud")

    def test_out_of_range_raises(self):
        with pytest.raises(ValueError):
            to_severity(9)

    def test_ordering(self):
        assert Severity.DEBUG < Severity.INFO < Severity.WARN < Severity.ERROR < Severity.FATAL
