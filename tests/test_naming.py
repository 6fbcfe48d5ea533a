"""Tests for namespace normalization and string helpers."""

import pytest

from lwes_logger.naming import channel_name, normalize, strip_ansi


class TestNormalize:
    @pytest.mark.parametrize("raw, expected", [
        ("test_thing", "TestThing"),
        ("test-thing", "Test-thing"),
        ("Test-_thing", "Test-Thing"),
        ("test__thing", "Test_thing"),
        ("TEST_THING", "TESTTHING"),
        ("TestThing", "TestThing"),
        ("lwes_logger", "LwesLogger"),
        ("", ""),
    ])
    def test_table(self, raw, expected):
        assert normalize(raw) == expected

    @pytest.mark.parametrize("raw", ["test_thing", "test-thing", "TEST_THING", "billing_service_v2"])
    def test_idempotent(self, raw):
        once = normalize(raw)
        assert normalize(once) == once

    def test_trailing_underscore_dropped_without_following_char(self):
        # No character follows the final "_", so it is not a boundary pair
        assert normalize("app_") == "App_"

    def test_only_string_start_is_boundary(self):
        assert normalize("a\nb") == "A\nb"

    def test_digits_after_boundary_pass_through(self):
        assert normalize("v_2_x") == "V2X"


class TestChannelName:
    def test_joins_with_double_colon(self):
        assert channel_name("LwesLogger", "Full") == "LwesLogger::Full"


class TestStripAnsi:
    def test_removes_color_codes(self):
        assert strip_ansi("\x1b[31mred\x1b[0m text") == "red text"

    def test_removes_compound_codes(self):
        assert strip_ansi("\x1b[1;32mok\x1b[0m") == "ok"

    def test_plain_text_unchanged(self):
        message = "nothing [to] strip m"
        assert strip_ansi(message) == message
