"""Tests for slotrun.storage.detect."""

import pytest

from slotrun.storage.detect import looks_tabular


class TestLooksTabular:
    @pytest.mark.parametrize(
        "text",
        ["a,b\n1,2", "\n\nname,age", "x,", "Hello, world", "a,b"],
    )
    def test_tabular(self, text):
        assert looks_tabular(text) is True

    @pytest.mark.parametrize(
        "text",
        ["", "\n\n", "hello\na,b", "\n\nhello world", "42"],
    )
    def test_not_tabular(self, text):
        assert looks_tabular(text) is False

    def test_whitespace_only_line_counts_as_first_line(self):
        assert looks_tabular("   \na,b") is False

    def test_crlf(self):
        assert looks_tabular("\r\na,b\r\n") is True
