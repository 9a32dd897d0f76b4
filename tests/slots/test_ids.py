"""Tests for slotrun.slots.ids."""

from itertools import permutations

import pytest

from slotrun.slots.ids import parse_id, resolve_ids


class TestResolveIds:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("0,2-4,8", [0, 2, 3, 4, 8]),
            (" 3 , 1 ,2 ", [1, 2, 3]),
            ("5,5,1-3,2", [1, 2, 3, 5]),
            ("7-7", [7]),
            ("10–12", [10, 11, 12]),
            ("1—2", [1, 2]),
        ],
    )
    def test_valid(self, expression, expected):
        assert resolve_ids(expression) == expected

    @pytest.mark.parametrize("expression", ["", None, ",,,", "abc", "5-3", "-2", "3-", "1.5", "²", "1-2-3"])
    def test_junk_resolves_to_nothing(self, expression):
        assert resolve_ids(expression) == []

    def test_junk_tokens_are_dropped_individually(self):
        assert resolve_ids("a,1,-2,3-,x-y,4") == [1, 4]

    def test_leading_zeros(self):
        assert resolve_ids("007,0010-0011") == [7, 10, 11]

    def test_token_order_does_not_matter(self):
        tokens = "8,2-4,0,3".split(",")
        results = {tuple(resolve_ids(",".join(p))) for p in permutations(tokens)}
        assert results == {(0, 2, 3, 4, 8)}

    @pytest.mark.parametrize("expression", ["0,2-4,8", "8,2-4,0,3", "a,1,-2,3-", "5-3", "10–12,1"])
    def test_resolving_the_result_again_is_stable(self, expression):
        once = resolve_ids(expression)
        assert resolve_ids(",".join(map(str, once))) == once


class TestParseId:
    def test_integer(self):
        assert parse_id(" 12 ") == 12

    @pytest.mark.parametrize("token", ["", "-1", "1a", "1.0", "٣"])
    def test_not_an_integer(self, token):
        assert parse_id(token) is None
