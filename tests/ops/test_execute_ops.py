"""Tests for slotrun.ops.execute."""

import pytest

from slotrun.ops.execute import parse_cli_params, parse_params, run_batch
from slotrun.ops.requests import RunBatchRequest


class TestParseParams:
    def test_none(self):
        assert parse_params(None) == {}

    def test_mapping_values_stringified(self):
        assert parse_params({"n": 3}) == {"n": "3"}

    def test_newline_text(self):
        assert parse_params("user=admin\r\ndebug=1\n") == {"user": "admin", "debug": "1"}

    def test_ampersand_and_url_decoding(self):
        assert parse_params("a=1&b=x%20y&c=a+b") == {"a": "1", "b": "x y", "c": "a b"}

    def test_later_keys_win_and_blank_values_kept(self):
        assert parse_params("a=1&a=2&e=") == {"a": "2", "e": ""}


class TestParseCliParams:
    def test_split_on_first_equals_and_trim(self):
        assert parse_cli_params([" key = value ", "expr=a=b"]) == {"key": "value", "expr": "a=b"}

    def test_arguments_without_equals_ignored(self):
        assert parse_cli_params(["flag", "x=1"]) == {"x": "1"}


class TestRunBatch:
    def test_success(self, ctx, sample_set):
        result = run_batch(ctx, RunBatchRequest(set_name=sample_set, ids="0,1"))
        assert result.success
        assert [r.output for r in result.data.results] == ["hello\n", "42"]
        assert result.warnings == []

    def test_latin1_byte_in_set_still_runs(self, ctx, repository):
        (repository.sets_dir / "lat.txt").write_bytes(b"# slot 1\n# caf\xe9\nprint('ok')\n")
        result = run_batch(ctx, RunBatchRequest(set_name="lat", ids="1"))
        assert result.success
        (slot,) = result.data.results
        assert slot.error is None
        assert slot.output == "ok\n"

    def test_slot_failures_become_warnings(self, ctx, sample_set):
        result = run_batch(ctx, RunBatchRequest(set_name=sample_set, ids="3,4"))
        assert result.success
        assert len(result.warnings) == 2
        assert result.warnings[0].startswith("Slot 3:")

    def test_single_slot_fallback(self, ctx, sample_set):
        result = run_batch(ctx, RunBatchRequest(set_name=sample_set, slot="1"))
        assert [r.id for r in result.data.results] == [1]

    def test_ids_take_precedence_over_slot(self, ctx, sample_set):
        result = run_batch(ctx, RunBatchRequest(set_name=sample_set, ids="0", slot=1))
        assert [r.id for r in result.data.results] == [0]

    def test_params_text(self, ctx, sample_set):
        result = run_batch(ctx, RunBatchRequest(set_name=sample_set, ids="5", params="name=bob"))
        assert result.data.results[0].output == "hi bob"

    @pytest.mark.parametrize(
        "request_kwargs, code",
        [
            ({"set_name": None, "ids": "1"}, "MISSING_PARAMETER"),
            ({"set_name": "  ", "ids": "1"}, "MISSING_PARAMETER"),
            ({"set_name": "..", "ids": "1"}, "INVALID_SET_NAME"),
            ({"set_name": "ghost", "ids": "1"}, "SET_NOT_FOUND"),
            ({"set_name": "demo", "ids": "x"}, "INVALID_IDS"),
            ({"set_name": "demo", "slot": "-1"}, "INVALID_IDS"),
            ({"set_name": "demo"}, "INVALID_IDS"),
        ],
    )
    def test_batch_level_failures(self, ctx, sample_set, request_kwargs, code):
        result = run_batch(ctx, RunBatchRequest(**request_kwargs))
        assert not result.success
        assert result.error.code == code

    def test_unexpected_error_is_internal(self, ctx, sample_set, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("kaput")

        monkeypatch.setattr(ctx.engine, "run_batch", explode)
        result = run_batch(ctx, RunBatchRequest(set_name=sample_set, ids="1"))
        assert result.error.code == "INTERNAL"
        assert "kaput" in result.error.message
