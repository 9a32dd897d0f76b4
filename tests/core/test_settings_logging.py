"""Tests for slotrun.core.settings and slotrun.core.logging."""

from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from slotrun.core.logging import LogContext, bind_context, clear_context, configure_logging, get_logger
from slotrun.core.settings import RuntimeSettings


class TestRuntimeSettings:
    def test_defaults_derive_from_data_dir(self, tmp_path):
        s = RuntimeSettings(data_dir=tmp_path)
        assert s.sets_dir == tmp_path / "instructionSets"
        assert s.store_root == tmp_path / "csv"
        assert s.shard_levels == 3
        assert s.shard_hash == "md5"
        assert s.store_base_url == "/csv"
        assert s.execution_strategy == "in_process"
        assert s.slot_timeout is None

    def test_explicit_directories_win(self, tmp_path):
        s = RuntimeSettings(data_dir=tmp_path, sets_dir=tmp_path / "s", store_root=tmp_path / "c")
        assert s.sets_dir == tmp_path / "s"
        assert s.store_root == tmp_path / "c"

    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SLOTRUN_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("SLOTRUN_EXECUTION_STRATEGY", "subprocess")
        monkeypatch.setenv("SLOTRUN_SLOT_TIMEOUT", "2.5")
        s = RuntimeSettings()
        assert s.data_dir == Path(tmp_path)
        assert s.execution_strategy == "subprocess"
        assert s.slot_timeout == 2.5

    @pytest.mark.parametrize(
        "field, value",
        [("execution_strategy", "threads"), ("shard_hash", "sha1"), ("shard_levels", 0), ("slot_timeout", 0)],
    )
    def test_invalid_values_rejected(self, tmp_path, field, value):
        with pytest.raises(ValidationError):
            RuntimeSettings(data_dir=tmp_path, **{field: value})


class TestLogging:
    def test_configure_and_log(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("slotrun.test").info("hello_event", answer=42)
        err = capsys.readouterr().err
        assert "hello_event" in err
        assert '"answer": 42' in err
        assert '"service.name": "slotrun"' in err

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        get_logger("slotrun.test").info("quiet_event")
        assert "quiet_event" not in capsys.readouterr().err

    def test_log_context_binds_and_unbinds(self):
        clear_context()
        with LogContext(set="demo.txt", slot=3):
            ctx = structlog.contextvars.get_contextvars()
            assert ctx["set"] == "demo.txt"
            assert ctx["slot"] == 3
        assert "set" not in structlog.contextvars.get_contextvars()

    def test_clear_context(self):
        bind_context(request_id="abc")
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
