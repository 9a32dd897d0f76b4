"""Tests for slotrun.core.hashing and slotrun.core.timestamps."""

import hashlib
from datetime import UTC, datetime

import pytest

from slotrun.core.hashing import compute_digest, shard_parts
from slotrun.core.timestamps import from_iso8601, slug_stamp, to_iso8601


class TestComputeDigest:
    def test_md5_is_default(self):
        assert compute_digest("report_3") == hashlib.md5(b"report_3").hexdigest()

    def test_sha256(self):
        assert compute_digest("report_3", "sha256") == hashlib.sha256(b"report_3").hexdigest()

    def test_utf8_encoding(self):
        assert compute_digest("café") == hashlib.md5("café".encode()).hexdigest()

    def test_unsupported_algorithm(self):
        with pytest.raises(ValueError, match="Unsupported"):
            compute_digest("x", "sha1")


class TestShardParts:
    def test_leading_pairs(self):
        assert shard_parts("f1c5a0beef", 3) == ["f1", "c5", "a0"]

    def test_short_digest_is_padded(self):
        assert shard_parts("abc", 3) == ["ab", "00", "00"]


class TestTimestamps:
    def test_slug_stamp_has_microseconds(self):
        dt = datetime(2024, 3, 1, 12, 30, 45, 7, tzinfo=UTC)
        assert slug_stamp(dt) == "20240301_123045_000007"

    def test_iso_round_trip_at_seconds_precision(self):
        dt = datetime(2024, 3, 1, 12, 30, 45, tzinfo=UTC)
        assert from_iso8601(to_iso8601(dt)) == dt

    def test_none_passthrough(self):
        assert to_iso8601(None) is None
        assert from_iso8601(None) is None
