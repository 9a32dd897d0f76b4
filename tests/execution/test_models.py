"""Tests for slotrun.execution.models serialization."""

import warnings

from slotrun.execution.models import (
    ArchiveInfo,
    BatchReport,
    Diagnostic,
    FragmentFault,
    FragmentOutcome,
    SlotFailure,
    SlotResult,
)


class TestDiagnostic:
    def test_to_dict_drops_unset(self):
        assert Diagnostic(kind="notice", message="m").to_dict() == {"kind": "notice", "message": "m"}

    def test_from_warning(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            warnings.warn("old", DeprecationWarning)
        diag = Diagnostic.from_warning(caught[0])
        assert diag.category == "DeprecationWarning"
        assert diag.message == "old"
        assert diag.line is not None


class TestFragmentFault:
    def test_from_exception_prefers_named_file(self):
        try:
            exec(compile("def f():\n    raise ValueError('x')\nf()", "<frag>", "exec"), {})
        except ValueError as exc:
            fault = FragmentFault.from_exception(exc, filename="<frag>")
        assert fault.file == "<frag>"
        assert fault.line == 2

    def test_round_trip_through_dict(self):
        fault = FragmentFault(code="EXECUTION_FAULT", exception_type="E", message="m", line=3)
        outcome = FragmentOutcome(output="o", diagnostics=(fault.as_diagnostic(),), fault=fault)
        assert FragmentOutcome.from_dict(outcome.to_dict()) == outcome


class TestSlotResult:
    def test_success_shape(self):
        result = SlotResult(id=2, output="a,b", archive=ArchiveInfo(slug="s", path="/p/s.csv", bytes=3))
        assert result.ok
        assert result.to_dict() == {
            "id": 2,
            "output": "a,b",
            "error": None,
            "archive": {"stored": True, "bytes": 3, "slug": "s", "path": "/p/s.csv"},
            "diagnostics": [],
        }

    def test_failure_shape(self):
        fault = FragmentFault(code="TIMEOUT", exception_type="TimeoutExpired", message="slow")
        result = SlotResult(id=1, error=SlotFailure.from_fault(fault))
        data = result.to_dict()
        assert not result.ok
        assert data["output"] is None
        assert data["error"] == {
            "code": "TIMEOUT",
            "category": "EXECUTION",
            "message": "slow",
            "exception_type": "TimeoutExpired",
        }


class TestBatchReport:
    def test_to_dict(self, fixed_now):
        report = BatchReport(set="demo.txt", ran_at=fixed_now, results=(SlotResult(id=0, output=""),))
        data = report.to_dict()
        assert data["set"] == "demo.txt"
        assert data["ran_at"] == "2024-03-01T12:30:45+00:00"
        assert [r["id"] for r in data["results"]] == [0]
        assert report.failed == 0
