"""Tests for slotrun.execution.in_process."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from slotrun.execution.in_process import InProcessStrategy, compile_fragment
from slotrun.execution.models import EXECUTION_FAULT, TIMEOUT


@pytest.fixture
def strategy() -> InProcessStrategy:
    return InProcessStrategy()


def run(strategy, source, params=None):
    return strategy.execute(source, params or {}, filename="<demo.txt:1>")


class TestCompileFragment:
    def test_top_level_return_allowed(self):
        namespace = {}
        exec(compile_fragment("return 5"), namespace)
        assert namespace["__fragment__"]() == 5

    def test_empty_source(self):
        namespace = {}
        exec(compile_fragment(""), namespace)
        assert namespace["__fragment__"]() is None

    def test_syntax_error(self):
        with pytest.raises(SyntaxError):
            compile_fragment("return (")


class TestOutputCapture:
    def test_print_is_captured(self, strategy):
        outcome = run(strategy, 'print("hello")\nprint("a", "b", sep="-")')
        assert outcome.ok
        assert outcome.output == "hello\na-b\n"
        assert outcome.text == "hello\na-b\n"

    def test_echo_has_no_separator(self, strategy):
        assert run(strategy, 'echo("a", 1, "b")').output == "a1b"

    def test_stderr_not_captured(self, strategy, capsys):
        outcome = run(strategy, 'import sys\nprint("oops", file=sys.stderr)')
        assert outcome.output == ""
        assert "oops" in capsys.readouterr().err

    def test_sys_stdout_write_is_captured(self, strategy):
        outcome = run(strategy, 'import sys\nsys.stdout.write("a,b\\n1,2\\n")')
        assert outcome.output == "a,b\n1,2\n"

    def test_csv_writer_on_stdout_is_captured(self, strategy):
        outcome = run(strategy, 'import csv, sys\ncsv.writer(sys.stdout, lineterminator="\\n").writerow(["x", "y"])')
        assert outcome.output == "x,y\n"

    def test_print_and_stdout_writes_keep_order(self, strategy):
        outcome = run(strategy, 'import sys\nprint("one")\nsys.stdout.write("two\\n")\nprint("three")')
        assert outcome.output == "one\ntwo\nthree\n"

    def test_stdout_outside_fragment_untouched(self, strategy, capsys):
        run(strategy, 'import sys\nsys.stdout.write("inside")')
        print("outside")
        assert capsys.readouterr().out == "outside\n"

    def test_concurrent_calls_keep_their_own_output(self, strategy):
        source = "import sys, time\nfor _ in range(5):\n    sys.stdout.write(params['tag'])\n    time.sleep(0.01)"
        with ThreadPoolExecutor(max_workers=2) as pool:
            a, b = pool.map(lambda tag: run(strategy, source, {"tag": tag}), ["a", "b"])
        assert a.output == "aaaaa"
        assert b.output == "bbbbb"

    def test_return_value_appended(self, strategy):
        outcome = run(strategy, 'print("x = ", end="")\nreturn 40 + 2')
        assert outcome.text == "x = 42"
        assert outcome.has_return
        assert outcome.return_value == 42

    def test_none_return(self, strategy):
        outcome = run(strategy, "return None")
        assert outcome.text == ""
        assert not outcome.has_return

    def test_container_return_is_tagged(self, strategy):
        assert run(strategy, "return [1, 2]").text == "[Return Type: list]"

    def test_functions_and_imports_work(self, strategy):
        source = "import math\ndef sq(x):\n    return x * x\nreturn sq(math.isqrt(16))"
        assert run(strategy, source).text == "16"


class TestParams:
    def test_params_visible(self, strategy):
        assert run(strategy, 'return params["name"]', {"name": "ada"}).text == "ada"

    def test_params_read_only(self, strategy):
        outcome = run(strategy, 'params["x"] = "1"', {})
        assert outcome.fault.exception_type == "TypeError"

    def test_no_leak_between_calls(self, strategy):
        run(strategy, "global leaked\nleaked = 1")
        outcome = run(strategy, "return leaked")
        assert outcome.fault.exception_type == "NameError"


class TestFaults:
    def test_exception_becomes_fault(self, strategy):
        outcome = run(strategy, 'print("before")\nraise ValueError("boom")')
        assert not outcome.ok
        assert outcome.fault.code == EXECUTION_FAULT
        assert outcome.fault.exception_type == "ValueError"
        assert outcome.fault.message == "boom"
        assert outcome.fault.file == "<demo.txt:1>"
        assert outcome.fault.line == 2
        assert "ValueError: boom" in outcome.fault.trace
        assert outcome.output == "before\n"
        assert outcome.diagnostics[-1].kind == "exception"

    def test_syntax_error_is_fault(self, strategy):
        outcome = run(strategy, "x = = 1")
        assert outcome.fault.exception_type == "SyntaxError"
        assert outcome.fault.line == 1

    def test_future_import_is_syntax_error(self, strategy):
        outcome = run(strategy, "from __future__ import annotations")
        assert outcome.fault.exception_type == "SyntaxError"

    def test_system_exit_contained(self, strategy):
        outcome = run(strategy, "import sys\nsys.exit(3)")
        assert outcome.fault.exception_type == "SystemExit"

    def test_keyboard_interrupt_propagates(self, strategy):
        with pytest.raises(KeyboardInterrupt):
            run(strategy, "raise KeyboardInterrupt")


class TestWarnings:
    def test_warnings_become_diagnostics(self, strategy):
        outcome = run(strategy, 'import warnings\nwarnings.warn("careful", UserWarning)\nreturn 1')
        assert outcome.ok
        assert outcome.text == "1"
        (diag,) = outcome.diagnostics
        assert diag.kind == "warning"
        assert diag.message == "careful"
        assert diag.category == "UserWarning"
        assert diag.line == 2


@pytest.mark.slow
class TestTimeout:
    def test_timeout_fault(self):
        outcome = InProcessStrategy(timeout=0.2).execute("import time\ntime.sleep(1.5)", {}, filename="<t:0>")
        assert outcome.fault.code == TIMEOUT
        assert outcome.diagnostics[0].kind == "exception"

    def test_fast_fragment_within_timeout(self):
        outcome = InProcessStrategy(timeout=5).execute("return 1", {})
        assert outcome.text == "1"
