"""
Subprocess fragment execution.

Each fragment runs in a fresh ``python -m slotrun.execution._child``
process.  Source and parameters go in as JSON on stdin, the outcome comes
back as JSON on stdout.  A crash, ``os._exit`` or runaway loop in the
fragment only ever takes the child down.

Tags:
    execution, subprocess, isolation, slotrun
"""

from __future__ import annotations

import json
import subprocess
import sys
from collections.abc import Mapping

from slotrun.core.logging import get_logger
from slotrun.execution.models import EXECUTION_FAULT, TIMEOUT, Diagnostic, FragmentFault, FragmentOutcome

logger = get_logger(__name__)

CHILD_MODULE = "slotrun.execution._child"
_STDERR_TAIL = 2000


class SubprocessStrategy:
    """Executes fragments in a child interpreter.

    Args:
        timeout: Seconds before the child is killed, ``None`` for no limit
        python: Interpreter to launch, the current one by default
    """

    name = "subprocess"

    def __init__(self, timeout: float | None = None, python: str | None = None):
        self.timeout = timeout
        self.python = python or sys.executable

    def execute(
        self,
        source: str,
        params: Mapping[str, str],
        *,
        filename: str = "<slot>",
    ) -> FragmentOutcome:
        payload = json.dumps({"source": source, "params": dict(params), "filename": filename})
        try:
            proc = subprocess.run(
                [self.python, "-m", CHILD_MODULE],
                input=payload,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("fragment_timeout", fragment=filename, timeout=self.timeout)
            fault = FragmentFault(
                code=TIMEOUT,
                exception_type="TimeoutExpired",
                message=f"Fragment exceeded its {self.timeout}s time limit; child process killed",
                file=filename,
            )
            return FragmentOutcome(diagnostics=(fault.as_diagnostic(),), fault=fault)

        stderr = proc.stderr.strip()
        try:
            outcome = FragmentOutcome.from_dict(json.loads(proc.stdout))
        except (ValueError, TypeError, KeyError, AttributeError):
            logger.warning("child_failed", fragment=filename, returncode=proc.returncode)
            fault = FragmentFault(
                code=EXECUTION_FAULT,
                exception_type="ChildProcessError",
                message=f"Fragment process exited with status {proc.returncode} without a result",
                file=filename,
                trace=stderr[-_STDERR_TAIL:] or None,
            )
            return FragmentOutcome(diagnostics=(fault.as_diagnostic(),), fault=fault)

        if stderr:
            notice = Diagnostic(kind="notice", message=stderr[-_STDERR_TAIL:], category="stderr", file=filename)
            outcome = FragmentOutcome(
                output=outcome.output,
                return_text=outcome.return_text,
                has_return=outcome.has_return,
                diagnostics=(*outcome.diagnostics, notice),
                fault=outcome.fault,
            )
        return outcome
