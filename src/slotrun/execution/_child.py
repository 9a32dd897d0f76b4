"""Child-process entry point of the subprocess strategy.

Reads ``{"source", "params", "filename"}`` as JSON on stdin, runs the
fragment in-process and writes the outcome as JSON on stdout.  Fragment
writes to ``sys.stdout`` land in the outcome's output; anything else written
to stdout while the fragment runs goes to stderr, so the reply stays intact.
"""

from __future__ import annotations

import contextlib
import json
import sys

from slotrun.execution.in_process import InProcessStrategy


def main() -> int:
    request = json.load(sys.stdin)
    reply = sys.stdout
    with contextlib.redirect_stdout(sys.stderr):
        outcome = InProcessStrategy().execute(
            request["source"],
            request.get("params") or {},
            filename=request.get("filename", "<slot>"),
        )
    json.dump(outcome.to_dict(), reply)
    reply.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
