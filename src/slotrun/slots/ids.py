"""
Identifier expression resolver.

Turns ``"0,2-4, 8"`` into ``[0, 2, 3, 4, 8]``.  Tokens are separated by
commas; each token is a non-negative integer or an inclusive ascending
range ``A-B``.  Anything else is dropped without error: an expression made
only of junk resolves to ``[]`` and the caller decides what that means.

Rules:
    - Whitespace around tokens is ignored
    - En/em dashes, non-breaking hyphens and the minus sign count as ``-``
    - ``B < A`` ranges are discarded, never swapped
    - Only ASCII digits count as numeric (``"²"`` is not a number)
    - The result is de-duplicated and ascending

Examples:
    >>> resolve_ids("0,2-4,8")
    [0, 2, 3, 4, 8]
    >>> resolve_ids("5-3")
    []
    >>> resolve_ids("a,1,-2,3-")
    [1]

Tags:
    identifiers, parsing, slotrun
"""

from __future__ import annotations

import re

_DIGITS = re.compile(r"[0-9]+")
_DASHES = str.maketrans({"‐": "-", "‑": "-", "‒": "-", "–": "-", "—": "-", "−": "-"})


def parse_id(token: str) -> int | None:
    """Parse a single non-negative integer token, or ``None`` if it is not one."""
    token = token.strip()
    if _DIGITS.fullmatch(token):
        return int(token)
    return None


def resolve_ids(expression: str | None) -> list[int]:
    """Resolve an identifier expression into a sorted list of unique ids."""
    out: set[int] = set()
    for part in (expression or "").split(","):
        part = part.strip().translate(_DASHES)
        if not part:
            continue

        if "-" in part:
            start, end = part.split("-", 1)
            if _DIGITS.fullmatch(start) and _DIGITS.fullmatch(end):
                lo, hi = int(start), int(end)
                if hi >= lo:
                    out.update(range(lo, hi + 1))
        elif _DIGITS.fullmatch(part):
            out.add(int(part))

    return sorted(out)
