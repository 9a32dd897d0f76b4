"""
Slot extraction protocol and the parsed instruction-set document.

An instruction set is plain text.  Header lines label the code that
follows them::

    # slot 0
    print("hello")

    // command 7
    return 42

A header is a whole line: optional indentation, a comment leader (``#`` or
the legacy ``//``), the word ``slot`` or ``command``, whitespace and a
non-negative integer.  A slot's body runs from the line after its header to
the line before the next header (any id) or the end of the text.

Two views of the same format live here:

- :func:`extract_slot` is the read path used by the execution engine.  It
  returns the trimmed body of the *first* header carrying the requested id,
  regardless of header order or unrelated slots.
- :class:`SlotDocument` parses the whole text once into
  ``preamble + [SlotBlock]`` for administrative edits.  Each block keeps its
  raw text, so rendering an unedited document reproduces the input exactly.

Examples:
    >>> text = "# slot 2\\nreturn 'b'\\n# slot 1\\nreturn 'a'\\n"
    >>> extract_slot(text, 1)
    "return 'a'"
    >>> doc = SlotDocument.parse(text)
    >>> doc.ids()
    [1, 2]

Tags:
    parsing, slots, instruction-sets, slotrun
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

HEADER_RE = re.compile(r"^[ \t]*(?:#|//)[ \t]*(?:slot|command)[ \t]+([0-9]+)[ \t]*$")


def header_id(line: str) -> int | None:
    """Return the slot id if ``line`` is a header line, else ``None``."""
    match = HEADER_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    return int(match.group(1))


def format_header(slot_id: int) -> str:
    """Header line written for new or re-saved slots."""
    return f"# slot {slot_id}\n"


def extract_slot(text: str, slot_id: int) -> str | None:
    """Return the trimmed body of slot ``slot_id``, or ``None`` if absent."""
    lines = text.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if header_id(line) != slot_id:
            continue
        body = []
        for following in lines[index + 1 :]:
            if header_id(following) is not None:
                break
            body.append(following)
        return "".join(body).strip()
    return None


@dataclass
class SlotBlock:
    """One labelled block: its header line plus everything up to the next header."""

    id: int
    raw: str

    @property
    def header(self) -> str:
        return self.raw.splitlines(keepends=True)[0]

    @property
    def code(self) -> str:
        return self.raw[len(self.header) :].strip()


@dataclass
class SlotDocument:
    """An instruction set parsed into ordered blocks.

    ``preamble`` is whatever precedes the first header (usually empty).
    Ids may repeat; lookups and single edits use the first occurrence.
    """

    preamble: str = ""
    blocks: list[SlotBlock] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> SlotDocument:
        doc = cls()
        current: list[str] = []
        current_id: int | None = None

        for line in text.splitlines(keepends=True):
            found = header_id(line)
            if found is not None:
                doc._flush(current_id, current)
                current_id, current = found, [line]
            else:
                current.append(line)

        doc._flush(current_id, current)
        return doc

    def _flush(self, slot_id: int | None, lines: list[str]) -> None:
        if slot_id is None:
            self.preamble = "".join(lines)
        else:
            self.blocks.append(SlotBlock(id=slot_id, raw="".join(lines)))

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def ids(self) -> list[int]:
        """Sorted, unique slot ids present in the document."""
        return sorted({block.id for block in self.blocks})

    def find(self, slot_id: int) -> SlotBlock | None:
        for block in self.blocks:
            if block.id == slot_id:
                return block
        return None

    def __contains__(self, slot_id: object) -> bool:
        return any(block.id == slot_id for block in self.blocks)

    # ------------------------------------------------------------------ #
    # Edits
    # ------------------------------------------------------------------ #

    def save(self, slot_id: int, code: str) -> bool:
        """Replace the first block with ``slot_id`` or append a new one.

        A replaced block keeps the whitespace that followed it, so the gap
        before the next header survives.  Returns ``True`` when an existing
        block was replaced.
        """
        raw = format_header(slot_id) + code.rstrip() + "\n"
        block = self.find(slot_id)
        if block is not None:
            gap = block.raw[len(block.raw.rstrip()) :]
            block.raw = raw.rstrip() + (gap if "\n" in gap else "\n")
            return True
        self.append(slot_id, raw)
        return False

    def append(self, slot_id: int, raw: str | None = None) -> None:
        """Append a block after one blank line; an empty block by default."""
        if self.blocks:
            last = self.blocks[-1]
            last.raw = last.raw.rstrip() + "\n\n"
        elif self.preamble.strip():
            self.preamble = self.preamble.rstrip() + "\n\n"
        else:
            self.preamble = ""
        self.blocks.append(SlotBlock(id=slot_id, raw=raw or format_header(slot_id) + "\n"))

    def remove(self, slot_ids: Iterable[int], *, first_only: bool = False) -> list[int]:
        """Drop blocks whose id is listed; returns the ids actually removed."""
        wanted = set(slot_ids)
        removed: list[int] = []
        kept: list[SlotBlock] = []
        for block in self.blocks:
            if block.id in wanted and not (first_only and block.id in removed):
                removed.append(block.id)
                continue
            kept.append(block)
        self.blocks = kept
        return sorted(set(removed))

    def render(self) -> str:
        return self.preamble + "".join(block.raw for block in self.blocks)

    def render_trimmed(self) -> str:
        """Render with surrounding whitespace stripped and one final newline."""
        return self.render().strip() + "\n"
