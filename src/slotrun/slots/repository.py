"""
Filesystem repository of instruction sets.

One flat ``<name>.txt`` file per set inside ``sets_dir``; there is no index
file, the header lines are the only structure.  The filesystem is the
single source of truth: nothing is cached between calls, so every request
sees the current file contents.

Tags:
    instruction-sets, repository, filesystem, slotrun
"""

from __future__ import annotations

import re
from pathlib import Path

from slotrun.core.errors import ConflictError, InvalidSetNameError, SetNotFoundError, StorageError
from slotrun.core.fileio import atomic_write_text
from slotrun.core.logging import get_logger
from slotrun.slots.document import SlotDocument, extract_slot, format_header

logger = get_logger(__name__)

SET_SUFFIX = ".txt"
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def normalize_set_name(name: str | None) -> str:
    """Reduce a requested set name to a bare ``*.txt`` file name.

    Directory components are discarded.  Empty names and names containing
    ``..`` are rejected.

    Raises:
        InvalidSetNameError: If nothing usable remains.
    """
    base = (name or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    if not base or ".." in base:
        raise InvalidSetNameError(f"Invalid set name specified: {name!r}")
    if not base.endswith(SET_SUFFIX):
        base += SET_SUFFIX
    return base


def sanitize_set_name(name: str | None) -> str:
    """Map a user-supplied name for a new set onto the safe file alphabet."""
    safe = _UNSAFE_NAME_CHARS.sub("_", (name or "").strip())
    return normalize_set_name(safe)


class InstructionSetRepository:
    """Reads and writes instruction-set files under ``sets_dir``."""

    def __init__(self, sets_dir: Path | str):
        self.sets_dir = Path(sets_dir)

    def ensure_directory(self) -> None:
        try:
            self.sets_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Failed to create instruction sets directory: {self.sets_dir}",
                cause=exc,
            ).with_context(path=str(self.sets_dir)) from exc

    def path_for(self, name: str) -> Path:
        return self.sets_dir / normalize_set_name(name)

    # ------------------------------------------------------------------ #
    # Sets
    # ------------------------------------------------------------------ #

    def list_sets(self) -> list[str]:
        if not self.sets_dir.is_dir():
            return []
        return sorted(p.name for p in self.sets_dir.glob(f"*{SET_SUFFIX}") if p.is_file())

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> str:
        """Return the text of a set.

        Files are UTF-8.  Bytes that do not decode are read as U+FFFD, so a
        stray Latin-1 comment does not make the whole set unusable.

        Raises:
            SetNotFoundError: If the file does not exist or cannot be read.
        """
        path = self.path_for(name)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
            raise SetNotFoundError(
                f"Instruction set '{path.name}' not found or not readable.",
                cause=exc,
            ).with_context(set_name=path.name) from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("set_not_utf8", set_name=path.name, position=exc.start)
            return data.decode("utf-8", errors="replace")

    def write(self, name: str, text: str) -> None:
        path = self.path_for(name)
        try:
            atomic_write_text(path, text)
        except OSError as exc:
            raise StorageError(
                f"Failed to write instruction set '{path.name}'. Check permissions.",
                cause=exc,
            ).with_context(set_name=path.name, path=str(path)) from exc

    def create(self, name: str) -> str:
        """Create a new set holding an empty slot 0; returns the final file name."""
        final = sanitize_set_name(name)
        if self.exists(final):
            raise ConflictError(f"Set already exists: {final}").with_context(set_name=final)
        self.ensure_directory()
        self.write(final, format_header(0) + "\n")
        logger.info("set_created", set=final)
        return final

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        if not path.is_file():
            raise SetNotFoundError(f"Set not found: {path.name}").with_context(set_name=path.name)
        try:
            path.unlink()
        except OSError as exc:
            raise StorageError(
                f"Failed to delete set '{path.name}'. Check permissions.", cause=exc
            ).with_context(set_name=path.name) from exc
        logger.info("set_deleted", set=path.name)

    # ------------------------------------------------------------------ #
    # Slots
    # ------------------------------------------------------------------ #

    def get_slot_code(self, name: str, slot_id: int) -> str | None:
        return extract_slot(self.read(name), slot_id)

    def load_document(self, name: str) -> SlotDocument:
        return SlotDocument.parse(self.read(name))

    def save_document(self, name: str, doc: SlotDocument, *, trimmed: bool = False) -> None:
        self.write(name, doc.render_trimmed() if trimmed else doc.render())
