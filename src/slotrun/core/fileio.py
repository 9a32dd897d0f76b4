"""Atomic file writes.

Readers never observe a half-written file: data goes to a temporary file in
the target directory, is flushed and fsynced, then renamed over the target
with ``os.replace`` (atomic on POSIX and Windows within one filesystem).
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` atomically. The parent directory must exist."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Text convenience wrapper around :func:`atomic_write_bytes`."""
    atomic_write_bytes(path, text.encode(encoding))
