"""
Content Shard Store - deterministic, hash-partitioned artifact storage.

Maps a logical slug to ``<root>/aa/bb/cc/<slug>.csv`` where ``aa``, ``bb``
and ``cc`` are consecutive hex pairs of the slug's digest.  Every stored
artifact gets a sibling ``<slug>.json`` sidecar describing it.

Manifesto:
    - **Deterministic:** The path is a pure function of the sanitized slug
    - **Bounded fan-out:** At most 256 entries per directory level, however
      many artifacts are stored
    - **Race tolerant:** Concurrent creators of one shard directory all succeed
    - **Atomic writes:** Content and sidecar go through temp file + rename
    - **Last writer wins:** Re-storing a slug replaces it; ingestion never does

Architecture:
    ::

        slug "report 3"
            │  sanitize  [^A-Za-z0-9._-]+ -> "_"
            ▼
        "report_3" ── md5 ──► "f1c5a0…"
            │
            ▼
        <root>/f1/c5/a0/report_3.csv
        <root>/f1/c5/a0/report_3.json   {slug, bytes, stored_at, levels}

Examples:
    >>> store = ShardStore(tmp_path / "csv")
    >>> artifact = store.store("a,b\\n1,2\\n", "report")
    >>> len(artifact.path.relative_to(store.root).parts)
    4
    >>> store.url_for("report").endswith("/report.csv")
    True

Tags:
    storage, sharding, filesystem, sidecar, slotrun
"""

from __future__ import annotations

import json
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote

from slotrun.core.errors import (
    CollisionExhaustedError,
    InvalidSlugError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from slotrun.core.fileio import atomic_write_bytes, atomic_write_text
from slotrun.core.hashing import compute_digest, shard_parts
from slotrun.core.logging import get_logger
from slotrun.core.timestamps import to_iso8601, utc_now

logger = get_logger(__name__)

CONTENT_SUFFIX = ".csv"
SIDECAR_SUFFIX = ".json"
DEFAULT_LEVELS = 3
MAX_INGEST_ATTEMPTS = 1000

_UNSAFE_SLUG_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_slug(slug: str) -> str:
    """Replace runs of unsafe characters with ``_``.

    Raises:
        InvalidSlugError: If the result is empty or contains ``..``
    """
    safe = _UNSAFE_SLUG_CHARS.sub("_", slug)
    if not safe or ".." in safe:
        raise InvalidSlugError(f"Invalid or potentially unsafe slug provided: {slug!r}").with_context(
            slug=slug
        )
    return safe


@dataclass(frozen=True, slots=True)
class StoredArtifact:
    """What the store knows about one artifact after writing it."""

    slug: str
    path: Path
    bytes: int
    stored_at: datetime
    levels: int

    def sidecar(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "bytes": self.bytes,
            "stored_at": to_iso8601(self.stored_at),
            "levels": self.levels,
        }


class ShardStore:
    """Sharded artifact store rooted at ``root``.

    Args:
        root: Base directory of the sharded tree
        levels: Number of two-hex-character directory levels
        algorithm: Digest used for sharding (``md5`` or ``sha256``)
        base_url: Public prefix used by :meth:`url_for`
    """

    def __init__(
        self,
        root: Path | str,
        *,
        levels: int = DEFAULT_LEVELS,
        algorithm: str = "md5",
        base_url: str = "/csv",
    ):
        if levels < 1:
            raise ValueError("levels must be >= 1")
        # fail early on an unknown algorithm
        compute_digest("", algorithm)
        self.root = Path(root)
        self.levels = levels
        self.algorithm = algorithm
        self.base_url = base_url

    @classmethod
    def from_settings(cls, settings: Any) -> ShardStore:
        return cls(
            settings.store_root,
            levels=settings.shard_levels,
            algorithm=settings.shard_hash,
            base_url=settings.store_base_url,
        )

    def __repr__(self) -> str:
        return f"ShardStore(root={str(self.root)!r}, levels={self.levels}, algorithm={self.algorithm!r})"

    # ------------------------------------------------------------------ #
    # Path derivation
    # ------------------------------------------------------------------ #

    def shard_path(self, safe_slug: str) -> str:
        """``aa/bb/cc`` for an already sanitized slug."""
        digest = compute_digest(safe_slug, self.algorithm)
        return "/".join(shard_parts(digest, self.levels))

    def locate(self, slug: str, *, create_dirs: bool = True) -> Path:
        """Return the canonical content path for ``slug``.

        With ``create_dirs=False`` this is a pure computation.

        Raises:
            InvalidSlugError: For an unusable slug (nothing is created)
            StorageError: If the shard directory cannot be created
        """
        safe = sanitize_slug(slug)
        directory = self.root / self.shard_path(safe)
        if create_dirs:
            self._ensure_dir(directory)
        return directory / f"{safe}{CONTENT_SUFFIX}"

    def sidecar_path(self, content_path: Path) -> Path:
        return content_path.with_suffix(SIDECAR_SUFFIX)

    def url_for(self, slug: str, base: str | None = None) -> str:
        """Relative URL of the artifact, slug percent-encoded."""
        safe = sanitize_slug(slug)
        prefix = (self.base_url if base is None else base).rstrip("/")
        return f"{prefix}/{self.shard_path(safe)}/{quote(safe, safe='')}{CONTENT_SUFFIX}"

    def _ensure_dir(self, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            # something other than a directory sits there
            if not directory.is_dir():
                raise StorageError(f"Unable to create shard directory: {directory}").with_context(
                    path=str(directory)
                ) from None
        except OSError as exc:
            raise StorageError(
                f"Unable to create shard directory: {directory}. Check permissions.", cause=exc
            ).with_context(path=str(directory)) from exc

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def store(self, content: str | bytes, slug: str) -> StoredArtifact:
        """Write ``content`` under ``slug`` (overwriting) and its sidecar."""
        path = self.locate(slug, create_dirs=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        try:
            atomic_write_bytes(path, data)
        except OSError as exc:
            raise StorageError(
                f"Failed to write content to: {path}. Check permissions.", cause=exc
            ).with_context(slug=slug, path=str(path)) from exc

        artifact = self._write_sidecar(path, len(data))
        logger.info("artifact_stored", slug=artifact.slug, bytes=artifact.bytes, path=str(path))
        return artifact

    def ingest(self, source: Path | str) -> StoredArtifact:
        """Move an existing file into the store without overwriting anything.

        The slug is the file's base name; if its destination is taken,
        ``_1``, ``_2`` ... are appended until a free one is found.

        Raises:
            ValidationError: If ``source`` is not a readable regular file
            InvalidSlugError: If the base name sanitizes to nothing usable
            CollisionExhaustedError: If no free destination within the ceiling
            StorageError: If the move or sidecar write fails
        """
        source = Path(source)
        if not source.is_file():
            raise ValidationError(f"Source file is not a valid, readable file: {source}").with_context(
                path=str(source)
            )

        original = source.stem
        candidate = original
        attempt = 0
        while True:
            destination = self.locate(candidate, create_dirs=True)
            if self._reserve(destination):
                break
            attempt += 1
            if attempt > MAX_INGEST_ATTEMPTS:
                raise CollisionExhaustedError(
                    f"Failed to find a non-colliding path for {original!r} after {MAX_INGEST_ATTEMPTS} attempts."
                ).with_context(slug=original)
            candidate = f"{original}_{attempt}"

        try:
            shutil.move(source, destination)
        except OSError as exc:
            destination.unlink(missing_ok=True)
            raise StorageError(
                f"Failed to move file from {source} to {destination}. Check permissions.", cause=exc
            ).with_context(path=str(source)) from exc

        artifact = self._write_sidecar(destination, destination.stat().st_size)
        logger.info(
            "artifact_ingested",
            source=str(source),
            slug=artifact.slug,
            attempts=attempt,
            path=str(destination),
        )
        return artifact

    def _reserve(self, destination: Path) -> bool:
        """Claim ``destination`` by creating it empty; ``False`` if it already exists.

        Exclusive creation is atomic, so two concurrent ingests never pick the
        same destination.  The move then replaces the placeholder.
        """
        try:
            with destination.open("xb"):
                pass
        except FileExistsError:
            return False
        except OSError as exc:
            raise StorageError(
                f"Failed to reserve {destination}. Check permissions.", cause=exc
            ).with_context(path=str(destination)) from exc
        return True

    def _write_sidecar(self, content_path: Path, size: int) -> StoredArtifact:
        artifact = StoredArtifact(
            slug=content_path.stem,
            path=content_path,
            bytes=size,
            stored_at=utc_now(),
            levels=self.levels,
        )
        sidecar = self.sidecar_path(content_path)
        try:
            atomic_write_text(sidecar, json.dumps(artifact.sidecar(), indent=4))
        except OSError as exc:
            raise StorageError(
                f"Failed to write JSON sidecar to: {sidecar}. Check permissions.", cause=exc
            ).with_context(slug=artifact.slug, path=str(sidecar)) from exc
        return artifact

    # ------------------------------------------------------------------ #
    # Queries / maintenance
    # ------------------------------------------------------------------ #

    def exists(self, slug: str) -> bool:
        return self.locate(slug, create_dirs=False).is_file()

    def metadata(self, slug: str) -> dict[str, Any]:
        """Read the sidecar of a stored artifact.

        Raises:
            NotFoundError: If no sidecar exists for ``slug``
        """
        sidecar = self.sidecar_path(self.locate(slug, create_dirs=False))
        try:
            return json.loads(sidecar.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise NotFoundError(f"No artifact stored for slug {slug!r}").with_context(
                slug=slug, path=str(sidecar)
            ) from exc

    def init(self) -> int:
        """Create the 256 first-level shard directories; returns how many were new."""
        created = 0
        for i in range(256):
            directory = self.root / f"{i:02x}"
            if directory.is_dir():
                continue
            self._ensure_dir(directory)
            created += 1
        logger.info("store_initialized", root=str(self.root), created=created, levels=self.levels)
        return created
