"""
Deterministic hashing utilities for shard path derivation.

The content store places every artifact under directories taken from the
hex digest of its slug.  The digest must be stable across processes and
releases, otherwise previously stored artifacts become unreachable.

Manifesto:
    - **Deterministic:** Same slug always produces the same digest
    - **Balanced:** Leading hex pairs of a cryptographic digest spread
      evenly, so directory fan-out stays bounded at 256 per level
    - **Configurable:** ``md5`` (default, matches existing stores) or ``sha256``

Examples:
    >>> len(compute_digest("report_3"))
    32
    >>> shard_parts("f1c5a09e", levels=3)
    ['f1', 'c5', 'a0']

Tags:
    hashing, sharding, slotrun
"""

import hashlib

SUPPORTED_ALGORITHMS = ("md5", "sha256")


def compute_digest(value: str, algorithm: str = "md5") -> str:
    """
    Compute the hex digest of a string.

    Args:
        value: Text to hash (UTF-8 encoded)
        algorithm: ``md5`` or ``sha256``

    Returns:
        Full-length lowercase hex digest

    Raises:
        ValueError: If the algorithm is not supported
    """
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm!r}")
    return hashlib.new(algorithm, value.encode("utf-8")).hexdigest()


def shard_parts(digest: str, levels: int) -> list[str]:
    """Split the leading characters of a digest into two-character directory names.

    Levels the digest is too short for are padded with ``"00"``.
    """
    parts = []
    for i in range(levels):
        chunk = digest[i * 2 : i * 2 + 2]
        parts.append(chunk if len(chunk) == 2 else "00")
    return parts
