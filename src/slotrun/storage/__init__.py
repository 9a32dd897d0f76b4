"""
Archived artifact storage: the hash-sharded content store and the tabular
output detector that decides what gets archived.
"""

from slotrun.storage.detect import looks_tabular
from slotrun.storage.shard import MAX_INGEST_ATTEMPTS, ShardStore, StoredArtifact, sanitize_slug

__all__ = [
    "MAX_INGEST_ATTEMPTS",
    "ShardStore",
    "StoredArtifact",
    "looks_tabular",
    "sanitize_slug",
]
