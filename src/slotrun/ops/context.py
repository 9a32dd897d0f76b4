"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument.  The context carries the collaborators an operation needs (set
repository, content store, batch engine), the caller, the dry-run flag and
arbitrary metadata.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from slotrun.core.settings import RuntimeSettings
from slotrun.execution.engine import BatchEngine
from slotrun.execution.strategy import build_strategy
from slotrun.slots.repository import InstructionSetRepository
from slotrun.storage.shard import ShardStore


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        repository: Instruction-set repository.
        store: Sharded content store.
        engine: Batch execution engine bound to ``repository`` and ``store``.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request: ``"api"``, ``"cli"`` or ``"sdk"``.
        dry_run: When ``True``, mutating operations report what they would do.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    repository: InstructionSetRepository
    store: ShardStore
    engine: BatchEngine
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    dry_run: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: RuntimeSettings,
        *,
        caller: str = "sdk",
        dry_run: bool = False,
        request_id: str | None = None,
    ) -> OperationContext:
        repository = InstructionSetRepository(settings.sets_dir)
        store = ShardStore.from_settings(settings)
        engine = BatchEngine(
            repository,
            build_strategy(settings.execution_strategy, timeout=settings.slot_timeout),
            store,
            archive_enabled=settings.archive_enabled,
        )
        ctx = cls(repository=repository, store=store, engine=engine, caller=caller, dry_run=dry_run)
        if request_id:
            ctx.request_id = request_id
        return ctx
