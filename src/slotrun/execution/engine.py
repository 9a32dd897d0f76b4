"""
Batch Execution Engine.

Resolves an identifier expression against one instruction set and runs
every requested slot independently, collecting one :class:`SlotResult`
per id.

Manifesto:
    - **Fail fast at batch level:** Bad set name, unknown set and an empty
      id expression abort before anything runs, each with its own code
    - **Contain everything else:** Unknown slots, fragment faults, timeouts
      and archive failures stay local to their own result
    - **Uniform results:** Failed or not, every result has the same shape
    - **No shared state:** Parameters and diagnostics are scoped to one call

Architecture:
    ::

        run_batch(set, "0,2-4", params)
            │
            ├── normalize_set_name ──► INVALID_SET_NAME
            ├── repository.read ─────► SET_NOT_FOUND   (set read once)
            ├── resolve_ids ─────────► INVALID_IDS
            │
            └── for each id (ascending)
                  extract_slot ──────► SLOT_NOT_FOUND
                  strategy.execute ──► EXECUTION_FAULT / TIMEOUT
                  looks_tabular?
                     └── store.store ► archive | warning diagnostic
                  SlotResult

Examples:
    >>> engine = BatchEngine.from_settings(RuntimeSettings())
    >>> report = engine.run_batch("reports", "0,2-3", {"region": "emea"})
    >>> [r.id for r in report.results]
    [0, 2, 3]

Tags:
    execution, batch, engine, fault-isolation, slotrun
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import PurePath
from typing import Any

from slotrun.core.errors import ErrorCategory, InvalidIdentifiersError, SlotrunError
from slotrun.core.logging import LogContext, get_logger
from slotrun.core.timestamps import slug_stamp, utc_now
from slotrun.execution.models import (
    INTERNAL,
    SLOT_NOT_FOUND,
    ArchiveInfo,
    BatchReport,
    Diagnostic,
    SlotFailure,
    SlotResult,
)
from slotrun.execution.strategy import ExecutionStrategy, build_strategy
from slotrun.slots.document import extract_slot
from slotrun.slots.ids import resolve_ids
from slotrun.slots.repository import InstructionSetRepository, normalize_set_name
from slotrun.storage.detect import looks_tabular
from slotrun.storage.shard import ShardStore

logger = get_logger(__name__)


def archive_slug(set_name: str, slot_id: int, when: datetime) -> str:
    """``<set stem>_<slot id>_<YYYYmmdd_HHMMSS_ffffff>``."""
    return f"{PurePath(set_name).stem}_{slot_id}_{slug_stamp(when)}"


class BatchEngine:
    """Runs batches of slots from an instruction-set repository.

    Args:
        repository: Where instruction sets are read from
        strategy: How fragment source is executed
        store: Where tabular output is archived; ``None`` disables archiving
            with a warning diagnostic on every result that would have archived
        archive_enabled: Turn archiving off entirely (no diagnostics)
        clock: Source of "now", patched in tests
    """

    def __init__(
        self,
        repository: InstructionSetRepository,
        strategy: ExecutionStrategy,
        store: ShardStore | None = None,
        *,
        archive_enabled: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.strategy = strategy
        self.store = store
        self.archive_enabled = archive_enabled
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Any) -> BatchEngine:
        return cls(
            InstructionSetRepository(settings.sets_dir),
            build_strategy(settings.execution_strategy, timeout=settings.slot_timeout),
            ShardStore.from_settings(settings),
            archive_enabled=settings.archive_enabled,
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def run_batch(
        self,
        set_name: str,
        ids_expression: str,
        params: Mapping[str, str] | None = None,
    ) -> BatchReport:
        """Run every slot selected by ``ids_expression``.

        Raises:
            InvalidSetNameError: Unusable set name
            SetNotFoundError: The set does not exist
            InvalidIdentifiersError: The expression selects no ids
        """
        name = normalize_set_name(set_name)
        text = self.repository.read(name)
        ids = resolve_ids(ids_expression)
        if not ids:
            raise InvalidIdentifiersError("No valid command numbers specified.").with_context(
                set_name=name, expression=ids_expression
            )

        ran_at = self.clock()
        call_params = dict(params or {})
        logger.info("batch_started", set=name, ids=len(ids), strategy=self.strategy.name)

        results = tuple(self._run_one(name, text, slot_id, call_params) for slot_id in ids)

        failed = sum(1 for r in results if not r.ok)
        logger.info("batch_completed", set=name, ids=len(ids), failed=failed)
        return BatchReport(set=name, ran_at=ran_at, results=results)

    def run_slot(self, set_name: str, slot_id: int, params: Mapping[str, str] | None = None) -> SlotResult:
        """Run a single slot; batch-level validation still applies to the set."""
        name = normalize_set_name(set_name)
        text = self.repository.read(name)
        return self._run_one(name, text, slot_id, dict(params or {}))

    # ------------------------------------------------------------------ #
    # Per-slot pipeline
    # ------------------------------------------------------------------ #

    def _run_one(self, name: str, text: str, slot_id: int, params: dict[str, str]) -> SlotResult:
        with LogContext(set=name, slot=slot_id):
            try:
                return self._execute_slot(name, text, slot_id, params)
            except Exception as exc:
                logger.exception("slot_internal_error")
                return SlotResult(
                    id=slot_id,
                    error=SlotFailure(
                        code=INTERNAL,
                        category=ErrorCategory.INTERNAL.value,
                        message=str(exc),
                        exception_type=type(exc).__name__,
                    ),
                )

    def _execute_slot(self, name: str, text: str, slot_id: int, params: dict[str, str]) -> SlotResult:
        code = extract_slot(text, slot_id)
        if code is None:
            logger.info("slot_not_found")
            return SlotResult(
                id=slot_id,
                error=SlotFailure(
                    code=SLOT_NOT_FOUND,
                    category=ErrorCategory.NOT_FOUND.value,
                    message=f"Slot {slot_id} not found in set '{name}'",
                ),
            )

        outcome = self.strategy.execute(code, params, filename=f"<{name}:{slot_id}>")
        diagnostics = list(outcome.diagnostics)

        if outcome.fault is not None:
            logger.info("slot_failed", code=outcome.fault.code, exception_type=outcome.fault.exception_type)
            return SlotResult(
                id=slot_id,
                error=SlotFailure.from_fault(outcome.fault),
                diagnostics=tuple(diagnostics),
            )

        output = outcome.text
        archive = None
        if looks_tabular(output):
            archive = self._archive(output, name, slot_id, diagnostics)

        logger.info("slot_executed", bytes=len(output), archived=archive is not None)
        return SlotResult(id=slot_id, output=output, archive=archive, diagnostics=tuple(diagnostics))

    def _archive(self, output: str, name: str, slot_id: int, diagnostics: list[Diagnostic]) -> ArchiveInfo | None:
        if not self.archive_enabled:
            return None
        if self.store is None:
            diagnostics.append(
                Diagnostic(kind="warning", message="Content store not available. Cannot archive tabular output.")
            )
            return None

        slug = archive_slug(name, slot_id, self.clock())
        try:
            artifact = self.store.store(output, slug)
        except (SlotrunError, OSError) as exc:
            message = getattr(exc, "message", str(exc))
            logger.warning("archive_failed", slug=slug, error=message)
            diagnostics.append(
                Diagnostic(
                    kind="warning",
                    message=f"Failed to archive output for slot {slot_id}: {message}",
                    category=getattr(exc, "code", type(exc).__name__),
                )
            )
            return None

        return ArchiveInfo(slug=artifact.slug, path=str(artifact.path), bytes=artifact.bytes)
