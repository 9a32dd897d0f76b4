"""
Batch execution operation.

Normalizes the loose request shapes both transports accept (``cmds`` or a
single ``cmd``, parameters as a mapping or as ``key=value`` text) and hands
them to the :class:`~slotrun.execution.engine.BatchEngine`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl

from slotrun.core.errors import MissingParameterError, SlotrunError
from slotrun.core.logging import get_logger
from slotrun.execution.models import BatchReport
from slotrun.ops.context import OperationContext
from slotrun.ops.requests import RunBatchRequest
from slotrun.ops.result import OperationResult, start_timer
from slotrun.slots.ids import parse_id

logger = get_logger(__name__)


def parse_params(raw: Mapping[str, str] | str | None) -> dict[str, str]:
    """Named parameters from a mapping or from ``key=value`` text.

    Text pairs are separated by newlines or ``&`` and URL-decoded; later
    keys win.

    Examples:
        >>> parse_params("user=admin\\ndebug=1")
        {'user': 'admin', 'debug': '1'}
        >>> parse_params("a=1&b=x%20y")
        {'a': '1', 'b': 'x y'}
    """
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return {str(k): str(v) for k, v in raw.items()}
    query = raw.replace("\r\n", "&").replace("\n", "&")
    return dict(parse_qsl(query, keep_blank_values=True))


def parse_cli_params(args: Iterable[str]) -> dict[str, str]:
    """Named parameters from trailing ``key=value`` CLI arguments.

    Arguments without ``=`` are ignored; key and value are trimmed.
    """
    params: dict[str, str] = {}
    for arg in args:
        if "=" not in arg:
            continue
        key, value = arg.split("=", 1)
        params[key.strip()] = value.strip()
    return params


def _ids_expression(request: RunBatchRequest) -> str:
    if request.ids:
        return request.ids
    if request.slot is not None and parse_id(str(request.slot)) is not None:
        return str(request.slot).strip()
    return ""


def run_batch(ctx: OperationContext, request: RunBatchRequest) -> OperationResult[BatchReport]:
    """Run the slots selected by the request.

    Batch-level failures (missing or invalid set name, unknown set, no usable
    ids) come back as a failed result; per-slot failures live inside the
    report and only add warnings.
    """
    timer = start_timer()

    try:
        if not request.set_name or not request.set_name.strip():
            raise MissingParameterError("Missing required parameter: set")
        report = ctx.engine.run_batch(
            request.set_name,
            _ids_expression(request),
            parse_params(request.params),
        )
    except SlotrunError as exc:
        logger.info("batch_rejected", code=exc.code, error=exc.message, request_id=ctx.request_id)
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to run batch: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )

    warnings = [f"Slot {r.id}: {r.error.message}" for r in report.results if r.error is not None]
    return OperationResult.ok(report, warnings=warnings, elapsed_ms=timer.elapsed_ms)
