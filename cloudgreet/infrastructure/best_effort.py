"""Explicit best-effort calls.

Side calls such as stopping a recording or notifying a business owner must
never change how a webhook is answered. They run through ``run_best_effort``,
which logs failures and reports them as a ``BestEffortResult`` instead of
raising.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class BestEffortResult:
    """Result of a best-effort side call."""

    operation: str
    ok: bool
    error: str | None = None
    detail: dict | None = None


async def run_best_effort(
    operation: str,
    call: Callable[[], Awaitable[Any]],
    **log_context: Any,
) -> BestEffortResult:
    """Await ``call`` and convert any failure into a failed result.

    Args:
        operation: Name used in logs and in the result
        call: Zero-argument coroutine factory doing the actual work
        log_context: Extra fields for the log record

    Returns:
        BestEffortResult, ok=False when the call raised
    """
    try:
        detail = await call()
    except Exception as e:
        logger.error(
            f"Best-effort {operation} failed: {type(e).__name__}: {e}",
            extra={"operation": operation, **log_context},
        )
        return BestEffortResult(operation=operation, ok=False, error=str(e) or type(e).__name__)

    return BestEffortResult(
        operation=operation,
        ok=True,
        detail=detail if isinstance(detail, dict) else None,
    )
