# snapintent/core/stages.py
"""
Result types for best-effort pipeline stages.

An optional stage either produced a value (`Ok`) or was skipped/failed and the pipeline
continues without it (`Degraded`). Callers branch on the two cases with isinstance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from snapintent.core.errors import SnapIntentError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Degraded:
    reason: str
    error: BaseException | None = None


StageResult = Union[Ok[T], Degraded]


def run_best_effort(
    stage: str,
    fn: Callable[..., T],
    *args: object,
    logger: logging.Logger,
    expected: tuple[type[BaseException], ...] = (SnapIntentError,),
) -> StageResult[T]:
    """
    Run `fn(*args)`; wrap the return value in Ok, or log and return Degraded.

    Only `expected` exception types are absorbed. Anything else is a programming error
    and propagates.
    """
    try:
        return Ok(fn(*args))
    except expected as exc:
        logger.warning("stage %s degraded: %s", stage, exc)
        return Degraded(reason=str(exc), error=exc)


def skipped(reason: str) -> Degraded:
    return Degraded(reason=reason)


__all__ = ["Ok", "Degraded", "StageResult", "run_best_effort", "skipped"]
