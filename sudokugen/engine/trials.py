"""Fork-join helpers for running independent trial solves.

Each trial owns whatever it mutates (usually a private board copy), so the
only shared state is read-only input and no locking is needed. Once a result
is decided the remaining queued trials are cancelled; trials already running
finish in the background without being awaited.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional, TypeVar

from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

T = TypeVar("T")


def any_trial_succeeds(
    trial: Callable[[T], bool],
    items: Iterable[T],
    max_workers: Optional[int] = None,
) -> bool:
    """Return True as soon as ``trial(item)`` is True for one item."""

    pending = list(items)
    if not pending:
        return False
    if max_workers == 1 or len(pending) == 1:
        return any(trial(item) for item in pending)

    executor = ThreadPoolExecutor(max_workers=max_workers or len(pending))
    try:
        futures = [executor.submit(trial, item) for item in pending]
        for done, future in enumerate(as_completed(futures), start=1):
            if future.result():
                LOGGER.debug("Trial succeeded after %d/%d results", done, len(futures))
                return True
        return False
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def all_trials_fail(
    trial: Callable[[T], bool],
    items: Iterable[T],
    max_workers: Optional[int] = None,
) -> bool:
    """Return True when ``trial(item)`` is False for every item."""

    return not any_trial_succeeds(trial, items, max_workers=max_workers)
