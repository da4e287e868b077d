"""
Partial-failure batch helpers.

Background jobs (lifecycle check, bulk email) process items independently:
one item's failure is recorded and the rest carry on.

Usage:
    batch = await map_with_partial_failure(
        riders, send_email, describe=lambda r: r.email
    )
    batch.succeeded   # values returned by send_email
    batch.failed      # [BatchFailure(item, error)]
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Iterable, TypeVar

from .errors import DomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class BatchFailure(Generic[T]):
    item: T
    error: str


@dataclass
class BatchResult(Generic[T, R]):
    succeeded: list[R] = field(default_factory=list)
    failed: list[BatchFailure[T]] = field(default_factory=list)

    @property
    def error_messages(self) -> list[str]:
        return [f.error for f in self.failed]

    @property
    def ok(self) -> bool:
        return not self.failed


async def map_with_partial_failure(
    items: Iterable[T],
    fn: Callable[[T], Awaitable[R]],
    describe: Callable[[T], str] = str,
) -> BatchResult[T, R]:
    """
    Apply `fn` to each item, collecting results and failures.

    Args:
        items: Items to process, in order
        fn: Async callable applied to one item
        describe: Renders an item for error messages

    Returns:
        BatchResult with succeeded values and per-item failures
    """
    batch: BatchResult[T, R] = BatchResult()
    for item in items:
        try:
            batch.succeeded.append(await fn(item))
        except DomainError as e:
            batch.failed.append(BatchFailure(item, f"{describe(item)}: {e.message}"))
        except Exception as e:
            logger.warning("Batch item %s failed: %s", describe(item), e)
            batch.failed.append(BatchFailure(item, f"{describe(item)}: {e}"))
    return batch
