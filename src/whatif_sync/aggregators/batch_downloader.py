"""Batch Downloader for running many downloads with aggregate progress."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any, TypeVar

from schemas.progress import ProgressStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BatchDownloader:
    """Runs one task per work item and reports progress as they finish.

    Every item advances the completed count by exactly one when it is
    processed, whether it succeeded or failed. Items finish in any order;
    only the count is ordered.

    Example:
        downloader = BatchDownloader()
        async for status in downloader.run(numbers, fetcher.fetch_article):
            print(f"{status.completed}/{status.total}")
    """

    def __init__(self, max_concurrency: int | None = None):
        """Initialize the batch downloader.

        Args:
            max_concurrency: Upper bound of in-flight items, None for no bound
        """
        self.max_concurrency = max_concurrency

    async def run(
        self,
        items: Sequence[T],
        worker: Callable[[T], Awaitable[Any]],
        describe: Callable[[T], str] = str,
    ) -> AsyncIterator[ProgressStatus]:
        """Process every item and yield progress after each one.

        Args:
            items: Work items, the batch size is fixed at len(items)
            worker: Coroutine function processing one item
            describe: Formats an item for log messages

        Yields:
            ProgressStatus with completed counts 1..len(items)
        """
        total = len(items)
        if total == 0:
            return

        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )

        async def process(item: T) -> None:
            try:
                if semaphore is None:
                    await worker(item)
                else:
                    async with semaphore:
                        await worker(item)
            except Exception as e:
                logger.error(f"Batch item {describe(item)} failed: {e}")

        tasks = [asyncio.create_task(process(item)) for item in items]
        try:
            completed = 0
            for finished in asyncio.as_completed(tasks):
                await finished
                completed += 1
                yield ProgressStatus(completed=completed, total=total)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        logger.debug(f"Batch of {total} items processed")


class ProgressTracker:
    """Follows a progress stream for display.

    status holds the latest progress while the stream runs and goes back to
    None once the stream ends, which hides the progress indicator.
    """

    def __init__(self, on_change: Callable[[ProgressStatus | None], None] | None = None):
        self.status: ProgressStatus | None = None
        self._on_change = on_change

    async def follow(self, stream: AsyncIterator[ProgressStatus]) -> int:
        """Consume a progress stream.

        Returns:
            Number of progress events received
        """
        events = 0
        try:
            async for status in stream:
                events += 1
                self._set(status)
        finally:
            self._set(None)
        return events

    def _set(self, status: ProgressStatus | None) -> None:
        self.status = status
        if self._on_change is not None:
            self._on_change(status)
