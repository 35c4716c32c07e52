"""
Batch orchestration for address lookups.

Every address in a batch is dispatched at once and the batch completes only
when every lookup has succeeded. A single failure fails the whole batch and
no partial results are returned.
"""

import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from .client import LookupClient
from .debug import debug_logger

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Receives one notification per completed lookup. Reports nothing by default."""

    def start(self, total: int):
        pass

    def update(self, completed: int, total: int, ip_address: str):
        pass

    def stop(self):
        pass


class RichProgressReporter(ProgressReporter):
    """Progress bar with percentage, last completed address and elapsed time."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._task_id = None

    def start(self, total: int):
        self._progress = Progress(
            TextColumn("Progress"),
            BarColumn(complete_style="cyan"),
            TaskProgressColumn(),
            TextColumn("IP: {task.fields[ip]}"),
            TextColumn("Duration:"),
            TimeElapsedColumn(),
            console=self.console,
        )
        self._progress.start()
        self._task_id = self._progress.add_task("lookups", total=total, ip="")

    def update(self, completed: int, total: int, ip_address: str):
        if self._progress is not None:
            self._progress.update(self._task_id, completed=completed, ip=ip_address)

    def stop(self):
        if self._progress is not None:
            self._progress.stop()
            self._progress = None


class BatchOrchestrator:
    """Runs one lookup per address concurrently and keeps input order."""

    def __init__(self, client: LookupClient, reporter: Optional[ProgressReporter] = None,
                 max_workers: Optional[int] = None):
        """
        Initialize the orchestrator.

        Args:
            client: Client used for every lookup in the batch
            reporter: Progress sink; defaults to a silent reporter
            max_workers: Cap on simultaneous lookups; None runs every
                address at once
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.client = client
        self.reporter = reporter or ProgressReporter()
        self.max_workers = max_workers

    def run(self, addresses: Iterable[str]) -> List[Dict[str, Any]]:
        """
        Look up every address and return the results in input order.

        Raises:
            LookupFailedError: If any single lookup fails
        """
        return asyncio.run(self.run_async(addresses))

    async def run_async(self, addresses: Iterable[str]) -> List[Dict[str, Any]]:
        """Coroutine form of :meth:`run`."""
        addresses = list(addresses)
        if not addresses:
            return []

        total = len(addresses)
        workers = min(self.max_workers, total) if self.max_workers else total
        loop = asyncio.get_running_loop()
        slots = asyncio.Semaphore(workers)
        completed = 0

        async def lookup_one(index: int, ip_address: str) -> Dict[str, Any]:
            nonlocal completed
            async with slots:
                result = await run_in_daemon_thread(
                    loop, self.client.lookup, ip_address, name=f"ipbatch-lookup-{index}")
            # Runs on the event loop thread, so the counter needs no lock
            completed += 1
            self.reporter.update(completed, total, ip_address)
            return result

        debug_logger.log_batch_start(total, workers)
        start_time = time.time()
        self.reporter.start(total)
        tasks = [asyncio.ensure_future(lookup_one(index, ip)) for index, ip in enumerate(addresses)]
        try:
            results = await asyncio.gather(*tasks)
        finally:
            self.reporter.stop()
            # Cancel lookups still waiting for a slot
            for task in tasks:
                task.cancel()

        filtered = [result for result in results if isinstance(result, dict) and result]
        debug_logger.log_batch_complete(total, len(filtered), time.time() - start_time)
        logger.debug(f"Batch finished: {len(filtered)} of {total} results kept")
        return filtered


def run_in_daemon_thread(loop: asyncio.AbstractEventLoop, func: Callable[..., Any], *args,
                         name: Optional[str] = None) -> "asyncio.Future[Any]":
    """
    Call ``func(*args)`` on a new daemon thread.

    Daemon threads are not joined when the interpreter exits, so a failed
    batch ends the process without waiting for lookups still in flight.

    Returns:
        A future on ``loop`` resolved with the call's result or exception
    """
    future = loop.create_future()

    def resolve(result, error):
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def target():
        result, error = None, None
        try:
            result = func(*args)
        except Exception as e:
            error = e
        try:
            loop.call_soon_threadsafe(resolve, result, error)
        except RuntimeError:
            # Loop already closed after the batch failed
            logger.debug(f"Dropped late result from {threading.current_thread().name}")

    threading.Thread(target=target, name=name, daemon=True).start()
    return future
