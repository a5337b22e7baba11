"""Run blocking bridge calls off the event loop.

Each native call may perform network I/O of unbounded duration, so the
dispatcher never calls the bridge directly from a coroutine.  It hands
the call to :class:`TaskOffloader`, which runs it on a dedicated worker
thread and serializes calls per handle.  The dispatcher passes the
native boundary as the handle, so every bridge over one library shares
a single lock.

Cancellation is best effort: the awaiting coroutine can stop waiting,
but a native call that has already started runs to completion on its
worker.  No timeouts and no retries are applied here.
"""

from __future__ import annotations

import asyncio
import functools
import weakref
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from loguru import logger

from krfiles.exceptions import KrfilesError, TaskError

T = TypeVar("T")


class TaskOffloader:
    """Executes one bridge operation at a time per handle on worker threads.

    Parameters
    ----------
    max_workers:
        Worker threads in the pool.  One is enough for a single handle;
        more let distinct handles proceed concurrently.

    Usage::

        with TaskOffloader() as offloader:
            text = await offloader.run(bridge.boundary, bridge.list_directory, "/")
    """

    def __init__(self, max_workers: int = 1) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="krfiles-worker",
        )
        self._locks: weakref.WeakKeyDictionary[object, asyncio.Lock] = (
            weakref.WeakKeyDictionary()
        )

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> TaskOffloader:
        return self

    def __exit__(self, *_args: object) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        """Stop accepting work and drop calls that have not started."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self, handle: object, operation: Callable[..., T], *args: Any) -> T:
        """Run ``operation(*args)`` on a worker, exclusive per *handle*.

        Raises
        ------
        KrfilesError
            Whatever the operation raised, unchanged.
        TaskError
            When the worker fails for any other reason, or the wait is
            cancelled.
        """
        name = getattr(operation, "__name__", repr(operation))
        async with self._lock_for(handle):
            loop = asyncio.get_running_loop()
            try:
                return await loop.run_in_executor(
                    self._executor, functools.partial(operation, *args),
                )
            except KrfilesError:
                # Already one of ours — propagate unchanged.
                raise
            except asyncio.CancelledError as exc:
                logger.debug("stopped waiting for {}", name)
                raise TaskError(
                    "Task failed: operation was cancelled.",
                    hint="The remote request may still complete in the background.",
                ) from exc
            except Exception as exc:
                raise TaskError(f"Task failed: {exc}") from exc

    def _lock_for(self, handle: object) -> asyncio.Lock:
        lock = self._locks.get(handle)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[handle] = lock
        return lock
