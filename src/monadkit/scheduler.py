"""Schedulers that run Task computations.

A scheduler owns execution; a ``Task`` only hands itself over once and then
observes the outcome. Implementations:

- ThreadScheduler: a thread pool (the process-wide default).
- ImmediateScheduler: runs the computation inline on the calling thread.
- TaskGroupScheduler: an anyio task group, for async applications.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import anyio

from monadkit._logging import get_logger
from monadkit.lazy import Lazy

if TYPE_CHECKING:
    from anyio.abc import TaskGroup

    from monadkit.task import Task

__all__ = [
    'ImmediateScheduler',
    'Scheduler',
    'TaskGroupScheduler',
    'ThreadScheduler',
    'get_default_scheduler',
    'reset_default_scheduler',
]

_log = get_logger(__name__)


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for Task schedulers.

    ``schedule`` must arrange for exactly one call of ``task._run()`` (on any
    thread) or one await of ``task._run_async()`` (on an event loop). It must
    not block until the computation finishes, except for schedulers that are
    inline by design.
    """

    def schedule(self, task: Task[Any]) -> None:
        """Hand a task over for execution."""
        ...


class ImmediateScheduler:
    """Run each computation inline, on the thread that creates the Task."""

    __slots__ = ()

    def schedule(self, task: Task[Any]) -> None:
        task._run()


class ThreadScheduler:
    """Run computations on a thread pool.

    Coroutine functions are run to completion with ``anyio.run`` on the worker
    thread.

    Attributes:
        max_workers: Size of the pool.
    """

    __slots__ = ('_executor', 'max_workers')

    def __init__(self, max_workers: int | None = None) -> None:
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix='monadkit-task',
        )

    def schedule(self, task: Task[Any]) -> None:
        self._executor.submit(task._run)

    def shutdown(self, *, wait: bool = True) -> None:
        """Stop accepting tasks; with ``wait`` block until queued tasks finish."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> ThreadScheduler:
        return self

    def __exit__(self, *_: object) -> None:
        self.shutdown(wait=True)


class TaskGroupScheduler:
    """Run computations in an anyio task group.

    Coroutine functions run directly in the group; sync functions go to a
    worker thread via ``anyio.to_thread.run_sync``, optionally bounded by a
    capacity limiter. Tasks must be created on the event loop thread that owns
    the group.

    Example:
        ```python
        async with anyio.create_task_group() as tg:
            scheduler = TaskGroupScheduler(tg)
            task = Task(fetch_user, 42, scheduler=scheduler)
            result = await task
        ```
    """

    __slots__ = ('_limiter', '_task_group')

    def __init__(self, task_group: TaskGroup, max_workers: int | None = None) -> None:
        self._task_group = task_group
        self._limiter: anyio.CapacityLimiter | None = anyio.CapacityLimiter(max_workers) if max_workers else None

    def schedule(self, task: Task[Any]) -> None:
        self._task_group.start_soon(task._run_async, self._limiter)


def _make_default_scheduler() -> ThreadScheduler:
    from monadkit.config import get_config

    workers = get_config().task_workers
    _log.debug('default task scheduler created', max_workers=workers)
    return ThreadScheduler(workers)


_default: Lazy[ThreadScheduler] = Lazy(_make_default_scheduler)


def get_default_scheduler() -> ThreadScheduler:
    """Return the process-wide thread scheduler, creating it on first use."""
    return _default.force()


def reset_default_scheduler() -> None:
    """Replace the default scheduler; the old pool finishes its queued work."""
    global _default  # noqa: PLW0603

    old = _default
    _default = Lazy(_make_default_scheduler)
    if old.is_evaluated():
        old.force().shutdown(wait=False)
