"""Task: a computation scheduled in the background, resolving to a Result.

A Task is "Result, computed asynchronously". Construction hands the
computation to a scheduler right away; the Task handle is then used only to
observe the outcome:

    ```python
    task = Task(fetch_user, 42)
    task.poll()          # Nothing while running, Some(Success(...)) when done
    task.wait()          # blocks: Success(user) or Failure(exception)
    await task           # same, from async code
    ```
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from enum import Enum
from typing import Any

import aiologic
import anyio

from monadkit._logging import get_logger
from monadkit.errors import TaskPendingError
from monadkit.maybe import Nothing, NothingType, Some
from monadkit.result import Failure, Success
from monadkit.scheduler import Scheduler, get_default_scheduler

__all__ = ['Task', 'TaskStatus']

_log = get_logger(__name__)

type Outcome[T] = Success[T] | Failure[BaseException]


class TaskStatus(Enum):
    """Observable state of a Task."""

    PENDING = 'pending'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


class Task[T]:
    """Handle to a computation running on a scheduler.

    Attributes:
        _computation: Zero-argument callable bound to the task's arguments.
        _scheduler: The scheduler the computation was handed to.
        _event: Event signaling completion (usable from threads and async code).
        _outcome: Success(value) or Failure(exception) once completed.
        _callbacks: Continuations registered by map/bind before completion.
    """

    __slots__ = ('_callbacks', '_computation', '_event', '_lock', '_outcome', '_scheduler')

    def __init__(
        self,
        fn: Callable[..., T],
        /,
        *args: Any,
        scheduler: Scheduler | None = None,
        **kwargs: Any,
    ) -> None:
        """Create a Task and schedule it immediately.

        Args:
            fn: Sync or async callable to run.
            *args: Positional arguments for fn.
            scheduler: Where to run it. Defaults to the process-wide thread pool.
            **kwargs: Keyword arguments for fn.
        """
        if not callable(fn):
            msg = f'Task expects a callable, got {fn!r}'
            raise TypeError(msg)
        self._init_state(scheduler)
        self._computation = functools.partial(fn, *args, **kwargs)
        _log.debug('task scheduled', fn=getattr(fn, '__qualname__', repr(fn)))
        self._scheduler.schedule(self)

    def _init_state(self, scheduler: Scheduler | None) -> None:
        if scheduler is None:
            scheduler = get_default_scheduler()
        self._scheduler: Scheduler = scheduler
        self._computation: Callable[[], Any] | None = None
        self._outcome: Outcome[T] | None = None
        self._callbacks: list[Callable[[Outcome[T]], None]] = []
        self._lock = aiologic.Lock()
        self._event = aiologic.Event()

    @classmethod
    def _pending(cls, scheduler: Scheduler | None) -> Task[Any]:
        """Create an unscheduled Task that something else will complete."""
        task = cls.__new__(cls)
        task._init_state(scheduler)
        return task

    @classmethod
    def pure(cls, value: T, *, scheduler: Scheduler | None = None) -> Task[T]:
        """Create an already completed Task holding ``Success(value)``."""
        task = cls._pending(scheduler)
        task._complete(Success(value))
        return task

    # --- execution (called by schedulers) ---

    def _run(self) -> None:
        """Run the computation on the current thread and record the outcome."""
        fn = self._computation
        assert fn is not None
        try:
            if inspect.iscoroutinefunction(fn):
                value = anyio.run(fn)
            else:
                value = fn()
        except Exception as e:
            self._complete(Failure(e))
        except BaseException as e:
            self._complete(Failure(e))
            raise
        else:
            self._complete(Success(value))

    async def _run_async(self, limiter: anyio.CapacityLimiter | None = None) -> None:
        """Run the computation on the current event loop and record the outcome."""
        fn = self._computation
        assert fn is not None
        try:
            if inspect.iscoroutinefunction(fn):
                value = await fn()
            else:
                value = await anyio.to_thread.run_sync(fn, limiter=limiter)
        except Exception as e:
            self._complete(Failure(e))
        except BaseException as e:
            self._complete(Failure(e))
            raise
        else:
            self._complete(Success(value))

    def _complete(self, outcome: Outcome[T]) -> None:
        with self._lock:
            if self._outcome is not None:
                return
            self._outcome = outcome
            callbacks, self._callbacks = self._callbacks, []
        self._event.set()
        if isinstance(outcome, Failure):
            _log.debug('task failed', error=repr(outcome.error))
        else:
            _log.debug('task succeeded')
        for callback in callbacks:
            try:
                callback(outcome)
            except Exception:
                # Later continuations still run.
                _log.exception('task continuation failed')

    def _on_complete(self, callback: Callable[[Outcome[T]], None]) -> None:
        with self._lock:
            if self._outcome is None:
                self._callbacks.append(callback)
                return
            outcome = self._outcome
        callback(outcome)

    # --- observation ---

    @property
    def status(self) -> TaskStatus:
        """PENDING, SUCCEEDED or FAILED."""
        outcome = self._outcome
        if outcome is None:
            return TaskStatus.PENDING
        if isinstance(outcome, Failure):
            return TaskStatus.FAILED
        return TaskStatus.SUCCEEDED

    def is_complete(self) -> bool:
        """Check if the task has finished, successfully or not."""
        return self._outcome is not None

    def poll(self) -> Some[Outcome[T]] | NothingType:
        """Non-blocking check: Nothing while pending, Some(outcome) when done."""
        outcome = self._outcome
        if outcome is None:
            return Nothing
        return Some(outcome)

    def wait(self, timeout: float | None = None) -> Outcome[T]:
        """Block until the task completes and return its outcome.

        Args:
            timeout: Maximum seconds to wait. None waits forever.

        Returns:
            Success(value), or Failure(exception) if the computation raised.

        Raises:
            TaskPendingError: If the timeout elapsed first.
        """
        if self._outcome is None and not self._event.wait(timeout):
            raise TaskPendingError(timeout)
        assert self._outcome is not None
        return self._outcome

    async def wait_async(self) -> Outcome[T]:
        """Wait for completion without blocking the event loop."""
        await self._event
        assert self._outcome is not None
        return self._outcome

    def __await__(self) -> Any:
        """Support await syntax."""
        return self.wait_async().__await__()

    def to_result(self) -> Outcome[T]:
        """Alias for ``wait()``."""
        return self.wait()

    # --- composition ---

    def map[U](self, f: Callable[[T], U]) -> Task[U]:
        """Return a Task that applies ``f`` to this task's value.

        ``f`` runs on this task's scheduler once this task succeeds; a failure
        passes through without calling ``f``. No thread is blocked waiting.
        """
        child: Task[U] = Task._pending(self._scheduler)

        def continuation(outcome: Outcome[T]) -> None:
            if isinstance(outcome, Failure):
                child._complete(outcome)
                return
            child._computation = functools.partial(f, outcome.value)
            try:
                child._scheduler.schedule(child)
            except Exception as e:
                child._complete(Failure(e))

        self._on_complete(continuation)
        return child

    def bind[U](self, f: Callable[[T], Task[U]]) -> Task[U]:
        """Return a Task that continues with the Task ``f`` returns.

        If ``f`` raises, or returns something other than a Task, the returned
        Task fails with that exception.
        """
        child: Task[U] = Task._pending(self._scheduler)

        def continuation(outcome: Outcome[T]) -> None:
            if isinstance(outcome, Failure):
                child._complete(outcome)
                return
            try:
                inner = f(outcome.value)
                if not isinstance(inner, Task):
                    msg = f'Task.bind expects a function returning a Task, got {inner!r}'
                    raise TypeError(msg)
            except Exception as e:
                child._complete(Failure(e))
                return
            inner._on_complete(child._complete)

        self._on_complete(continuation)
        return child

    def fold[U](self, on_failure: Callable[[BaseException], U], on_success: Callable[[T], U]) -> U:
        """Wait, then eliminate the outcome with one of the two functions."""
        return self.wait().fold(on_failure, on_success)

    def value_or(self, default: T) -> T:
        """Wait, then return the value or ``default`` on failure."""
        return self.wait().value_or(default)

    def __repr__(self) -> str:
        outcome = self._outcome
        if outcome is None:
            return 'Task(<pending>)'
        return f'Task({outcome!r})'

