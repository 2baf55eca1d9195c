"""Tests for Task and the schedulers that run it."""

import threading

import anyio
import pytest
from monadkit import (
    Failure,
    ImmediateScheduler,
    Nothing,
    Scheduler,
    Some,
    Success,
    Task,
    TaskGroupScheduler,
    TaskPendingError,
    TaskStatus,
    ThreadScheduler,
)
from monadkit.scheduler import get_default_scheduler


class TestOutcome:
    """Tests for the Result a Task resolves to."""

    def test_success(self, immediate):
        assert Task(lambda: 42, scheduler=immediate).wait() == Success(42)

    def test_failure_captures_exception(self, immediate):
        exc = ValueError('boom')

        def fail():
            raise exc

        task = Task(fail, scheduler=immediate)
        assert task.wait() == Failure(exc)
        assert task.status is TaskStatus.FAILED

    def test_arguments(self, immediate):
        task = Task(lambda a, b, *, c: a + b + c, 1, 2, c=3, scheduler=immediate)
        assert task.wait() == Success(6)

    def test_coroutine_function(self, threads):
        async def compute(x):
            await anyio.sleep(0)
            return x * 2

        assert Task(compute, 21, scheduler=threads).wait(timeout=5) == Success(42)

    def test_pure(self):
        task = Task.pure('ready')
        assert task.is_complete()
        assert task.wait(timeout=0) == Success('ready')

    def test_rejects_non_callable(self, immediate):
        with pytest.raises(TypeError):
            Task(42, scheduler=immediate)  # type: ignore[arg-type]

    def test_to_result_fold_value_or(self, immediate):
        ok = Task(lambda: 2, scheduler=immediate)
        bad = Task(lambda: 1 / 0, scheduler=immediate)
        assert ok.to_result() == Success(2)
        assert ok.fold(lambda e: 'error', lambda v: v * 10) == 20
        assert bad.fold(lambda e: type(e).__name__, lambda v: v) == 'ZeroDivisionError'
        assert bad.value_or(-1) == -1


class TestObservation:
    """Tests for poll, status and timeouts."""

    def test_runs_eagerly(self, threads):
        """The computation starts at construction, not when observed."""
        started = threading.Event()
        Task(started.set, scheduler=threads)
        assert started.wait(timeout=5)

    def test_poll_and_status_while_pending(self, threads):
        release = threading.Event()
        task = Task(lambda: release.wait(timeout=5) and 'done', scheduler=threads)

        assert task.poll() is Nothing
        assert task.status is TaskStatus.PENDING
        assert not task.is_complete()
        assert repr(task) == 'Task(<pending>)'

        release.set()
        assert task.wait(timeout=5) == Success('done')
        assert task.poll() == Some(Success('done'))
        assert task.status is TaskStatus.SUCCEEDED

    def test_wait_timeout(self, threads):
        release = threading.Event()
        task = Task(release.wait, 5, scheduler=threads)

        with pytest.raises(TaskPendingError) as exc_info:
            task.wait(timeout=0.05)
        assert exc_info.value.timeout == 0.05
        assert isinstance(exc_info.value, TimeoutError)

        release.set()
        assert task.wait(timeout=5) == Success(True)

    def test_outcome_is_stable(self, threads):
        task = Task(lambda: object(), scheduler=threads)
        first = task.wait(timeout=5)
        assert task.wait(timeout=5) is first

    async def test_await(self, threads):
        task = Task(lambda: 'awaited', scheduler=threads)
        assert await task == Success('awaited')

    def test_default_scheduler(self):
        task = Task(lambda: 'default')
        assert task.wait(timeout=5) == Success('default')
        assert isinstance(get_default_scheduler(), ThreadScheduler)


class TestComposition:
    """Tests for map and bind."""

    def test_map(self, immediate):
        assert Task(lambda: 2, scheduler=immediate).map(lambda x: x + 1).wait() == Success(3)

    def test_map_failure_skips_function(self, immediate):
        calls = []
        exc = RuntimeError('x')

        def fail():
            raise exc

        mapped = Task(fail, scheduler=immediate).map(calls.append)
        assert mapped.wait() == Failure(exc)
        assert calls == []

    def test_map_raising_function(self, immediate):
        mapped = Task(lambda: 0, scheduler=immediate).map(lambda x: 1 / x)
        outcome = mapped.wait()
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, ZeroDivisionError)

    def test_map_chain_on_threads(self, threads):
        task = Task(lambda: 1, scheduler=threads)
        for _ in range(5):
            task = task.map(lambda x: x * 2)
        assert task.wait(timeout=5) == Success(32)

    def test_map_before_completion(self, threads):
        """Continuations registered while pending run once the task finishes."""
        release = threading.Event()
        source = Task(lambda: release.wait(timeout=5) and 10, scheduler=threads)
        mapped = source.map(lambda x: x + 1)
        assert mapped.poll() is Nothing
        release.set()
        assert mapped.wait(timeout=5) == Success(11)

    def test_bind(self, threads):
        task = Task(lambda: 3, scheduler=threads).bind(lambda x: Task(lambda: x * x, scheduler=threads))
        assert task.wait(timeout=5) == Success(9)

    def test_bind_failure(self, immediate):
        exc = KeyError('missing')

        def fail():
            raise exc

        bound = Task(lambda: 1, scheduler=immediate).bind(lambda _: Task(fail, scheduler=immediate))
        assert bound.wait() == Failure(exc)

    def test_bind_raising_function(self, immediate):
        def explode(_):
            msg = 'no task'
            raise RuntimeError(msg)

        outcome = Task(lambda: 1, scheduler=immediate).bind(explode).wait()
        assert isinstance(outcome.error, RuntimeError)


class TestSchedulers:
    """Tests for the scheduler implementations."""

    def test_protocol(self, immediate, threads):
        assert isinstance(immediate, Scheduler)
        assert isinstance(threads, Scheduler)

    def test_immediate_runs_inline(self):
        caller = threading.get_ident()
        task = Task(threading.get_ident, scheduler=ImmediateScheduler())
        assert task.is_complete()
        assert task.wait() == Success(caller)

    def test_thread_scheduler_runs_off_thread(self, threads):
        caller = threading.get_ident()
        outcome = Task(threading.get_ident, scheduler=threads).wait(timeout=5)
        assert outcome.value != caller

    async def test_task_group_scheduler(self):
        async def fetch(x):
            await anyio.sleep(0.01)
            return x + 1

        async with anyio.create_task_group() as tg:
            scheduler = TaskGroupScheduler(tg, max_workers=2)
            async_task = Task(fetch, 1, scheduler=scheduler)
            sync_task = Task(lambda: 'sync', scheduler=scheduler)
            assert await async_task == Success(2)
            assert await sync_task == Success('sync')

    async def test_task_group_scheduler_failure(self):
        async def fail():
            msg = 'async failure'
            raise ValueError(msg)

        async with anyio.create_task_group() as tg:
            task = Task(fail, scheduler=TaskGroupScheduler(tg))
            outcome = await task

        assert isinstance(outcome.error, ValueError)
        assert task.status is TaskStatus.FAILED


class TestContinuationFailures:
    """Tests for continuations that can't proceed normally."""

    def test_bind_to_non_task_fails_child(self, threads):
        """A bind function returning a plain Result fails the child instead of hanging."""
        outcome = Task(lambda: 1, scheduler=threads).bind(lambda x: Success(x)).wait(timeout=5)
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, TypeError)

    def test_bind_to_non_task_inline(self, immediate):
        outcome = Task(lambda: 1, scheduler=immediate).bind(lambda x: Success(x)).wait()
        assert isinstance(outcome.error, TypeError)

    def test_map_after_shutdown_fails_child(self):
        scheduler = ThreadScheduler(max_workers=1)
        source = Task(lambda: 1, scheduler=scheduler)
        assert source.wait(timeout=5) == Success(1)
        scheduler.shutdown()

        outcome = source.map(lambda x: x + 1).wait(timeout=5)
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, RuntimeError)

    def test_raising_continuation_does_not_skip_others(self, threads):
        release = threading.Event()
        source = Task(release.wait, 5, scheduler=threads)

        def broken(outcome):
            msg = 'continuation bug'
            raise RuntimeError(msg)

        source._on_complete(broken)
        mapped = source.map(lambda _: 'after')
        release.set()
        assert mapped.wait(timeout=5) == Success('after')
