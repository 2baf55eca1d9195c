"""Lazy: a deferred computation evaluated at most once.

The computation runs on the thread (or event loop) that first forces it. A
compute-once gate built on ``aiologic.Lock`` makes concurrent first forces
race to a single evaluation whose outcome every caller observes, from threads
and from async code alike.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from types import TracebackType

import aiologic

from monadkit._logging import get_logger
from monadkit.errors import LazyRecursionError
from monadkit.result import Failure, Success

__all__ = ['Lazy', 'LazyState']

_log = get_logger(__name__)


class LazyState(Enum):
    """Evaluation state of a Lazy."""

    UNEVALUATED = 'unevaluated'
    EVALUATING = 'evaluating'
    EVALUATED = 'evaluated'


class Lazy[T]:
    """A lazily evaluated, memoized computation.

    The computation is called at most once, on first ``force()``. Its return
    value is cached and returned directly afterwards; an exception it raises is
    cached too and re-raised on every later force.

    Examples:
        >>> def expensive():
        ...     print("Computing...")
        ...     return 42
        >>>
        >>> lazy = Lazy(expensive)
        >>> lazy.force()  # Prints "Computing..."
        42
        >>> lazy()  # No print, returns cached value
        42
    """

    __slots__ = ('_fn', '_lock', '_outcome', '_owner', '_state', '_traceback')

    def __init__(self, fn: Callable[[], T]) -> None:
        """Create a Lazy value.

        Args:
            fn: Zero-argument computation to run on first force.
        """
        if not callable(fn):
            msg = f'Lazy expects a callable, got {fn!r}'
            raise TypeError(msg)
        self._fn: Callable[[], T] | None = fn
        self._lock = aiologic.Lock()
        self._state = LazyState.UNEVALUATED
        self._owner: int | None = None
        self._outcome: Success[T] | Failure[Exception] | None = None
        self._traceback: TracebackType | None = None

    @property
    def state(self) -> LazyState:
        """Current evaluation state."""
        return self._state

    def is_evaluated(self) -> bool:
        """Check if the computation has run (successfully or not)."""
        return self._state is LazyState.EVALUATED

    def force(self) -> T:
        """Evaluate the computation if needed and return its value.

        Raises:
            LazyRecursionError: If called from inside the computation itself.
            Exception: Whatever the computation raised, on every call.
        """
        self._ensure_evaluated()
        return self._unpack()

    async def force_async(self) -> T:
        """Async version of force.

        The computation itself is synchronous; only waiting for a concurrent
        evaluation is asynchronous.
        """
        if self._state is not LazyState.EVALUATED:
            self._check_recursion()
            async with self._lock:
                if self._state is LazyState.UNEVALUATED:
                    self._evaluate()
        return self._unpack()

    def __call__(self) -> T:
        return self.force()

    def map[U](self, f: Callable[[T], U]) -> Lazy[U]:
        """Return a new Lazy that applies ``f`` to this one's value when forced."""
        return Lazy(lambda: f(self.force()))

    def to_result(self) -> Success[T] | Failure[Exception]:
        """Force and return the outcome as a Result instead of raising."""
        self._ensure_evaluated()
        assert self._outcome is not None
        return self._outcome

    def _ensure_evaluated(self) -> None:
        if self._state is not LazyState.EVALUATED:
            self._check_recursion()
            with self._lock:
                if self._state is LazyState.UNEVALUATED:
                    self._evaluate()

    def _check_recursion(self) -> None:
        if self._state is LazyState.EVALUATING and self._owner == threading.get_ident():
            raise LazyRecursionError

    def _evaluate(self) -> None:
        fn = self._fn
        assert fn is not None
        self._state = LazyState.EVALUATING
        self._owner = threading.get_ident()
        try:
            outcome: Success[T] | Failure[Exception] = Success(fn())
        except Exception as e:
            outcome = Failure(e)
            self._traceback = e.__traceback__
        except BaseException:
            # Interrupts are not cached; the next force tries again.
            self._state = LazyState.UNEVALUATED
            raise
        finally:
            self._owner = None

        self._outcome = outcome
        self._fn = None
        self._state = LazyState.EVALUATED
        _log.debug('lazy evaluated', failed=isinstance(outcome, Failure))

    def _unpack(self) -> T:
        outcome = self._outcome
        if isinstance(outcome, Failure):
            raise outcome.error.with_traceback(self._traceback)
        assert outcome is not None
        return outcome.value

    def __repr__(self) -> str:
        if self._state is LazyState.EVALUATED:
            return f'Lazy({self._outcome!r})'
        return f'Lazy(<{self._state.value}>)'
