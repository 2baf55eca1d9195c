"""monadkit: Result, Maybe, Try, Validated, Lazy and Task for Python 3.13+.

Containers for explicit success/failure handling, with do-notation scopes
that short-circuit on the first failure, deferred and background
computations, and collection helpers.

Flat imports (preferred):
    from monadkit import Success, Failure, Maybe, Some, Nothing, Try
    from monadkit import Do, do, bind, Lazy, Task

Submodule imports (for organization):
    from monadkit.result import Success, Failure, Result
    from monadkit.maybe import Maybe, Some, Nothing
    from monadkit.do import Do, bind

``monadkit.Result`` is the fixed-error factory; the plain type alias
``Success[T] | Failure[E]`` lives at ``monadkit.result.Result``.
"""

# Logging and configuration
from monadkit._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)

# Collections
from monadkit.collection import coerce, sequence, traverse
from monadkit.config import MonadConfig, get_config, init

# Do-notation
from monadkit.do import Do, DoForCall, bind, do, do_for

# Errors
from monadkit.errors import (
    BlockingBindError,
    DoScopeError,
    LazyRecursionError,
    MonadError,
    TaskPendingError,
    TypeMismatchError,
    UnsupportedMonadError,
    UnwrapError,
)

# Fixed-error Result factory
from monadkit.fixed import FixedResult, Result
from monadkit.halt import Halt

# Deferred computations
from monadkit.lazy import Lazy, LazyState

# Containers
from monadkit.maybe import Maybe, Nothing, NothingType, Some, none
from monadkit.result import Failure, Success
from monadkit.scheduler import ImmediateScheduler, Scheduler, TaskGroupScheduler, ThreadScheduler
from monadkit.task import Task, TaskStatus
from monadkit.try_ import Error, Try, Value, attempt
from monadkit.validated import Invalid, Valid

__all__ = [
    'BlockingBindError',
    'Do',
    'DoForCall',
    'DoScopeError',
    'Error',
    'Failure',
    'FixedResult',
    'Halt',
    'ImmediateScheduler',
    'Invalid',
    'Lazy',
    'LazyRecursionError',
    'LazyState',
    'Maybe',
    'MonadConfig',
    'MonadError',
    'Nothing',
    'NothingType',
    'Result',
    'Scheduler',
    'Some',
    'Success',
    'Task',
    'TaskGroupScheduler',
    'TaskPendingError',
    'TaskStatus',
    'ThreadScheduler',
    'Try',
    'TypeMismatchError',
    'UnsupportedMonadError',
    'UnwrapError',
    'Valid',
    'Value',
    'add_log_hook',
    'attempt',
    'bind',
    'clear_log_hooks',
    'coerce',
    'configure_logging',
    'do',
    'do_for',
    'get_config',
    'get_logger',
    'init',
    'none',
    'remove_log_hook',
    'sequence',
    'traverse',
]
