"""Library configuration: MonadConfig, init() and get_config()."""

from __future__ import annotations

import os
from dataclasses import dataclass

import psutil

from monadkit._logging import configure_logging, get_logger

__all__ = [
    'MonadConfig',
    'get_config',
    'init',
]

_log = get_logger(__name__)

_MAX_WORKERS = 256


@dataclass(frozen=True)
class MonadConfig:
    """Configuration for monadkit.

    Attributes:
        task_workers: Size of the default thread pool that runs ``Task`` computations.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None leaves logging untouched.
        json_logs: Render logs as JSON (True) or as colored console lines (False).
    """

    task_workers: int = 8
    log_level: str | None = None
    json_logs: bool = True


_config: MonadConfig | None = None


def _detect_task_workers() -> int:
    """Pick a default pool size for Task computations.

    Tasks are mostly I/O bound, so the pool is a few threads wider than the
    logical CPU count. ``MONADKIT_TASK_WORKERS`` overrides the detection.
    """
    env_workers = os.environ.get('MONADKIT_TASK_WORKERS', '')
    if env_workers:
        try:
            return max(1, min(_MAX_WORKERS, int(env_workers)))
        except ValueError:
            _log.warning('invalid MONADKIT_TASK_WORKERS, ignoring', value=env_workers)

    cpus = psutil.cpu_count(logical=True) or 4
    return max(1, min(32, cpus + 4))


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ('0', 'false', 'no', 'off', '')


def init(
    task_workers: int | None = None,
    log_level: str | None = None,
    *,
    json_logs: bool | None = None,
) -> MonadConfig:
    """Initialize monadkit with the given configuration.

    Unset arguments fall back to ``MONADKIT_*`` environment variables and then
    to detected defaults. Calling ``init`` again replaces the configuration and
    the default Task scheduler.

    Args:
        task_workers: Threads in the default Task pool. Auto-detected if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = don't configure logging.
        json_logs: JSON (True) or console (False) log output.

    Returns:
        The MonadConfig that was set.

    Example:
        ```python
        import monadkit

        monadkit.init(task_workers=4, log_level='DEBUG', json_logs=False)
        ```
    """
    global _config  # noqa: PLW0603

    _config = _resolve(task_workers, log_level, json_logs)
    if _config.log_level is not None:
        configure_logging(_config.log_level, json_output=_config.json_logs)

    from monadkit.scheduler import reset_default_scheduler

    reset_default_scheduler()
    return _config


def _resolve(task_workers: int | None, log_level: str | None, json_logs: bool | None) -> MonadConfig:
    if task_workers is None:
        resolved_workers = _detect_task_workers()
    else:
        resolved_workers = max(1, min(_MAX_WORKERS, task_workers))

    if log_level is None:
        log_level = os.environ.get('MONADKIT_LOG_LEVEL') or None

    if json_logs is None:
        json_logs = _env_flag('MONADKIT_JSON_LOGS', True)

    return MonadConfig(
        task_workers=resolved_workers,
        log_level=log_level,
        json_logs=json_logs,
    )


def get_config() -> MonadConfig:
    """Get the current configuration, initializing from the environment if needed.

    Unlike ``init``, the implicit first initialization keeps the default scheduler.
    """
    global _config  # noqa: PLW0603

    if _config is None:
        _config = _resolve(None, None, None)
        if _config.log_level is not None:
            configure_logging(_config.log_level, json_output=_config.json_logs)
    return _config
