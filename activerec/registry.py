"""Process-wide registry of the logger, configuration, metrics and caches."""

from __future__ import annotations

import inspect
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .cluster import ConfigCacher, ServerMode, ShardInstance
from .config import DefaultConfig
from .connection import ConnectionPool
from .logger import DefaultLogger
from .metrics import NoopMetric


class RegistryError(RuntimeError):
    """Raised when the registry is used before initialisation or initialised twice."""


@dataclass
class ActiveRecord:
    """Shared services used by all models."""

    instance_creator: str
    config: Any
    logger: Any
    metric: Any
    connection_cacher: Any
    config_cacher: Any
    pinger: Any = None


_instance: Optional[ActiveRecord] = None
_create_lock = threading.Lock()


def _caller(depth: int) -> str:
    frame = inspect.currentframe()
    for _ in range(depth):
        if frame is None:
            break
        frame = frame.f_back
    if frame is None:
        return "unknown_caller"
    return f"{frame.f_code.co_filename}:{frame.f_lineno} "


def _initialise(
    caller: str,
    logger: Any,
    config: Any,
    metric: Any,
    pinger: Any,
) -> ActiveRecord:
    global _instance

    with _create_lock:
        if _instance is not None:
            raise RegistryError(
                f"can't initialise twice, first from `{_instance.instance_creator}`"
            )

        log = logger if logger is not None else DefaultLogger()
        cfg = config if config is not None else DefaultConfig(logger=log)
        _instance = ActiveRecord(
            instance_creator=caller,
            config=cfg,
            logger=log,
            metric=metric if metric is not None else NoopMetric(),
            connection_cacher=ConnectionPool(log),
            config_cacher=ConfigCacher(lambda: get_instance().config),
            pinger=pinger,
        )
        return _instance


def init_active_record(
    logger: Any = None, config: Any = None, metric: Any = None, pinger: Any = None
) -> ActiveRecord:
    """Create the shared instance; raises RegistryError if it already exists."""
    return _initialise(_caller(2), logger, config, metric, pinger)


def reinit_active_record(
    logger: Any = None, config: Any = None, metric: Any = None, pinger: Any = None
) -> ActiveRecord:
    """Drop the shared instance and create a new one."""
    global _instance
    _instance = None
    return _initialise(_caller(2), logger, config, metric, pinger)


def get_instance() -> ActiveRecord:
    if _instance is None:
        raise RegistryError("get instance before initialization")
    return _instance


def logger() -> Any:
    return get_instance().logger


def metric() -> Any:
    return get_instance().metric


def config() -> Any:
    return get_instance().config


def connection_cacher() -> Any:
    return get_instance().connection_cacher


def config_cacher() -> Any:
    return get_instance().config_cacher


def ping(path: str, checker: Callable[[ShardInstance], ServerMode]) -> Optional[list]:
    """Schedule pinging of the cluster at `path`; None when no pinger is configured."""
    if _instance is None or _instance.pinger is None:
        return None
    return _instance.pinger.schedule_ping_if_not_exists(path, checker)