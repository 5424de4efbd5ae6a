"""Pool of open connections keyed by instance parameters."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Protocol

from .cluster import ShardInstance
from .logger import DefaultLogger


class ConnectionError(Exception):
    """Raised when a connection cannot be added to the pool."""


class Waitable(Protocol):
    def wait(self, timeout: Optional[float] = None) -> Any: ...


class Connection(Protocol):
    """A connection that can be closed; done() returns an object whose wait() blocks until closed."""

    def close(self) -> None: ...

    def done(self) -> Waitable: ...


Connector = Callable[[Any], Connection]


class ConnectionPool:
    """Keeps one connection per instance parameter set."""

    def __init__(self, logger: Optional[DefaultLogger] = None) -> None:
        self._logger = logger if logger is not None else DefaultLogger()
        self._lock = threading.Lock()
        self._container: dict[str, Connection] = {}

    def _add(self, shard: ShardInstance, connector: Connector) -> Connection:
        if shard.params_id in self._container:
            raise ConnectionError(f"attempt to add duplicate connID: {shard.params_id}")
        try:
            conn = connector(shard.options)
        except Exception as err:
            raise ConnectionError(f"error add connection to shard: {err}") from err
        self._container[shard.params_id] = conn
        return conn

    def add(self, shard: ShardInstance, connector: Connector) -> Connection:
        """Open and store a connection; raises ConnectionError on duplicates or failure."""
        with self._lock:
            return self._add(shard, connector)

    def get_or_add(self, shard: ShardInstance, connector: Connector) -> Connection:
        """Existing connection for the instance, or a newly opened one."""
        with self._lock:
            conn = self.get(shard)
            if conn is None:
                conn = self._add(shard, connector)
            return conn

    def get(self, shard: ShardInstance) -> Optional[Connection]:
        return self._container.get(shard.params_id)

    def close_connection(self) -> None:
        """Close every connection and wait until each reports it is done."""
        with self._lock:
            for name, conn in self._container.items():
                conn.close()
                self._logger.debug(f"connection close: {name}")
            for conn in self._container.values():
                conn.done().wait()
                self._logger.debug("pool closed done")