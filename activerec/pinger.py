"""Background checker that keeps cluster instance modes and availability current."""

from __future__ import annotations

import threading
import traceback
from datetime import timedelta
from typing import Any, Callable, Optional, Union

from .cluster import ServerMode, ShardInstance
from .logger import DefaultLogger
from .registry import config_cacher

PingFunc = Callable[[ShardInstance], ServerMode]


class Pinger:
    """Periodically actualizes every registered cluster configuration."""

    def __init__(
        self,
        interval: Union[float, timedelta] = 1.0,
        config_cache: Any = None,
        logger: Optional[DefaultLogger] = None,
        start: bool = False,
    ) -> None:
        if isinstance(interval, timedelta):
            interval = interval.total_seconds()
        self._interval = float(interval)
        self._config_cache = config_cache
        self._logger = logger if logger is not None else DefaultLogger()
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._pingers: dict[str, PingFunc] = {}
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        if start:
            self.start_watch()

    def is_started(self) -> bool:
        return self._thread is not None

    def start_watch(self) -> None:
        """Start the background watch; does nothing if already started."""
        with self._state_lock:
            if self._thread is not None:
                return
            self._stop = threading.Event()
            thread = threading.Thread(
                target=self._watch, args=(self._stop,), name="activerec-pinger", daemon=True
            )
            self._thread = thread
            thread.start()

    def stop_watch(self) -> None:
        """Stop the background watch and wait for it to finish."""
        with self._state_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop.set()
        thread.join()
        with self._state_lock:
            if self._thread is thread:
                self._thread = None

    def schedule_ping_if_not_exists(self, path: str, ping: PingFunc) -> Optional[list]:
        """Register a cluster for pinging, actualizing it at once on first registration.

        Returns the actualized cluster, or None if the path was already registered.
        """
        with self._lock:
            if path in self._pingers:
                return None
            self._pingers[path] = ping
            cluster = self._cluster_config().actualize(path, ping)
            self._log(cluster)
            self.start_watch()
            return cluster

    def _watch(self, stop: threading.Event) -> None:
        try:
            while not stop.wait(self._interval):
                with self._lock:
                    for path, ping in list(self._pingers.items()):
                        self._log(self._cluster_config().actualize(path, ping))
        except Exception:
            self._logger.error("unexpected pinger watch panic:", traceback.format_exc())

    def _cluster_config(self) -> Any:
        if self._config_cache is not None:
            return self._config_cache
        return config_cacher()

    def _log(self, cluster: Optional[list]) -> None:
        for shard in cluster or []:
            for instance in [*shard.masters, *shard.replicas]:
                if not instance.offline:
                    continue
                if instance.config.mode == ServerMode.MASTER:
                    self._logger.warn("master:", instance.config.addr, "is unavailable")
                elif instance.config.mode == ServerMode.REPLICA:
                    self._logger.warn("replica:", instance.config.addr, "is unavailable")