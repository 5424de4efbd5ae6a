"""Cluster topology: shards, instances and a cache of cluster configurations."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Any, Callable, Optional, Protocol


class ClusterConfigError(Exception):
    """Raised when a cluster configuration is missing or invalid."""


class ShardInstanceType(IntEnum):
    """Which instance of a shard a query should go to."""

    MASTER = 0
    REPLICA = 1
    REPLICA_OR_MASTER = 2


class ServerMode(IntEnum):
    """Working mode of a concrete server instance."""

    MASTER = 0
    REPLICA = 1


class OptionInterface(Protocol):
    """Connection options of one instance."""

    def get_connection_id(self) -> str: ...

    def instance_mode(self) -> Any: ...


@dataclass
class ShardInstanceConfig:
    """Configuration of one instance."""

    timeout: timedelta = timedelta(0)
    mode: ServerMode = ServerMode.MASTER
    pool_size: int = 0
    addr: str = ""


@dataclass
class ShardInstance:
    """One instance of a shard in a cluster."""

    params_id: str = ""
    config: ShardInstanceConfig = field(default_factory=ShardInstanceConfig)
    options: Any = None
    offline: bool = False

    def is_offline(self) -> bool:
        return self.offline


def online(instances: list[ShardInstance]) -> list[ShardInstance]:
    """Instances that are not marked offline, in their original order."""
    return [instance for instance in instances if not instance.offline]


@dataclass
class Shard:
    """A shard made of masters and replicas, chosen round robin."""

    masters: list[ShardInstance] = field(default_factory=list)
    replicas: list[ShardInstance] = field(default_factory=list)
    _cur_master: int = field(default=0, init=False, compare=False, repr=False)
    _cur_replica: int = field(default=0, init=False, compare=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, compare=False, repr=False
    )

    def next_master(self) -> ShardInstance:
        """Next online master; raises ClusterConfigError when there is none."""
        masters = online(self.masters)
        if not masters:
            raise ClusterConfigError("no master configured")
        if len(masters) == 1:
            return masters[0]
        with self._lock:
            self._cur_master = (self._cur_master + 1) % len(masters)
            return masters[self._cur_master]

    def next_replica(self) -> ShardInstance:
        """Next online replica; raises ClusterConfigError when there is none."""
        replicas = online(self.replicas)
        if not replicas:
            raise ClusterConfigError("no replica configured")
        if len(replicas) == 1:
            return replicas[0]
        with self._lock:
            self._cur_replica = (self._cur_replica + 1) % len(replicas)
            return replicas[self._cur_replica]


Cluster = list  # a cluster is a list of Shard


@dataclass
class MapGlobParam:
    """Default parameters applied to every shard of a cluster."""

    timeout: timedelta = timedelta(0)
    pool_size: int = 0


ClusterOption = Callable[[list], None]
OptionCreator = Callable[[ShardInstanceConfig], Any]
InstanceChecker = Callable[[ShardInstance], ServerMode]


def with_shard(masters: list, replicas: list) -> ClusterOption:
    """Cluster option adding a shard with static masters built from their options."""

    def apply(cluster: list) -> None:
        shard = Shard()
        for opt in masters:
            shard.masters.append(
                ShardInstance(
                    params_id=opt.get_connection_id(),
                    config=ShardInstanceConfig(addr="static"),
                    options=opt,
                )
            )
        cluster.append(shard)

    return apply


def new_cluster_info(*args: ClusterOption) -> list:
    """Build a cluster from shard options, one shard per option."""
    cluster: list = []
    for opt in args:
        opt(cluster)
    return cluster


def _build_instances(
    hosts: str,
    mode: ServerMode,
    pool_size: int,
    timeout: timedelta,
    option_creator: OptionCreator,
    kind: str,
) -> list[ShardInstance]:
    instances = []
    for addr in hosts.split(","):
        if not addr:
            raise ClusterConfigError(f"invalid {kind} instance options: addr is empty")
        shard_cfg = ShardInstanceConfig(
            timeout=timeout, mode=mode, pool_size=pool_size, addr=addr
        )
        try:
            opt = option_creator(shard_cfg)
        except Exception as err:
            raise ClusterConfigError(f"can't create instanceOption: {err}") from err
        instances.append(
            ShardInstance(params_id=opt.get_connection_id(), config=shard_cfg, options=opt)
        )
    return instances


def _partition(instances: list[ShardInstance]) -> Shard:
    shard = Shard()
    for instance in instances:
        if instance.config.mode == ServerMode.MASTER:
            shard.masters.append(instance)
        elif instance.config.mode == ServerMode.REPLICA:
            shard.replicas.append(instance)
    return shard


def _get_shard_info_from_cfg(
    config: Any, path: str, globs: MapGlobParam, option_creator: OptionCreator
) -> Shard:
    timeout = config.get_duration(path + "/Timeout", globs.timeout)
    pool_size = config.get_int(path + "/PoolSize", globs.pool_size)

    master = config.get_string_if_exists(path + "/master")
    if master is None:
        master = config.get_string_if_exists(path)
        if master is None:
            raise ClusterConfigError(
                f"master should be specified in '{path}' or in '{path}/master' "
                f"and replica in '{path}/replica'"
            )

    instances: list[ShardInstance] = []
    if master:
        instances += _build_instances(
            master, ServerMode.MASTER, pool_size, timeout, option_creator, "master"
        )

    replica = config.get_string_if_exists(path + "/replica")
    if replica is not None:
        instances += _build_instances(
            replica, ServerMode.REPLICA, pool_size, timeout, option_creator, "slave"
        )

    return _partition(instances)


def get_cluster_info_from_cfg(
    config: Any, path: str, globs: MapGlobParam, option_creator: OptionCreator
) -> list:
    """Read a cluster description from the configuration under `path`."""
    globs = replace(globs)

    shard_count = config.get_int_if_exists(path + "/max-shard")

    global_timeout = config.get_duration_if_exists(path + "/Timeout")
    if global_timeout is not None:
        globs.timeout = global_timeout

    global_pool_size = config.get_int_if_exists(path + "/PoolSize")
    globs.pool_size = 1 if global_pool_size is None else global_pool_size

    if shard_count is None:
        try:
            return [_get_shard_info_from_cfg(config, path, globs, option_creator)]
        except ClusterConfigError as err:
            raise ClusterConfigError(f"can't get shard info: {err}") from err

    cluster = []
    for num in range(shard_count):
        try:
            cluster.append(
                _get_shard_info_from_cfg(config, f"{path}/{num}", globs, option_creator)
            )
        except ClusterConfigError as err:
            raise ClusterConfigError(f"can't get shard {num} info: {err}") from err
    return cluster


class ConfigCacher:
    """Caches cluster configurations by path; cleared when the configuration changes."""

    def __init__(self, config_provider: Callable[[], Any]) -> None:
        self._config_provider = config_provider
        self._lock = threading.Lock()
        self._container: dict[str, list] = {}
        self._update_time = datetime.now()

    def _is_stale(self) -> bool:
        return self._update_time < self._config_provider().get_last_update_time()

    def get(self, path: str, globs: MapGlobParam, option_creator: OptionCreator) -> list:
        """Cluster for `path`, read from the configuration when not cached."""
        with self._lock:
            if self._is_stale():
                self._container = {}
                self._update_time = datetime.now()

            cluster = self._container.get(path)
            if cluster is None:
                try:
                    cluster = get_cluster_info_from_cfg(
                        self._config_provider(), path, globs, option_creator
                    )
                except ClusterConfigError as err:
                    raise ClusterConfigError(f"can't get config: {err}") from err
                self._container[path] = cluster
            return cluster

    def actualize(
        self, path: str, instance_checker: Optional[InstanceChecker]
    ) -> Optional[list]:
        """Refresh modes and availability of the cached cluster at `path`.

        An instance for which the checker raises is marked offline and keeps its mode.
        Returns None when the path is not cached or no checker is given.
        """
        with self._lock:
            cluster = self._container.get(path)
            if cluster is None or instance_checker is None:
                return None

            updated = []
            for shard in cluster:
                instances = []
                for instance in [*shard.masters, *shard.replicas]:
                    config = replace(instance.config)
                    try:
                        config.mode = ServerMode(instance_checker(instance))
                        offline = False
                    except Exception:
                        offline = True
                    instances.append(
                        ShardInstance(
                            params_id=instance.params_id,
                            config=config,
                            options=instance.options,
                            offline=offline,
                        )
                    )
                updated.append(_partition(instances))

            if updated:
                self._container[path] = updated
                return updated
            return cluster

    def update(self, path: str, cluster: list) -> list:
        """Store a cluster for `path` unless the configuration changed since caching."""
        with self._lock:
            if self._is_stale():
                raise ClusterConfigError(
                    f"cluster config was modified since {self._update_time}"
                )
            self._container[path] = cluster
            return cluster