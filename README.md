# activerec

`activerec` is the runtime core of an active-record style storage layer.
It gives models the pieces they share, without talking to any database
itself:

- `activerec.cluster`: shards made of masters and replicas, read from a flat
  key/value configuration, round-robin choice of the next online instance,
  and `ConfigCacher`, a per-path cache of cluster descriptions.
- `activerec.connection`: `ConnectionPool`, one connection per instance,
  keyed by the instance's `params_id`.
- `activerec.pinger`: `Pinger`, a background thread that re-checks every
  registered cluster, marks unreachable instances offline and moves
  instances between master and replica according to what the check reports.
- `activerec.registry`: the process-wide instance holding the logger,
  configuration, metrics, connection pool, configuration cache and an
  optional pinger.
- `activerec.config`: `DefaultConfig`, configuration backed by a dict.
- `activerec.logger`: `DefaultLogger` with levels (`LogLevel`) and
  context-bound prefix fields; `MockerLogger` for query statistics.
- `activerec.metrics`: `NoopMetric`, whose timers and counters report
  nowhere (counters keep their totals in memory).
- `activerec.limiter`: `Limiter` and its constructors, and `NoDataError`.
- `activerec.tags`: parsing of `ar:"key:value;flag"` tags and of declaration
  names such as `FieldsUser`.

The package has no runtime dependencies and supports Python 3.10 and later.

## Setting up the runtime

```python
from activerec import registry
from activerec.config import DefaultConfig
from activerec.logger import DefaultLogger

log = DefaultLogger()
registry.init_active_record(
    logger=log,
    config=DefaultConfig.from_map(
        {"storage/master": "db1:11011", "storage/replica": "db2:11011"},
        logger=log,
    ),
)

registry.config()             # the configuration given above
registry.connection_cacher()  # shared ConnectionPool
registry.config_cacher()      # shared ConfigCacher
```

Arguments left out get defaults: `DefaultLogger()`, an empty
`DefaultConfig`, `NoopMetric()` and no pinger. A second call to
`init_active_record` raises `RegistryError` naming the file and line of the
first call; `reinit_active_record` drops the old instance and builds a new
one. `get_instance()` and the accessor functions raise `RegistryError`
before initialisation. `registry.ping(path, checker)` hands the cluster to
the configured pinger and returns `None` when there is none.

## Configuration

`DefaultConfig` reads values by path. Typed getters (`get_bool`, `get_int`,
`get_duration`, `get_string`) return a default when the path is missing or
holds the wrong type; the `*_if_exists` variants return `None` instead. A
value of the wrong type is reported as a warning through the logger.
Durations are `datetime.timedelta` values. `get_strings` returns a list of
strings or a copy of the default, and `get_struct(path, target)` fills a
dict or an object's attributes from a mapping stored at the path.
`get_last_update_time()` is the moment `from_map` built the configuration
(`datetime.min` for one built with the plain constructor).

## Clusters

With no `<path>/max-shard` key a cluster has one shard; otherwise shards
are read from `<path>/0`, `<path>/1`, and so on. A shard lists its masters
under `<path>/master` or directly under `<path>`, and its replicas under
`<path>/replica`, as comma-separated addresses. `<path>/Timeout` and
`<path>/PoolSize` apply to the whole cluster (pool size defaults to 1) and
can be overridden per shard.

```python
from activerec.cluster import MapGlobParam, get_cluster_info_from_cfg

cluster = get_cluster_info_from_cfg(config, "storage", MapGlobParam(), make_options)
instance = cluster[0].next_master()
```

`make_options` receives a `ShardInstanceConfig` and returns an options
object with `get_connection_id()`; that id becomes the instance's
`params_id`. An empty address, a shard without any master key, or a failing
`make_options` raises `ClusterConfigError`, as does `next_master` or
`next_replica` on a shard with no online instance of that kind.

Clusters declared in code are built with
`new_cluster_info(with_shard(masters, replicas))`; `with_shard` adds the
masters as static instances.

`ConfigCacher(config_provider)` takes a callable returning the current
configuration. `get` caches clusters by path and empties the cache once the
configuration's update time is newer than the cache's. `actualize(path,
checker)` calls the checker for every instance: its return value becomes the
instance's mode, and an instance whose check raises is marked offline.
`update` stores a cluster unless the configuration changed since, in which
case it raises `ClusterConfigError`.

## Connections and pinging

`ConnectionPool.add` opens a connection through a connector called with the
instance's options and raises `ConnectionError` for a duplicate id or a
failing connector; `get_or_add` reuses an existing one. `close_connection`
closes every connection and then waits on each `done().wait()`.

```python
from activerec.pinger import Pinger

pinger = Pinger(interval=1.0, config_cache=cacher)
pinger.schedule_ping_if_not_exists("storage", check_instance)
pinger.stop_watch()
```

Registering a path actualizes it at once and starts the watch thread, which
then actualizes every registered path each interval and logs offline
instances as warnings. Without `config_cache` the pinger uses the
registry's cache.

## Tags

```python
from activerec.tags import ParamValueRule, get_node_name, split_param, split_tag

get_node_name("FieldsUser")        # ("Fields", "User", "user")
split_param("a:b;;d:f", {})        # [("a", "b"), ("d", "f")]
split_tag('`ar:"a:b;c:d"`')        # [("a", "b"), ("c", "d")]
split_param("g", {"g": ParamValueRule.NOT_NEED_VALUE})  # [("g",)]
```

An unknown or lower-case declaration name, a missing or malformed tag, an
empty tag when `check_empty` is set, or a value given to a flag declared
`NOT_NEED_VALUE` raises `TagError`. `check_bool_type` raises it for any type
name other than `bool`.

## What the package does not do

It holds no database driver and speaks no wire protocol: connections come
from the connector functions you supply. It does not read model declaration
files or generate model code; `activerec.tags` only parses the names and
tags such declarations use. Metrics are not sent anywhere.

## Running the tests

```
pip install .[test]
pytest
```