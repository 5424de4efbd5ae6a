import pytest

from activerec import registry
from activerec.cluster import MapGlobParam, ServerMode
from activerec.config import DefaultConfig
from activerec.logger import DefaultLogger, LogLevel
from activerec.metrics import NoopMetric


@pytest.fixture(autouse=True)
def clean_registry(monkeypatch):
    monkeypatch.setattr(registry, "_instance", None)
    yield


class _Options:
    def __init__(self, addr):
        self.addr = addr

    def get_connection_id(self):
        return "id-" + self.addr

    def instance_mode(self):
        return ServerMode.MASTER


class _FakePinger:
    def __init__(self):
        self.calls = []

    def schedule_ping_if_not_exists(self, path, ping):
        self.calls.append((path, ping))
        return ["cluster"]


def test_init_with_empty_options():
    instance = registry.init_active_record()
    assert registry.get_instance() is instance
    assert isinstance(registry.metric(), NoopMetric)
    assert registry.config().get_int("missing", 5) == 5


def test_init_with_logger():
    log = DefaultLogger(LogLevel.DEBUG)
    registry.init_active_record(logger=log)
    assert registry.logger() is log
    assert registry.logger().level == LogLevel.DEBUG


def test_instance_creator_points_to_caller():
    instance = registry.init_active_record()
    assert "test_registry.py" in instance.instance_creator


def test_init_twice_raises():
    registry.init_active_record()
    with pytest.raises(registry.RegistryError, match="can't initialise twice"):
        registry.init_active_record()


def test_reinit_replaces_instance():
    first = registry.init_active_record()
    second = registry.reinit_active_record()
    assert registry.get_instance() is second
    assert second is not first


def test_get_instance_before_init_raises():
    with pytest.raises(registry.RegistryError, match="before initialization"):
        registry.get_instance()


def test_logger_before_init_raises():
    with pytest.raises(registry.RegistryError):
        registry.logger()


def test_ping_without_pinger_returns_none():
    assert registry.ping("db", lambda inst: ServerMode.MASTER) is None
    registry.init_active_record()
    assert registry.ping("db", lambda inst: ServerMode.MASTER) is None


def test_ping_delegates_to_pinger():
    pinger = _FakePinger()
    registry.init_active_record(pinger=pinger)
    result = registry.ping("db", print)
    assert result == ["cluster"]
    assert pinger.calls == [("db", print)]


def test_connection_cacher_is_shared_pool():
    registry.init_active_record()
    assert registry.connection_cacher() is registry.get_instance().connection_cacher
    assert registry.connection_cacher().get(
        registry.config_cacher().actualize("none", None) or _shard_instance()
    ) is None


def _shard_instance():
    from activerec.cluster import ShardInstance

    return ShardInstance(params_id="absent")