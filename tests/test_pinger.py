import logging
import time

import pytest

from activerec.cluster import ConfigCacher, MapGlobParam, ServerMode
from activerec.config import DefaultConfig
from activerec.logger import DefaultLogger
from activerec.pinger import Pinger


class _Options:
    def __init__(self, cfg):
        self.addr = cfg.addr

    def get_connection_id(self):
        return "id-" + self.addr

    def instance_mode(self):
        return ServerMode.MASTER


def _cacher(cfg=None):
    config = DefaultConfig(cfg or {})
    return ConfigCacher(lambda: config)


def test_not_started():
    pinger = Pinger()
    assert pinger.is_started() is False
    assert pinger.stop_watch() is None
    assert pinger.is_started() is False


def test_started_without_ping_funcs():
    pinger = Pinger(interval=1e-6, start=True)
    time.sleep(0.001)
    assert pinger.is_started() is True
    pinger.stop_watch()
    assert pinger.is_started() is False


def test_started_with_ping_funcs():
    pinger = Pinger(interval=1e-6, config_cache=_cacher())
    result = pinger.schedule_ping_if_not_exists("conf", lambda inst: ServerMode.MASTER)
    assert result is None
    time.sleep(0.001)
    assert pinger.is_started() is True
    pinger.stop_watch()
    assert pinger.is_started() is False


def test_started_with_panicking_ping_func():
    def explode(inst):
        raise RuntimeError("panic pinger")

    pinger = Pinger(interval=1e-6, config_cache=_cacher())
    assert pinger.schedule_ping_if_not_exists("panicConf", explode) is None
    time.sleep(0.001)
    assert pinger.is_started() is True
    pinger.stop_watch()
    assert pinger.is_started() is False


def test_schedule_twice_returns_none_second_time():
    cacher = _cacher({"db": "h1"})
    cacher.get("db", MapGlobParam(), _Options)
    pinger = Pinger(interval=10.0, config_cache=cacher)
    first = pinger.schedule_ping_if_not_exists("db", lambda inst: ServerMode.MASTER)
    second = pinger.schedule_ping_if_not_exists("db", lambda inst: ServerMode.MASTER)
    pinger.stop_watch()
    assert [m.config.addr for m in first[0].masters] == ["h1"]
    assert second is None


def test_unavailable_instance_is_logged(caplog):
    cacher = _cacher({"db": "h1"})
    cacher.get("db", MapGlobParam(), _Options)

    def unreachable(inst):
        raise OSError("connection refused")

    caplog.set_level(logging.WARNING, logger="activerec")
    pinger = Pinger(interval=10.0, config_cache=cacher, logger=DefaultLogger())
    cluster = pinger.schedule_ping_if_not_exists("db", unreachable)
    pinger.stop_watch()
    assert cluster[0].masters[0].offline is True
    assert "'master:', 'h1', 'is unavailable'" in caplog.text


def test_watch_repeats_pings_and_updates_mode():
    cacher = _cacher({"db": "h1"})
    cacher.get("db", MapGlobParam(), _Options)
    calls = []

    def checker(inst):
        calls.append(inst.config.addr)
        return ServerMode.REPLICA

    pinger = Pinger(interval=0.001, config_cache=cacher)
    cluster = pinger.schedule_ping_if_not_exists("db", checker)
    deadline = time.monotonic() + 2.0
    while len(calls) < 3 and time.monotonic() < deadline:
        time.sleep(0.005)
    pinger.stop_watch()
    assert len(calls) >= 3
    assert cluster[0].masters == []
    assert [r.config.addr for r in cluster[0].replicas] == ["h1"]


@pytest.mark.parametrize("interval", [0.5, 2.0])
def test_restart_after_stop(interval):
    pinger = Pinger(interval=interval, start=True)
    pinger.stop_watch()
    pinger.start_watch()
    assert pinger.is_started() is True
    pinger.stop_watch()
    assert pinger.is_started() is False