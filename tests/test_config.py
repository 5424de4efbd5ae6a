import logging
from datetime import datetime, timedelta

import pytest

from activerec.config import DefaultConfig


@pytest.fixture
def config():
    return DefaultConfig.from_map(
        {
            "flag": True,
            "count": 3,
            "timeout": timedelta(seconds=2),
            "host": "localhost",
        }
    )


def test_present_values(config):
    assert config.get_bool("flag") is True
    assert config.get_int("count") == 3
    assert config.get_duration("timeout") == timedelta(seconds=2)
    assert config.get_string("host") == "localhost"


def test_missing_values_use_defaults(config):
    assert config.get_bool("nope", True) is True
    assert config.get_int("nope", 9) == 9
    assert config.get_string("nope") == ""
    assert config.get_duration("nope") == timedelta(0)
    assert config.get_int_if_exists("nope") is None


def test_wrong_type_warns(config, caplog):
    caplog.set_level(logging.DEBUG, logger="activerec")
    assert config.get_int_if_exists("host") is None
    assert config.get_int("flag", 5) == 5
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 2
    assert all(m.startswith("WARN: ") for m in messages)
    assert "param host has type str" in messages[0]


def test_last_update_time():
    before = datetime.now()
    cfg = DefaultConfig.from_map({})
    after = datetime.now()
    assert before <= cfg.get_last_update_time() <= after
    assert DefaultConfig().get_last_update_time() == datetime.min