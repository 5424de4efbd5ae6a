"""In-memory configuration keyed by path."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any, Optional

from .logger import DefaultLogger


class DefaultConfig:
    """Configuration backed by a plain mapping of path to value."""

    def __init__(self, cfg: Optional[dict] = None, logger: Optional[DefaultLogger] = None) -> None:
        self._cfg: dict[str, Any] = {} if cfg is None else cfg
        self._created = datetime.min
        self._logger = logger if logger is not None else DefaultLogger()

    @classmethod
    def from_map(cls, cfg: dict, logger: Optional[DefaultLogger] = None) -> "DefaultConfig":
        """Build a configuration from a mapping, stamped with the current time."""
        config = cls(cfg, logger)
        config._created = datetime.now()
        return config

    def get_last_update_time(self) -> datetime:
        return self._created

    def _lookup(self, path: str, kind: type, kind_name: str, exclude_bool: bool = False) -> Any:
        if path not in self._cfg:
            return None
        param = self._cfg[path]
        if isinstance(param, kind) and not (exclude_bool and isinstance(param, bool)):
            return param
        self._logger.warn(f"param {path} has type {type(param).__name__}, want {kind_name}")
        return None

    def get_bool_if_exists(self, path: str) -> Optional[bool]:
        return self._lookup(path, bool, "bool")

    def get_bool(self, path: str, default: bool = False) -> bool:
        value = self.get_bool_if_exists(path)
        return default if value is None else value

    def get_int_if_exists(self, path: str) -> Optional[int]:
        return self._lookup(path, int, "int", exclude_bool=True)

    def get_int(self, path: str, default: int = 0) -> int:
        value = self.get_int_if_exists(path)
        return default if value is None else value

    def get_duration_if_exists(self, path: str) -> Optional[timedelta]:
        return self._lookup(path, timedelta, "timedelta")

    def get_duration(self, path: str, default: timedelta = timedelta(0)) -> timedelta:
        value = self.get_duration_if_exists(path)
        return default if value is None else value

    def get_string_if_exists(self, path: str) -> Optional[str]:
        return self._lookup(path, str, "str")

    def get_string(self, path: str, default: str = "") -> str:
        value = self.get_string_if_exists(path)
        return default if value is None else value

    def get_strings(self, path: str, default: Optional[list] = None) -> list:
        """Return the list of strings at path, or a copy of the default (empty if none)."""
        fallback = list(default) if default is not None else []
        value = self._lookup(path, (list, tuple), "list of str")
        if value is None:
            return fallback
        if not all(isinstance(item, str) for item in value):
            self._logger.warn(f"param {path} holds non-string items, want list of str")
            return fallback
        return list(value)

    def get_struct(self, path: str, target: Any) -> bool:
        """Fill target from the mapping at path; return True when the path held a mapping."""
        value = self._lookup(path, Mapping, "mapping")
        if value is None:
            return False
        if isinstance(target, dict):
            target.update(value)
        else:
            for key, item in value.items():
                setattr(target, key, item)
        return True