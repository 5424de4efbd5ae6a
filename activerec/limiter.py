"""Selection limits and the no-data error."""

from __future__ import annotations

from dataclasses import dataclass

_UINT32_MAX = 2**32 - 1


class NoDataError(LookupError):
    """Raised when a selection returns no data."""

    def __init__(self, message: str = "no data") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Limiter:
    """Limit and offset of a selection; a threshold warns when the limit is filled."""

    limit: int = 0
    offset: int = 0
    fulfill_warn: bool = False

    def __post_init__(self) -> None:
        for name in ("limit", "offset"):
            value = getattr(self, name)
            if not 0 <= value <= _UINT32_MAX:
                raise ValueError(f"{name} must be in range 0..{_UINT32_MAX}, got {value}")

    def __str__(self) -> str:
        threshold = "true" if self.fulfill_warn else "false"
        return f"Limit: {self.limit}, Offset: {self.offset}, Is Threshold: {threshold}"


def empty_limiter() -> Limiter:
    return Limiter()


def new_limiter(limit: int) -> Limiter:
    return Limiter(limit=limit)


def new_limit_offset(limit: int, offset: int) -> Limiter:
    return Limiter(limit=limit, offset=offset)


def new_threshold(limit: int) -> Limiter:
    return Limiter(limit=limit, fulfill_warn=True)