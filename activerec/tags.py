"""Parsing of model declaration names and `ar:"..."` field tags."""

from __future__ import annotations

import re
from enum import Enum
from typing import Mapping, Optional

_NODE_NAMES = (
    "FieldsObject",
    "Fields",
    "ProcFields",
    "Indexes",
    "IndexParts",
    "Serializers",
    "Triggers",
    "Flags",
    "Mutators",
)

_PUBLIC_NAME = re.compile(r"^[A-Z]")

NAME_DEFAULT_RULE = "__DEFAULT__"
TYPE_BOOL = "bool"


class TagError(ValueError):
    """Raised when a declaration name or tag cannot be parsed."""


class ParamValueRule(Enum):
    NEED_VALUE = 0
    NOT_NEED_VALUE = 1


def get_node_name(node: str) -> tuple[str, str, str]:
    """Split a declaration name into (kind, public name, package name)."""
    name = ""
    public_name = ""
    for candidate in _NODE_NAMES:
        if node.startswith(candidate):
            name = candidate
            public_name = node[len(candidate):]
            break

    if not public_name:
        raise TagError(f"unknown node name `{node}`")
    if not _PUBLIC_NAME.match(public_name):
        raise TagError(f"invalid node name `{node}`: public part must start with a capital letter")

    return name, public_name, public_name.lower()


def split_param(
    text: str, rule: Optional[Mapping[str, ParamValueRule]] = None
) -> list[tuple[str, ...]]:
    """Split `key:value;flag` parameters into tuples of one or two items."""
    rule = rule or {}
    default = rule.get(NAME_DEFAULT_RULE, ParamValueRule.NEED_VALUE)
    result: list[tuple[str, ...]] = []
    for param in text.strip('"').split(";"):
        if not param:
            continue
        kv = tuple(param.split(":", 1))
        if rule.get(kv[0], default) is ParamValueRule.NOT_NEED_VALUE and len(kv) == 2:
            raise TagError(f"tag `{kv[0]}` must not have a value")
        result.append(kv)
    return result


def split_tag(
    tag: Optional[str],
    check_empty: bool = False,
    rule: Optional[Mapping[str, ParamValueRule]] = None,
) -> list[tuple[str, ...]]:
    """Parse a raw field tag literal such as `` `ar:"a:b;c"` ``."""
    if tag is None:
        raise TagError("tag is absent")
    if not tag.startswith('`ar:"'):
        raise TagError("invalid tag format")
    if check_empty and tag == '`ar:""`':
        raise TagError("tag is empty")
    return split_param(tag[4:-1], rule)


def check_bool_type(type_name: object) -> None:
    """Raise TagError unless the declared type is bool."""
    if not isinstance(type_name, str) or type_name != TYPE_BOOL:
        raise TagError("type must be bool")