import pytest

from activerec.tags import (
    ParamValueRule,
    TagError,
    check_bool_type,
    get_node_name,
    split_param,
    split_tag,
)


@pytest.mark.parametrize("node", ["Fields", "bla"])
def test_get_node_name_errors(node):
    with pytest.raises(TagError):
        get_node_name(node)


@pytest.mark.parametrize(
    "node, expected",
    [
        ("FieldsUser", ("Fields", "User", "user")),
        ("FieldsObjectUser", ("FieldsObject", "User", "user")),
    ],
)
def test_get_node_name(node, expected):
    assert get_node_name(node) == expected


def test_get_node_name_lowercase_public_part():
    with pytest.raises(TagError):
        get_node_name("Fieldsuser")


@pytest.mark.parametrize(
    "text, rule, expected",
    [
        ("", {}, []),
        ("a:b", {}, [("a", "b")]),
        ("a:b;d:f", {}, [("a", "b"), ("d", "f")]),
        ("a:b;;d:f", {}, [("a", "b"), ("d", "f")]),
        ("a:b;d:f;g", {"g": ParamValueRule.NOT_NEED_VALUE}, [("a", "b"), ("d", "f"), ("g",)]),
        ("a", {}, [("a",)]),
    ],
)
def test_split_param(text, rule, expected):
    assert split_param(text, rule) == expected


def test_split_param_flag_with_value():
    with pytest.raises(TagError):
        split_param("a:b", {"a": ParamValueRule.NOT_NEED_VALUE})


def test_split_tag_empty():
    assert split_tag('`ar:""`', False, {}) == []


def test_split_tag_empty_checked():
    with pytest.raises(TagError):
        split_tag('`ar:""`', True, {})


def test_split_tag_no_prefix():
    with pytest.raises(TagError):
        split_tag("dsjfgsadkjgfdskj", False, {})


def test_split_tag_absent():
    with pytest.raises(TagError):
        split_tag(None)


def test_split_tag_values():
    assert split_tag('`ar:"a:b;c:d;d:r,t"`', False, {}) == [
        ("a", "b"),
        ("c", "d"),
        ("d", "r,t"),
    ]


def test_check_bool_type():
    assert check_bool_type("bool") is None
    with pytest.raises(TagError):
        check_bool_type("int")