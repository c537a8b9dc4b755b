"""Type dispatch, primitive coercers and recursive cleaning."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import SimpleNamespace
from typing import List

import pytest
from pydantic import BaseModel, ConfigDict, ValidationError

from inputfilter.engines.input_filter import InputFilter
from inputfilter.engines.sanitizer_config import FilterMode, SanitizerConfig


@pytest.mark.parametrize(
    ("source", "type_name", "expected"),
    [
        ("  +42 abc", "int", 42),
        ("x-5y", "integer", -5),
        ("abc", "int", 0),
        ("abc", "uint", 0),
        ("-17", "uint", 17),
        (12, "INT", 12),
        (None, "int", 0),
        ("3.14abc", "float", 3.14),
        ("-1.5e3", "double", -1500.0),
        ("abc", "float", 0.0),
        ("", "bool", False),
        ("0", "boolean", False),
        ("false", "bool", True),
        (None, "bool", False),
        (True, "bool", True),
        ("Hello_World 123!", "word", "Hello_World"),
        ("abc-123_!", "alnum", "abc123"),
        ("..my-cmd.v1_x!@#", "cmd", "my-cmd.v1_x"),
        ("aGVs bG8=\n", "base64", "aGVsbG8="),
        ("jo<hn>\"'%&\x01doe", "username", "johndoe"),
    ],
)
def test_primitive_filters(source, type_name: str, expected) -> None:
    result = InputFilter().clean(source, type_name)

    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("/var//www/html", "/var/www/html"),
        ("images/logo.png", "images/logo.png"),
        ("C:\\Windows\\\\System32", "C:\\Windows\\System32"),
        ("C:/Windows//System32", "C:\\Windows\\System32"),
        ("../etc/passwd", ""),
        ("/etc/passwd; rm -rf /", ""),
    ],
)
def test_path_filter(source: str, expected: str) -> None:
    assert InputFilter().clean(source, "path") == expected


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("  hello\t\n", "hello"),
        ("\u3000hello\u3000", "hello"),
        ("\u00a0hello\u00a0", "hello"),
    ],
)
def test_trim_filter(source: str, expected: str) -> None:
    assert InputFilter().clean(source, "trim") == expected


def test_string_decodes_entities_before_sanitizing(default_filter) -> None:
    source = "&lt;script&gt;alert(1)&lt;/script&gt;"

    assert default_filter.clean(source, "string") == "alert(1)"
    assert default_filter.clean(source) == "alert(1)"


def test_html_keeps_entities(default_filter) -> None:
    assert default_filter.clean("&lt;b&gt;x", "html") == "&lt;b&gt;x"


def test_unknown_type_behaves_like_string_for_text(default_filter) -> None:
    assert default_filter.clean("<b>x</b>", "unknown") == "x"
    assert default_filter.clean(5, "unknown") == 5
    assert default_filter.clean("", "unknown") == ""


def test_raw_returns_value_untouched(default_filter) -> None:
    source = ["<script>"]

    assert default_filter.clean(source, "raw") is source


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("x", ["x"]),
        (None, []),
        (("a", "b"), ["a", "b"]),
        (["<b>"], ["<b>"]),
        ({"k": "<b>"}, {"k": "<b>"}),
    ],
)
def test_array_coerces_without_cleaning(default_filter, source, expected) -> None:
    assert default_filter.clean(source, "array") == expected


def test_lists_and_tuples_are_cleaned_elementwise(default_filter) -> None:
    assert default_filter.clean(["1a", "b2"], "int") == [1, 2]
    assert default_filter.clean(("1a", "b2"), "int") == (1, 2)


def test_dicts_keep_keys_and_order(default_filter) -> None:
    source = {"b": "<b>x</b>", "a": ["<i>y</i>"], "c": {"d": "<u>z</u>"}}

    cleaned = default_filter.clean(source, "html")

    assert cleaned == {"b": "x", "a": ["y"], "c": {"d": "z"}}
    assert list(cleaned) == ["b", "a", "c"]


def test_records_are_cleaned_in_place(default_filter) -> None:
    record = SimpleNamespace(name="<b>x</b>", count="7 items")

    cleaned = default_filter.clean(record, "string")

    assert cleaned is record
    assert record.name == "x"
    assert record.count == "7 items"


@dataclass(frozen=True)
class FrozenComment:
    title: str
    votes: str = "3 up"


@dataclass
class Comment:
    title: str
    replies: list = field(default_factory=list)


class FrozenArticle(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    tags: List[str] = []


class Article(BaseModel):
    title: str


class Colour(Enum):
    RED = "<b>red</b>"


def test_frozen_dataclasses_are_rebuilt(default_filter) -> None:
    record = FrozenComment(title="<b>x</b>")

    cleaned = default_filter.clean(record, "string")

    assert cleaned == FrozenComment(title="x", votes="3 up")
    assert record.title == "<b>x</b>"


def test_mutable_dataclasses_are_cleaned_in_place(default_filter) -> None:
    record = Comment(title="<b>x</b>", replies=["<i>y</i>"])

    cleaned = default_filter.clean(record, "html")

    assert cleaned is record
    assert record.title == "x"
    assert record.replies == ["y"]


def test_frozen_models_are_rebuilt(default_filter) -> None:
    record = FrozenArticle(title="<b>x</b>", tags=["<u>a</u>", "b"])

    cleaned = default_filter.clean(record, "string")

    assert isinstance(cleaned, FrozenArticle)
    assert cleaned.title == "x"
    assert cleaned.tags == ["a", "b"]
    assert record.title == "<b>x</b>"


def test_mutable_models_are_cleaned_in_place(default_filter) -> None:
    record = Article(title="<b>x</b>")

    cleaned = default_filter.clean(record, "string")

    assert cleaned is record
    assert record.title == "x"


def test_enum_members_and_callables_are_not_records(default_filter) -> None:
    def handler():
        return None

    assert default_filter.clean(Colour.RED, "unknown") is Colour.RED
    assert Colour.RED.value == "<b>red</b>"
    assert default_filter.clean(handler, "unknown") is handler
    assert default_filter.clean(pytest, "unknown") is pytest
    assert default_filter.clean(Comment, "unknown") is Comment


def test_clean_payload_respects_fields(default_filter) -> None:
    payload = {
        "name": "<b>x</b>",
        "bio": "<i>y</i>",
        "age": 3,
        "nested": {"name": "<u>z</u>", "other": "<u>w</u>"},
    }

    cleaned = default_filter.clean_payload(payload, fields=["name", "nested"])

    assert cleaned == {
        "name": "x",
        "bio": "<i>y</i>",
        "age": 3,
        "nested": {"name": "z", "other": "<u>w</u>"},
    }
    assert payload["name"] == "<b>x</b>"


def test_clean_payload_defaults_to_all_strings(default_filter) -> None:
    cleaned = default_filter.clean_payload({"a": "<b>1</b>", "b": 2}, "int")

    assert cleaned == {"a": 1, "b": 2}


def test_check_attribute_is_exposed() -> None:
    assert InputFilter.check_attribute("href", "javascript:alert(1)")
    assert not InputFilter.check_attribute("href", "/home")


def test_configured_lists_are_lowercased() -> None:
    input_filter = InputFilter(tags=["B", "Img"], attributes=["HREF"])

    assert input_filter.config.tag_allow_list == frozenset({"b", "img"})
    assert input_filter.config.attribute_allow_list == frozenset({"href"})


def test_invalid_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        InputFilter(tag_mode=2)

    with pytest.raises(ValueError):
        InputFilter(attribute_mode=-1)


def test_config_is_immutable() -> None:
    input_filter = InputFilter()

    with pytest.raises(ValidationError):
        input_filter.config.xss_auto_clean = False


@pytest.mark.parametrize("names", [5, 1.5, True])
def test_non_iterable_name_lists_are_rejected(names) -> None:
    with pytest.raises(ValidationError):
        SanitizerConfig(tag_allow_list=names)

    with pytest.raises(ValidationError):
        SanitizerConfig(attribute_allow_list=names)


def test_prebuilt_config_shares_configuration() -> None:
    original = InputFilter(tags=["b"])

    rebuilt = InputFilter(config=original.config)

    assert rebuilt.config is original.config
    assert rebuilt.clean("<b>x</b><i>y</i>", "html") == "<b>x</b>y"


def test_prebuilt_config_wins_over_arguments() -> None:
    config = SanitizerConfig(tag_allow_list=["i"], tag_mode=FilterMode.BLOCK_ONLY_LISTED)

    input_filter = InputFilter(tags=["b"], config=config)

    assert input_filter.config is config
    assert input_filter.clean("<b>x</b><i>y</i>", "html") == "<b>x</b>y"


def test_filter_types_lists_every_filter() -> None:
    types = InputFilter().filter_types

    for name in ("array", "raw", "int", "uint", "float", "bool", "word", "alnum",
                 "cmd", "base64", "string", "html", "path", "trim", "username"):
        assert name in types
