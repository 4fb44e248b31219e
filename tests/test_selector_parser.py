"""
    Copyright 2024 Inmanta

    Licensed under the Apache License, Version 2.0 (the "License");
    you may not use this file except in compliance with the License.
    You may obtain a copy of the License at

        http://www.apache.org/licenses/LICENSE-2.0

    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    Contact: code@inmanta.com
"""

import concurrent.futures

import pytest

from netalloc.labels import InvalidSelector, Operator, Requirement, Selector
from netalloc.parser import SelectorParseException, parse


@pytest.mark.parametrize(
    "expression, requirements",
    [
        ("status=reserved", [("status", Operator.equals, ("reserved",))]),
        ("status==reserved", [("status", Operator.double_equals, ("reserved",))]),
        ("status != reserved", [("status", Operator.not_equals, ("reserved",))]),
        ("type in (default, untagged)", [("type", Operator.in_, ("default", "untagged"))]),
        ("type notin (default)", [("type", Operator.not_in, ("default",))]),
        ("type", [("type", Operator.exists, ())]),
        ("!type", [("type", Operator.does_not_exist, ())]),
        ("priority>5", [("priority", Operator.greater_than, ("5",))]),
        ("priority<5", [("priority", Operator.less_than, ("5",))]),
        ("status=", [("status", Operator.equals, ("",))]),
        ("app.kubernetes.io/name=netalloc", [("app.kubernetes.io/name", Operator.equals, ("netalloc",))]),
        (
            "type=range,status in (free,reserved),!owner",
            [
                ("owner", Operator.does_not_exist, ()),
                ("status", Operator.in_, ("free", "reserved")),
                ("type", Operator.equals, ("range",)),
            ],
        ),
    ],
)
def test_parse(expression: str, requirements: list[tuple[str, Operator, tuple[str, ...]]]) -> None:
    selector = parse(expression)
    assert [(r.key, r.operator, r.values) for r in selector.requirements] == requirements


def test_parse_empty() -> None:
    assert parse("") == Selector.everything()
    assert parse("   ") == Selector.everything()


def test_parse_matches() -> None:
    selector = parse("status=reserved,type notin (untagged)")
    assert selector.matches({"status": "reserved", "type": "default"})
    assert not selector.matches({"status": "reserved", "type": "untagged"})
    assert selector == Selector(
        [
            Requirement.new("type", Operator.not_in, ["untagged"]),
            Requirement.new("status", Operator.equals, ["reserved"]),
        ]
    )


@pytest.mark.parametrize(
    "expression",
    [
        "status=reserved,",
        ",status",
        "status in (a,b",
        "status in a",
        "status = = a",
        "in=a",
        "status=a b",
        "status@home",
        "!",
    ],
)
def test_parse_syntax_error(expression: str) -> None:
    with pytest.raises(SelectorParseException):
        parse(expression)


@pytest.mark.parametrize("expression", ["priority>high", "-status=a", "status=not-valid-"])
def test_parse_invalid_requirement(expression: str) -> None:
    with pytest.raises(InvalidSelector):
        parse(expression)


def test_parse_error_position() -> None:
    with pytest.raises(SelectorParseException) as exc_info:
        parse("status=a@")
    assert exc_info.value.position == 8
    assert exc_info.value.value == "@"


@pytest.mark.parametrize("expression", ["status in ()", "status notin ()", "status notin ( )", "type=range,status in ()"])
def test_parse_empty_value_set(expression: str) -> None:
    with pytest.raises(SelectorParseException) as exc_info:
        parse(expression)
    assert exc_info.value.value == "("
    assert "requires at least one value" in exc_info.value.message


def test_parse_empty_value_set_position() -> None:
    with pytest.raises(InvalidSelector) as exc_info:
        parse("status notin ()")
    assert exc_info.value.position == 13


def test_parse_str_roundtrip() -> None:
    expression = "status=reserved,type in (default,untagged)"
    assert str(parse(expression)) == expression


def test_parse_from_threads() -> None:
    expressions = [f"key{i}=value{i},other notin (a,b)" for i in range(200)]
    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
        selectors = list(executor.map(parse, expressions))
    for i, selector in enumerate(selectors):
        assert selector.matches({f"key{i}": f"value{i}"})
        assert not selector.matches({f"key{i}": f"value{i}", "other": "a"})
