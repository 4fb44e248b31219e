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

import pytest

from netalloc.asn import Asn, InvalidAsn


@pytest.mark.parametrize("number", [0, 1, 64512, 65535, 65536, 4200000000, 4294967295])
def test_asn_valid(number: int) -> None:
    asn = Asn.new(number, {"site": "dc1"})
    assert asn.number == number
    assert asn.labels == {"site": "dc1"}
    assert str(asn) == f"AS{number}"


@pytest.mark.parametrize("number", [-1, 4294967296, "65000", 650.0])
def test_asn_invalid(number) -> None:
    with pytest.raises(InvalidAsn) as exc_info:
        Asn.new(number)
    assert exc_info.value.number == number


@pytest.mark.parametrize(
    "number, documentation, private, reserved",
    [
        (1, False, False, False),
        (64495, False, False, False),
        (64496, True, False, False),
        (64511, True, False, False),
        (64512, False, True, False),
        (65534, False, True, False),
        (65535, False, False, True),
        (65536, True, False, False),
        (65551, True, False, False),
        (65552, False, False, False),
        (4199999999, False, False, False),
        (4200000000, False, True, False),
        (4294967294, False, True, False),
        (4294967295, False, False, True),
    ],
)
def test_asn_ranges(number: int, documentation: bool, private: bool, reserved: bool) -> None:
    asn = Asn.new(number)
    assert asn.is_documentation() is documentation
    assert asn.is_private() is private
    assert asn.is_reserved() is reserved


def test_asn_labels() -> None:
    assert Asn.new(65000).labels == {}
    assert Asn.new(65000, None) == Asn.new(65000, {})
    with pytest.raises(Exception):
        Asn.new(65000, {"site": 1})

