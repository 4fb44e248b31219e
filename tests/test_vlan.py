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

import pydantic
import pytest

from netalloc.labels import LabelSet
from netalloc.vlan import InvalidVlan, InvalidVlanId, ReservedVlan, Vlan, relabel


@pytest.mark.parametrize("vlan_id", [0, 1, 2, 100, 4094, 4095])
def test_new_vlan(vlan_id: int) -> None:
    vlan = Vlan.new(vlan_id, {"key": "value"})
    assert vlan.id == vlan_id
    assert vlan.labels == {"key": "value"}


@pytest.mark.parametrize("vlan_id", [4096, 5000, 65535, -1])
def test_new_vlan_invalid_id(vlan_id: int) -> None:
    with pytest.raises(InvalidVlanId) as exc_info:
        Vlan.new(vlan_id)
    assert exc_info.value.vlan_id == vlan_id
    assert str(vlan_id) in exc_info.value.message


def test_new_vlan_id_not_an_integer() -> None:
    with pytest.raises(InvalidVlanId):
        Vlan.new("100")  # type: ignore[arg-type]


def test_new_vlan_invalid_labels() -> None:
    with pytest.raises(InvalidVlan) as exc_info:
        Vlan.new(100, {"key": 1})  # type: ignore[dict-item]
    assert not isinstance(exc_info.value, InvalidVlanId)

    with pytest.raises(InvalidVlan):
        Vlan.new(100, ["key", "value"])  # type: ignore[arg-type]


def test_vlan_without_labels() -> None:
    vlan = Vlan.new(10)
    assert isinstance(vlan.labels, LabelSet)
    assert vlan.labels == {}
    assert Vlan.new(10, None) == Vlan.new(10, {})


def test_vlan_is_a_value() -> None:
    labels = {"key": "value"}
    vlan = Vlan.new(100, labels)

    # the vlan doesn't alias the mapping it was created from
    labels["key"] = "other"
    assert vlan.labels["key"] == "value"

    with pytest.raises(TypeError):
        vlan.labels["key"] = "other"  # type: ignore[index]
    with pytest.raises(pydantic.ValidationError):
        vlan.id = 200  # type: ignore[misc]

    assert vlan == Vlan.new(100, {"key": "value"})
    assert vlan != Vlan.new(100, {"key": "other"})
    assert vlan != Vlan.new(101, {"key": "value"})
    assert len({vlan, Vlan.new(100, {"key": "value"})}) == 1


def test_with_labels() -> None:
    vlan = Vlan.new(100, {"a": "1", "b": "2"})
    relabelled = vlan.with_labels({"c": "3"})

    assert relabelled.id == 100
    assert relabelled.labels == {"c": "3"}
    # the original is unchanged
    assert vlan.labels == {"a": "1", "b": "2"}
    assert vlan.with_labels(None).labels == {}


def test_vlan_str() -> None:
    assert str(Vlan.new(100, {"type": "range", "key": "value"})) == "100 key=value,type=range"
    assert str(Vlan.new(5)) == "5 "


def test_is_reserved() -> None:
    assert [vlan_id for vlan_id in range(4096) if Vlan.new(vlan_id).is_reserved] == [0, 1, 4095]


def test_relabel() -> None:
    vlans = [Vlan.new(10, {"a": "b"}), Vlan.new(11), Vlan.new(12, {"c": "d"})]
    result = relabel(vlans, {"type": "range"})
    assert [vlan.id for vlan in result] == [10, 11, 12]
    assert all(vlan.labels == {"type": "range"} for vlan in result)
    assert relabel([], {"type": "range"}) == []


@pytest.mark.parametrize(
    "vlan_id, action, message",
    [
        (0, "deleted from the VLAN database", "VLAN 0 is the untagged VLAN, it cannot be deleted from the VLAN database"),
        (1, "added to the VLAN database", "VLAN 1 is the default VLAN, it cannot be added to the VLAN database"),
        (4095, "deleted from the VLAN database", "VLAN 4095 is reserved, it cannot be deleted from the VLAN database"),
    ],
)
def test_reserved_vlan_message(vlan_id: int, action: str, message: str) -> None:
    error = ReservedVlan(vlan_id, action)
    assert error.message == message
    assert error.vlan_id == vlan_id
