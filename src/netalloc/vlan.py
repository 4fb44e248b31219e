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

from collections.abc import Iterable

import pydantic
from pydantic import StrictInt, field_validator

from netalloc import const
from netalloc.labels import LabelSet
from netalloc.types import BaseModel, OptionalLabels, VlanId


class VlanException(Exception):
    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class InvalidVlan(VlanException):
    """The VLAN can't be constructed from the given values"""


class InvalidVlanId(InvalidVlan):
    def __init__(self, vlan_id: object) -> None:
        super().__init__(f"Invalid VLAN id {vlan_id}, a VLAN id is an integer in [{const.VLAN_MIN}, {const.VLAN_MAX}]")
        self.vlan_id = vlan_id


class ReservedVlan(VlanException):
    """A mutation targeted one of the reserved VLANs"""

    def __init__(self, vlan_id: VlanId, action: str) -> None:
        role = const.RESERVED_VLANS[vlan_id]
        if role == const.VlanRole.reserved:
            description = "is reserved"
        else:
            description = f"is the {role.value} VLAN"
        super().__init__(f"VLAN {vlan_id} {description}, it cannot be {action}")
        self.vlan_id = vlan_id


class VlanAlreadyExists(VlanException):
    def __init__(self, vlan_id: VlanId) -> None:
        super().__init__(f"VLAN {vlan_id} already exists in the VLAN database")
        self.vlan_id = vlan_id


class VlanNotFound(VlanException):
    def __init__(self, vlan_id: VlanId) -> None:
        super().__init__(f"VLAN {vlan_id} does not exist in the VLAN database")
        self.vlan_id = vlan_id


class NoFreeVlan(VlanException):
    """No free VLAN could be allocated"""


def is_reserved(vlan_id: VlanId) -> bool:
    return vlan_id in const.RESERVED_VLANS


class Vlan(BaseModel):
    """
    An 802.1Q VLAN id with the labels attached to it.

    A Vlan is a value: updating its labels produces a new Vlan with the same id.
    """

    id: StrictInt
    labels: LabelSet = LabelSet()

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: int) -> int:
        if not const.VLAN_MIN <= v <= const.VLAN_MAX:
            raise ValueError(f"VLAN id must be in [{const.VLAN_MIN}, {const.VLAN_MAX}], got {v}")
        return v

    @classmethod
    def new(cls, vlan_id: VlanId, labels: OptionalLabels = None) -> "Vlan":
        """
        Create a new Vlan.

        :param vlan_id: The VLAN id, in [0, 4095].
        :param labels: The labels to attach to the VLAN. None is the same as no labels.
        :raises InvalidVlanId: The id is outside the range of VLAN ids.
        :raises InvalidVlan: The labels are not a mapping of strings to strings.
        """
        try:
            return cls(id=vlan_id, labels=labels)
        except pydantic.ValidationError as e:
            if any(error["loc"] == ("id",) for error in e.errors()):
                raise InvalidVlanId(vlan_id) from e
            raise InvalidVlan(f"Invalid labels for VLAN {vlan_id}: {e.errors()[0]['msg']}") from e

    def with_labels(self, labels: OptionalLabels) -> "Vlan":
        """
        Return a Vlan with the same id and the given labels. The labels are replaced, not merged.
        """
        return Vlan.new(self.id, labels)

    @property
    def is_reserved(self) -> bool:
        return is_reserved(self.id)

    def __str__(self) -> str:
        return f"{self.id} {self.labels}"


def relabel(vlans: Iterable[Vlan], labels: OptionalLabels) -> list[Vlan]:
    """
    Return the given VLANs, in order, with their labels replaced by the given labels.
    """
    return [vlan.with_labels(labels) for vlan in vlans]
