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

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

from netalloc import config, const
from netalloc.logging import TRACE
from netalloc.types import OptionalLabels, VlanId
from netalloc.vlan import NoFreeVlan, Vlan, VlanAlreadyExists

if TYPE_CHECKING:
    # Include imports from other modules here and use the quoted annotation in the definition to prevent import loops
    from netalloc.registry import VlanDB  # noqa: F401

LOGGER = logging.getLogger(__name__)


def find_vlan_range(db: "VlanDB", lower: Optional[VlanId] = None, amount: int = 1) -> list[Vlan]:
    """
    Find the block of `amount` free VLANs with consecutive ids that has the lowest ids, all of them at least `lower`.

    The database is not changed: the result reflects the state of the database when the search started and the caller
    has to add the VLANs to claim them, which may fail when another caller claimed one of them in the meantime.

    :param db: The database to search in.
    :param lower: The lowest id the block may start at, defaults to the vlan.range-min option.
    :param amount: The number of VLANs in the block.
    :return: The VLANs of the block, ordered by id and without labels, or an empty list if there is no such block.
    """
    if lower is None:
        lower = config.vlan_range_min.get()
    if amount <= 0 or lower > const.VLAN_MAX:
        return []

    free = db.iterate_free()
    while free.advance():
        if free.current().id < lower:
            continue
        if free.remaining() + 1 < amount:
            break
        if free.has_consecutive(amount):
            result = [free.current()]
            for _ in range(amount - 1):
                free.advance()
                result.append(free.current())
            LOGGER.debug("Found free VLAN range %d-%d", result[0].id, result[-1].id)
            return result

    LOGGER.debug("No range of %d free VLANs found starting from VLAN %d", amount, lower)
    return []


def find_allocate_vlan(db: "VlanDB", labels: OptionalLabels = None) -> Vlan:
    """
    Allocate the free VLAN with the lowest id and attach the given labels to it.

    When another caller claims a candidate first, the next free VLAN is tried.

    :return: The allocated VLAN.
    :raises NoFreeVlan: All VLANs that were free when the search started have been claimed.
    """
    free = db.iterate_free()
    for candidate in free:
        vlan = candidate.with_labels(labels)
        try:
            db.add(vlan)
        except VlanAlreadyExists:
            LOGGER.log(TRACE, "VLAN %d was claimed concurrently, trying the next one", vlan.id)
            continue
        LOGGER.debug("Allocated VLAN %s", vlan)
        return vlan

    LOGGER.warning("Could not find a free VLAN to allocate, all VLANs are in use")
    raise NoFreeVlan("Could not find a free VLAN to allocate")


def add_vlan_list(db: "VlanDB", vlans: Iterable[Vlan]) -> None:
    """
    Add the given VLANs, in order. Stops at the first VLAN that can't be added and raises the error. The VLANs that were
    added before that one stay in the database.

    :raises VlanAlreadyExists: One of the VLANs is already in the database.
    """
    for vlan in vlans:
        db.add(vlan)
