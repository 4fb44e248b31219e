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
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Optional, Union

from netalloc import allocation, const
from netalloc.labels import LabelSet, Selector
from netalloc.parser import parse
from netalloc.types import OptionalLabels, VlanId
from netalloc.util import ReadWriteLock
from netalloc.vlan import ReservedVlan, Vlan, VlanAlreadyExists, VlanNotFound, is_reserved

LOGGER = logging.getLogger(__name__)


class VlanIterator(Iterator[Vlan]):
    """
    A forward-only iterator over VLANs, ordered by id.

    The ids to visit are fixed when the iterator is created, the iterator doesn't observe later changes to the
    database it was created from. The Vlan objects are only built when they're accessed.

    Use it either as a regular python iterator or drive it explicitly:

        it = db.iterate_free()
        while it.advance():
            if it.has_consecutive(10):
                ...
    """

    def __init__(self, vlan_ids: Sequence[VlanId], lookup: Callable[[VlanId], Vlan]) -> None:
        """
        :param vlan_ids: The ids to visit, sorted ascending without duplicates.
        :param lookup: Produces the Vlan for an id in vlan_ids.
        """
        self._vlan_ids: tuple[VlanId, ...] = tuple(vlan_ids)
        self._lookup = lookup
        self._position = -1

    def advance(self) -> bool:
        """
        Move to the next VLAN. Returns False once the iterator is exhausted, and keeps returning False after that.
        """
        if self._position < len(self._vlan_ids):
            self._position += 1
        return self._position < len(self._vlan_ids)

    def _is_positioned(self) -> bool:
        return 0 <= self._position < len(self._vlan_ids)

    def current(self) -> Vlan:
        """
        The VLAN the iterator is positioned on. Only valid after a call to `advance` returned True.
        """
        if not self._is_positioned():
            raise IndexError("The iterator is not positioned on a VLAN, call advance() first")
        return self._lookup(self._vlan_ids[self._position])

    def has_consecutive(self, amount: int) -> bool:
        """
        Check whether the current VLAN starts a run of `amount` VLANs with consecutive ids in this iterator.
        The current VLAN counts as the first one of the run.
        """
        if amount < 1 or not self._is_positioned():
            return False
        last = self._position + amount - 1
        if last >= len(self._vlan_ids):
            return False
        # ids are sorted and unique, so the run is consecutive iff the ids at both ends are amount - 1 apart
        return self._vlan_ids[last] - self._vlan_ids[self._position] == amount - 1

    def remaining(self) -> int:
        """The number of VLANs after the current one"""
        return max(len(self._vlan_ids) - self._position - 1, 0)

    def __iter__(self) -> "VlanIterator":
        return self

    def __next__(self) -> Vlan:
        if not self.advance():
            raise StopIteration
        return self.current()


class VlanDB:
    """
    An in-memory registry of allocated VLANs.

    The registry always contains the reserved VLANs 0 (untagged), 1 (default) and 4095 (reserved), they can't be
    replaced or deleted. All operations are safe to use from multiple threads.

    :param labels: labels describing the registry itself, e.g. the device or the site it manages VLANs for.
    """

    def __init__(self, labels: OptionalLabels = None) -> None:
        self._lock = ReadWriteLock()
        self._store: dict[VlanId, Vlan] = {}
        self._labels = LabelSet(labels)
        for vlan_id, role in const.RESERVED_VLANS.items():
            self._store[vlan_id] = Vlan.new(vlan_id, const.reserved_vlan_labels(role))

    # VLAN operations

    def add(self, vlan: Vlan) -> None:
        """
        Add a VLAN that is not in the registry yet.

        :raises VlanAlreadyExists: The registry already contains a VLAN with this id.
        """
        with self._lock.write():
            if vlan.id in self._store:
                raise VlanAlreadyExists(vlan.id)
            self._check_mutable(vlan.id, "added to the VLAN database")
            self._store[vlan.id] = vlan
        LOGGER.debug("Added VLAN %s", vlan)

    def set(self, vlan: Vlan) -> None:
        """
        Add the VLAN, or replace the VLAN with the same id.

        :raises ReservedVlan: The VLAN has a reserved id.
        """
        self._check_mutable(vlan.id, "added to the VLAN database")
        with self._lock.write():
            self._store[vlan.id] = vlan
        LOGGER.debug("Set VLAN %s", vlan)

    def get(self, vlan_id: VlanId) -> Vlan:
        """
        :raises VlanNotFound: There is no VLAN with this id in the registry.
        """
        with self._lock.read():
            vlan = self._store.get(vlan_id)
        if vlan is None:
            raise VlanNotFound(vlan_id)
        return vlan

    def has(self, vlan_id: VlanId) -> bool:
        with self._lock.read():
            return vlan_id in self._store

    def delete(self, vlan_id: VlanId) -> None:
        """
        Delete a VLAN. Deleting a VLAN that is not in the registry does nothing.

        :raises ReservedVlan: The id is reserved.
        """
        self._check_mutable(vlan_id, "deleted from the VLAN database")
        with self._lock.write():
            deleted = self._store.pop(vlan_id, None)
        if deleted is not None:
            LOGGER.debug("Deleted VLAN %s", deleted)

    def count(self) -> int:
        with self._lock.read():
            return len(self._store)

    def count_free(self) -> int:
        return const.VLAN_ID_SPACE - self.count()

    def get_all(self) -> list[Vlan]:
        """
        All VLANs in the registry, ordered by id.
        """
        return list(self.iterate())

    def get_by_label(self, selector: Union[Selector, str]) -> list[Vlan]:
        """
        The VLANs of which the labels match the selector, ordered by id.

        :param selector: A Selector or a selector expression, e.g. `status=reserved`.
        :raises InvalidSelector: The selector expression is not valid.
        """
        if isinstance(selector, str):
            selector = parse(selector)
        return [vlan for vlan in self.iterate() if selector.matches(vlan.labels)]

    def iterate(self) -> VlanIterator:
        """
        Iterate over a snapshot of the VLANs in the registry.
        """
        with self._lock.read():
            snapshot = dict(self._store)
        return VlanIterator(sorted(snapshot), snapshot.__getitem__)

    def iterate_free(self) -> VlanIterator:
        """
        Iterate over a snapshot of the ids that are not in the registry. The VLANs produced by this iterator have no labels.
        """
        with self._lock.read():
            allocated = set(self._store)
        free = [vlan_id for vlan_id in range(const.VLAN_ID_SPACE) if vlan_id not in allocated]
        return VlanIterator(free, Vlan.new)

    # Search and allocation

    def find_vlan_range(self, lower: Optional[VlanId] = None, amount: int = 1) -> list[Vlan]:
        return allocation.find_vlan_range(self, lower, amount)

    def find_allocate_vlan(self, labels: OptionalLabels = None) -> Vlan:
        return allocation.find_allocate_vlan(self, labels)

    def add_vlan_list(self, vlans: Iterable[Vlan]) -> None:
        allocation.add_vlan_list(self, vlans)

    # Labels of the registry

    @property
    def labels(self) -> LabelSet:
        with self._lock.read():
            return self._labels

    def set_labels(self, labels: OptionalLabels) -> None:
        with self._lock.write():
            self._labels = LabelSet(labels)

    def merge_labels(self, labels: OptionalLabels) -> None:
        with self._lock.write():
            self._labels = self._labels.merge(labels)

    def clear_labels(self) -> None:
        with self._lock.write():
            self._labels = LabelSet()

    def _check_mutable(self, vlan_id: VlanId, action: str) -> None:
        if is_reserved(vlan_id):
            raise ReservedVlan(vlan_id, action)

    def __contains__(self, vlan_id: object) -> bool:
        return isinstance(vlan_id, int) and self.has(vlan_id)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> VlanIterator:
        return self.iterate()

    def __repr__(self) -> str:
        return f"VlanDB(labels={str(self.labels)!r}, count={self.count()})"
