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

import re
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Any, Optional

import more_itertools
import pydantic
import pydantic_core.core_schema
from pydantic import GetCoreSchemaHandler, field_validator, model_validator

from netalloc import const
from netalloc.types import BaseModel, OptionalLabels

_label_name_regex = re.compile(r"^[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$")
_dns_subdomain_regex = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")


class InvalidSelector(Exception):
    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


def validate_label_key(key: str) -> str:
    """
    Validate a qualified label key: an optional DNS subdomain prefix followed by a '/', and a name of at most 63
    characters.
    """
    prefix, sep, name = key.rpartition("/")
    if sep:
        if not prefix or len(prefix) > const.LABEL_PREFIX_MAX_LENGTH or not _dns_subdomain_regex.match(prefix):
            raise InvalidSelector(f"Invalid label key {key!r}: the prefix must be a DNS subdomain")
    if not name or len(name) > const.LABEL_NAME_MAX_LENGTH or not _label_name_regex.match(name):
        raise InvalidSelector(
            f"Invalid label key {key!r}: the name must be at most {const.LABEL_NAME_MAX_LENGTH} alphanumeric characters,"
            " '-', '_' or '.', starting and ending with an alphanumeric character"
        )
    return key


def validate_label_value(value: str) -> str:
    if value == "":
        return value
    if len(value) > const.LABEL_NAME_MAX_LENGTH or not _label_name_regex.match(value):
        raise InvalidSelector(
            f"Invalid label value {value!r}: the value must be empty or at most {const.LABEL_NAME_MAX_LENGTH} alphanumeric"
            " characters, '-', '_' or '.', starting and ending with an alphanumeric character"
        )
    return value


class LabelSet(Mapping[str, str]):
    """
    An immutable set of labels: a mapping of unique string keys to string values.
    """

    __slots__ = ("_labels",)

    def __init__(self, labels: OptionalLabels = None) -> None:
        if labels is None:
            labels = {}
        for key, value in labels.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValueError(f"Labels map strings to strings, got {key!r}: {value!r}")
        self._labels: dict[str, str] = dict(labels)

    def __getitem__(self, key: str) -> str:
        return self._labels[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __hash__(self) -> int:
        return hash(frozenset(self._labels.items()))

    def __repr__(self) -> str:
        return f"LabelSet({self._labels!r})"

    def __str__(self) -> str:
        return ",".join(f"{key}={self._labels[key]}" for key in sorted(self._labels))

    def merge(self, other: OptionalLabels) -> "LabelSet":
        """
        Return a new label set with the labels of both sets. On conflicting keys, the value of `other` wins.
        """
        if not other:
            return self
        return LabelSet({**self._labels, **other})

    def as_selector(self) -> "Selector":
        return Selector.from_set(self)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> pydantic_core.core_schema.CoreSchema:
        return pydantic_core.core_schema.no_info_plain_validator_function(to_label_set)


class Operator(str, Enum):
    equals = "="
    double_equals = "=="
    not_equals = "!="
    in_ = "in"
    not_in = "notin"
    exists = "exists"
    does_not_exist = "!"
    greater_than = "gt"
    less_than = "lt"


_single_value_operators = {Operator.equals, Operator.double_equals, Operator.not_equals}
_set_operators = {Operator.in_, Operator.not_in}
_existence_operators = {Operator.exists, Operator.does_not_exist}
_integer_operators = {Operator.greater_than, Operator.less_than}


class Requirement(BaseModel):
    """
    A single condition on a label set, e.g. `status in (reserved,allocated)`.
    """

    key: str
    operator: Operator
    values: tuple[str, ...] = ()

    @field_validator("values", mode="after")
    @classmethod
    def sort_values(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(sorted(set(v)))

    @model_validator(mode="after")
    def validate_requirement(self) -> "Requirement":
        validate_label_key(self.key)
        if self.operator in _set_operators:
            if not self.values:
                raise ValueError(f"operator {self.operator.value!r} requires at least one value")
        elif self.operator in _existence_operators:
            if self.values:
                raise ValueError(f"operator {self.operator.value!r} doesn't take values")
        else:
            value = more_itertools.one(
                self.values,
                too_short=ValueError(f"operator {self.operator.value!r} requires exactly one value"),
                too_long=ValueError(f"operator {self.operator.value!r} requires exactly one value"),
            )
            if self.operator in _integer_operators:
                try:
                    int(value)
                except ValueError:
                    raise ValueError(f"operator {self.operator.value!r} requires an integer value, got {value!r}")
                return self
        for value in self.values:
            validate_label_value(value)
        return self

    @classmethod
    def new(cls, key: str, operator: Operator, values: Iterable[str] = ()) -> "Requirement":
        """
        Create a requirement, raising an InvalidSelector when it's not valid.
        """
        try:
            return cls(key=key, operator=operator, values=tuple(values))
        except InvalidSelector:
            raise
        except pydantic.ValidationError as e:
            raise InvalidSelector(f"Invalid requirement on key {key!r}: {e.errors()[0]['msg']}") from e

    def matches(self, labels: Mapping[str, str]) -> bool:
        if self.operator in (Operator.equals, Operator.double_equals, Operator.in_):
            return self.key in labels and labels[self.key] in self.values
        if self.operator in (Operator.not_equals, Operator.not_in):
            return self.key not in labels or labels[self.key] not in self.values
        if self.operator == Operator.exists:
            return self.key in labels
        if self.operator == Operator.does_not_exist:
            return self.key not in labels
        # integer comparison
        if self.key not in labels:
            return False
        try:
            actual = int(labels[self.key])
        except ValueError:
            return False
        bound = int(self.values[0])
        if self.operator == Operator.greater_than:
            return actual > bound
        return actual < bound

    def __str__(self) -> str:
        if self.operator == Operator.exists:
            return self.key
        if self.operator == Operator.does_not_exist:
            return f"!{self.key}"
        if self.operator in _set_operators:
            return f"{self.key} {self.operator.value} ({','.join(self.values)})"
        if self.operator == Operator.greater_than:
            return f"{self.key}>{self.values[0]}"
        if self.operator == Operator.less_than:
            return f"{self.key}<{self.values[0]}"
        return f"{self.key}{self.operator.value}{self.values[0]}"


class Selector:
    """
    A conjunction of requirements: a label set matches a selector when it matches all of its requirements.

    Selectors are immutable, `add` returns a new selector.
    """

    __slots__ = ("_requirements", "_nothing")

    def __init__(self, requirements: Iterable[Requirement] = (), *, nothing: bool = False) -> None:
        self._requirements: tuple[Requirement, ...] = tuple(sorted(requirements, key=lambda r: r.key))
        self._nothing = nothing

    @classmethod
    def everything(cls) -> "Selector":
        """A selector that matches every label set"""
        return cls()

    @classmethod
    def nothing(cls) -> "Selector":
        """A selector that doesn't match any label set"""
        return cls(nothing=True)

    @classmethod
    def from_set(cls, labels: OptionalLabels) -> "Selector":
        """
        A selector that matches the label sets containing all the given labels.
        """
        if not labels:
            return cls.everything()
        return cls(Requirement.new(key, Operator.equals, [value]) for key, value in labels.items())

    @property
    def requirements(self) -> tuple[Requirement, ...]:
        return self._requirements

    def matches(self, labels: Optional[Mapping[str, str]]) -> bool:
        if self._nothing:
            return False
        if labels is None:
            labels = {}
        return all(requirement.matches(labels) for requirement in self._requirements)

    def empty(self) -> bool:
        return not self._nothing and not self._requirements

    def add(self, *requirements: Requirement) -> "Selector":
        if self._nothing:
            return self
        return Selector(self._requirements + requirements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._nothing == other._nothing and self._requirements == other._requirements

    def __hash__(self) -> int:
        return hash((self._nothing, self._requirements))

    def __repr__(self) -> str:
        return f"Selector({str(self)!r})"

    def __str__(self) -> str:
        if self._nothing:
            return "<nothing>"
        return ",".join(str(requirement) for requirement in self._requirements)


def to_label_set(value: object) -> LabelSet:
    """
    Convert the labels of a data object to a LabelSet. None is the same as no labels.
    """
    if value is None:
        return LabelSet()
    if isinstance(value, LabelSet):
        return value
    if not isinstance(value, Mapping):
        raise ValueError(f"labels must be a mapping, got {type(value).__name__}")
    return LabelSet(value)
