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
from pydantic import StrictInt, field_validator

from netalloc import const
from netalloc.labels import LabelSet
from netalloc.types import BaseModel, OptionalLabels


class InvalidAsn(Exception):
    def __init__(self, number: object) -> None:
        super().__init__(f"Invalid AS number {number}, an AS number is an integer in [{const.ASN_MIN}, {const.ASN_MAX}]")
        self.number = number


def _in_ranges(number: int, ranges: list[tuple[int, int]]) -> bool:
    return any(lower <= number <= upper for lower, upper in ranges)


class Asn(BaseModel):
    """
    A 32-bit autonomous system number with the labels attached to it.
    """

    number: StrictInt
    labels: LabelSet = LabelSet()

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: int) -> int:
        if not const.ASN_MIN <= v <= const.ASN_MAX:
            raise ValueError(f"AS number must be in [{const.ASN_MIN}, {const.ASN_MAX}], got {v}")
        return v

    @classmethod
    def new(cls, number: int, labels: OptionalLabels = None) -> "Asn":
        """
        :raises InvalidAsn: The number is not a 32-bit unsigned integer.
        """
        try:
            return cls(number=number, labels=labels)
        except pydantic.ValidationError as e:
            if any(error["loc"] == ("number",) for error in e.errors()):
                raise InvalidAsn(number) from e
            raise

    def is_documentation(self) -> bool:
        """Reserved for use in documentation and sample code (RFC 5398)"""
        return _in_ranges(self.number, const.ASN_DOCUMENTATION_RANGES)

    def is_private(self) -> bool:
        """Reserved for private use (RFC 6996)"""
        return _in_ranges(self.number, const.ASN_PRIVATE_RANGES)

    def is_reserved(self) -> bool:
        """The last AS number of the 16-bit and the 32-bit range, reserved by IANA (RFC 7300)"""
        return self.number in const.ASN_RESERVED

    def __str__(self) -> str:
        return f"AS{self.number}"
