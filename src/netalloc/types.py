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

# This file defines named type definitions for the netalloc code base

from collections.abc import Mapping
from typing import Optional

import pydantic

VlanId = int
"""
    An 802.1Q VLAN id, in the range [0, 4095].
"""

LabelMapping = Mapping[str, str]
OptionalLabels = Optional[LabelMapping]


class BaseModel(pydantic.BaseModel):
    """
    Base class for all data objects in netalloc. Data objects are values: they can't be changed after construction.
    """

    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")
