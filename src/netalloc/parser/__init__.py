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

from typing import Optional

from netalloc.labels import InvalidSelector


class SelectorParseException(InvalidSelector):
    """Exception occurring during the parsing of a label selector expression"""

    def __init__(self, position: int, value: object, msg: Optional[str] = None) -> None:
        if msg is None:
            msg = "Syntax error at token %s (position %d)" % (value, position)
        else:
            msg = "Syntax error at position %d: %s" % (position, msg)
        super().__init__(msg)
        self.position = position
        self.value = value


from netalloc.parser.plySelectorParser import parse  # noqa: E402
