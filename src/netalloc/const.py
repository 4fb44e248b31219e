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

from enum import Enum

# The 802.1Q VID field is 12 bits wide
VLAN_ID_SPACE = 4096
VLAN_MIN = 0
VLAN_MAX = VLAN_ID_SPACE - 1


class VlanRole(str, Enum):
    """
    The roles of the VLAN ids that are never available for allocation.
    """

    untagged = "untagged"
    default = "default"
    reserved = "reserved"


RESERVED_VLANS: dict[int, VlanRole] = {
    0: VlanRole.untagged,
    1: VlanRole.default,
    VLAN_MAX: VlanRole.reserved,
}

LABEL_TYPE = "type"
LABEL_STATUS = "status"
STATUS_RESERVED = "reserved"


def reserved_vlan_labels(role: VlanRole) -> dict[str, str]:
    """The labels a registry seeds a reserved VLAN with"""
    return {LABEL_TYPE: role.value, LABEL_STATUS: STATUS_RESERVED}


# Autonomous system numbers are 32-bit unsigned integers (RFC 6793)
ASN_MIN = 0
ASN_MAX = 2**32 - 1

# RFC 5398
ASN_DOCUMENTATION_RANGES = [(64496, 64511), (65536, 65551)]
# RFC 6996
ASN_PRIVATE_RANGES = [(64512, 65534), (4200000000, 4294967294)]
# RFC 7300
ASN_RESERVED = [65535, 4294967295]

# Label names are limited to 63 characters, the optional prefix is a DNS subdomain
LABEL_NAME_MAX_LENGTH = 63
LABEL_PREFIX_MAX_LENGTH = 253

ENVIRON_FORCE_TTY = "NETALLOC_FORCE_TTY"
ENV_PREFIX = "NETALLOC"
