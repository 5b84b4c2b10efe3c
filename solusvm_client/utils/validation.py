"""Client-side argument validators.

Every validator takes the value and the field name used in error messages,
returns the value to put on the wire and raises InvalidArgumentError when
the value is rejected. Passing here does not guarantee the SolusVM master
will accept the value.
"""

import ipaddress
import math
import re
from enum import Enum
from typing import Any

from solusvm_client.exceptions import InvalidArgumentError

_DIGITS_RE = re.compile(r"^\d+$")
_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")
_ALNUM_RE = re.compile(r"^[A-Za-z0-9]+$")
_HOSTNAME_RE = re.compile(r"^[\w.-]+$", re.ASCII)

_TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})
_FALSE_STRINGS = frozenset({"0", "false", "off", "no", ""})


class VirtualizationType(str, Enum):
    """Virtualization types understood by the SolusVM API."""

    XEN_HVM = "xen hvm"
    KVM = "kvm"
    XEN = "xen"
    OPENVZ = "openvz"


VIRTUALIZATION_TYPES: tuple[str, ...] = tuple(t.value for t in VirtualizationType)
NODE_GROUP_TYPES: tuple[str, ...] = (VirtualizationType.XEN_HVM.value, VirtualizationType.KVM.value)
BOOT_ORDERS: tuple[str, ...] = ("cd", "dc", "c", "d")

_TYPE_ALIASES = {"xen-hvm": VirtualizationType.XEN_HVM.value}


def validate_numeric_id(value: Any, field: str = "serverID") -> int | str:
    """Validate a server, node or client identifier (non-negative integer)."""
    if isinstance(value, bool):
        raise InvalidArgumentError(field, "must be a non-negative integer", value)
    if isinstance(value, int):
        if value < 0:
            raise InvalidArgumentError(field, "must be a non-negative integer", value)
        return value
    if isinstance(value, str) and _DIGITS_RE.match(value.strip()):
        return value.strip()
    raise InvalidArgumentError(field, "must be a non-negative integer", value)


def validate_number(value: Any, field: str) -> int | float | str:
    """Validate a non-negative quantity such as a memory or bandwidth limit."""
    if isinstance(value, bool):
        raise InvalidArgumentError(field, "must be a non-negative number", value)
    if isinstance(value, (int, float)):
        if value < 0 or not math.isfinite(value):
            raise InvalidArgumentError(field, "must be a non-negative number", value)
        return value
    if isinstance(value, str) and _NUMBER_RE.match(value.strip()):
        return value.strip()
    raise InvalidArgumentError(field, "must be a non-negative number", value)


def validate_choice(value: Any, field: str, allowed: tuple[str, ...]) -> str:
    """Validate membership of a fixed set of values."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        value = _TYPE_ALIASES.get(value, value)
        if value in allowed:
            return value
    raise InvalidArgumentError(field, "must be one of the allowed values", value, allowed=allowed)


def validate_virtualization_type(value: Any, field: str = "type") -> str:
    """Validate a virtualization type (xen hvm, kvm, xen, openvz)."""
    return validate_choice(value, field, VIRTUALIZATION_TYPES)


def validate_node_group_type(value: Any, field: str = "type") -> str:
    """Validate a node group type (xen hvm, kvm)."""
    return validate_choice(value, field, NODE_GROUP_TYPES)


def validate_boot_order(value: Any, field: str = "bootorder") -> str:
    """Validate a boot order (cd, dc, c, d)."""
    return validate_choice(value, field, BOOT_ORDERS)


def validate_ip_address(value: Any, field: str = "ipaddr") -> str:
    """Validate an IPv4 or IPv6 literal."""
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return str(value)
    if not isinstance(value, str):
        raise InvalidArgumentError(field, "must be a valid IPv4 or IPv6 address", value)
    try:
        ipaddress.ip_address(value)
    except ValueError:
        raise InvalidArgumentError(field, "must be a valid IPv4 or IPv6 address", value) from None
    return value


def validate_boolean(value: Any, field: str) -> bool:
    """Coerce true/false, 1/0, yes/no, on/off into a bool.

    Anything unrecognised is an error rather than a default.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    raise InvalidArgumentError(field, "must be boolean", value)


def validate_username(value: Any, field: str = "username") -> str:
    """Validate a client username (letters and digits only)."""
    if isinstance(value, str) and _ALNUM_RE.match(value):
        return value
    raise InvalidArgumentError(field, "must contain only letters and digits", value)


def validate_hostname(value: Any, field: str = "hostname") -> str:
    """Validate a hostname (letters, digits, hyphen, dot, underscore)."""
    if isinstance(value, str) and _HOSTNAME_RE.match(value):
        return value
    raise InvalidArgumentError(
        field, "may only contain letters, digits, '-', '.' and '_'", value
    )


def passthrough(value: Any, field: str) -> Any:
    """Accept any value; the SolusVM master validates it."""
    return value
