"""Declarative descriptions of every SolusVM API action.

Each public client method is one ``ActionSpec``: the remote action name and
the ordered fields it sends. ``SolusVMClient.call`` validates the arguments
field by field in that order and stops at the first rejected value.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from solusvm_client.utils.validation import (
    passthrough,
    validate_boolean,
    validate_boot_order,
    validate_hostname,
    validate_ip_address,
    validate_node_group_type,
    validate_number,
    validate_numeric_id,
    validate_username,
    validate_virtualization_type,
)

Validator = Callable[[Any, str], Any]

NO_DEFAULT = object()


@dataclass(frozen=True)
class ActionField:
    """One form field sent with an action.

    Attributes:
        name: Field name on the wire (e.g. ``vserverid``)
        argument: Keyword argument of the client method supplying the value
        validator: Called as ``validator(value, label)``; returns the wire value
        label: Field name used in validation errors
        optional: Omit the field when the argument is None
        default: Value used when the argument is not supplied
        requires: Only send (and validate) this field when that argument is set
    """

    name: str
    argument: str
    validator: Validator = passthrough
    label: str | None = None
    optional: bool = False
    default: Any = NO_DEFAULT
    requires: str | None = None

    @property
    def error_label(self) -> str:
        return self.label or self.name


@dataclass(frozen=True)
class ActionSpec:
    """A remote action and the fields it sends."""

    action: str
    fields: tuple[ActionField, ...] = field(default_factory=tuple)
    description: str = ""

    @property
    def arguments(self) -> tuple[str, ...]:
        return tuple(f.argument for f in self.fields)


def _server_id() -> ActionField:
    return ActionField("vserverid", "server_id", validate_numeric_id, label="serverID")


def _node_id() -> ActionField:
    return ActionField("nodeid", "node_id", validate_numeric_id, label="nodeID")


def _virt_type() -> ActionField:
    return ActionField("type", "type", validate_virtualization_type)


def _server_action(action: str, description: str, *extra: ActionField) -> ActionSpec:
    return ActionSpec(action, (_server_id(), *extra), description)


ACTIONS: dict[str, ActionSpec] = {
    # Power control
    "reboot": _server_action("vserver-reboot", "Reboot a virtual server"),
    "boot": _server_action("vserver-boot", "Boot a virtual server"),
    "shutdown": _server_action("vserver-shutdown", "Shut down a virtual server"),
    "suspend": _server_action("vserver-suspend", "Suspend a virtual server"),
    "unsuspend": _server_action("vserver-unsuspend", "Unsuspend a virtual server"),
    "terminate": _server_action(
        "vserver-terminate",
        "Terminate a virtual server",
        ActionField("deleteclient", "delete_client", validate_boolean, default=False),
    ),
    # ISO and boot
    "list_iso": ActionSpec("listiso", (_virt_type(),), "List available ISO images"),
    "mount_iso": _server_action(
        "vserver-mountiso", "Mount an ISO image", ActionField("iso", "iso")
    ),
    "unmount_iso": _server_action("vserver-unmountiso", "Unmount the mounted ISO image"),
    "change_boot_order": _server_action(
        "vserver-bootorder",
        "Change the boot order",
        ActionField("bootorder", "boot_order", validate_boot_order),
    ),
    # Server information
    "get_vnc": _server_action("vserver-vnc", "Get VNC address, port and password"),
    "get_server_info": _server_action("vserver-info", "Get virtual server details"),
    "get_server_state": _server_action("vserver-infoall", "Get virtual server state"),
    "get_server_status": _server_action("vserver-status", "Get virtual server status"),
    "vserver_exists": _server_action("vserver-checkexists", "Check a virtual server exists"),
    # Clients
    "authenticate_client": ActionSpec(
        "vserver-authenticate",
        (
            ActionField("username", "username", validate_username),
            ActionField("password", "password"),
        ),
        "Check client credentials",
    ),
    "list_clients": ActionSpec("client-list", (), "List clients"),
    "change_owner": _server_action(
        "vserver-changeowner",
        "Move a virtual server to another client",
        ActionField("clientid", "client_id", validate_numeric_id, label="clientID"),
    ),
    # Hostname and credentials
    "change_hostname": _server_action(
        "vserver-hostname",
        "Change the hostname",
        ActionField("hostname", "hostname", validate_hostname),
    ),
    "change_root_password": _server_action(
        "vserver-rootpassword",
        "Change the root password",
        ActionField("rootpassword", "root_password"),
    ),
    "change_vnc_password": _server_action(
        "vserver-vncpass",
        "Change the VNC password",
        ActionField("vncpassword", "vnc_password"),
    ),
    # IP addresses
    "add_ip": _server_action(
        "vserver-addip",
        "Add an IP address",
        ActionField(
            "ipv4addr", "ipv4addr", validate_ip_address, label="ipaddr", optional=True
        ),
        ActionField(
            "forceaddip", "forceaddip", validate_boolean, default=False, requires="ipv4addr"
        ),
    ),
    "delete_ip": _server_action(
        "vserver-delip",
        "Remove an IP address",
        ActionField("ipaddr", "ipaddr", validate_ip_address),
    ),
    # Plans and resources
    "change_plan": _server_action(
        "vserver-change",
        "Change the plan",
        ActionField("plan", "plan"),
        ActionField("changehdd", "change_hdd", validate_boolean, label="changeHDD", default=False),
    ),
    "change_bandwidth": _server_action(
        "vserver-bandwidth",
        "Change bandwidth limits",
        ActionField("limit", "limit", validate_number),
        ActionField("overlimit", "overlimit", validate_number),
    ),
    "change_memory": _server_action(
        "vserver-change-memory",
        "Change memory",
        ActionField("memory", "memory", validate_number),
    ),
    "change_disk_size": _server_action(
        "vserver-change-hdd",
        "Change disk size",
        ActionField("hdd", "hdd", validate_number),
    ),
    "rebuild": _server_action(
        "vserver-rebuild", "Rebuild from a template", ActionField("template", "template")
    ),
    # Listings
    "list_servers": ActionSpec("node-virtualservers", (_node_id(),), "List servers on a node"),
    "list_templates": ActionSpec("listtemplates", (_virt_type(),), "List templates"),
    "list_plans": ActionSpec("listplans", (_virt_type(),), "List plans"),
    "list_nodes_by_id": ActionSpec("node-idlist", (_virt_type(),), "List node ids"),
    "list_nodes_by_name": ActionSpec("listnodes", (_virt_type(),), "List node names"),
    "get_node_ips": ActionSpec("node-iplist", (_node_id(),), "List IP addresses of a node"),
    "list_node_groups": ActionSpec(
        "listnodegroups",
        (ActionField("type", "type", validate_node_group_type),),
        "List node groups",
    ),
}


def get_action(name: str) -> ActionSpec:
    """Look up an action by its client method name."""
    try:
        return ACTIONS[name]
    except KeyError:
        raise KeyError(f"Unknown SolusVM action: {name}") from None
