"""SolusVM admin API client using httpx."""

import logging
import time
import uuid
from typing import Any

import httpx

from solusvm_client import __version__
from solusvm_client.core.actions import NO_DEFAULT, get_action
from solusvm_client.exceptions import (
    InvalidArgumentError,
    SolusVMConnectionError,
    SolusVMTimeoutError,
    TransportError,
)
from solusvm_client.utils.config import ConnectionIdentity, get_settings
from solusvm_client.utils.logging import get_logger, mask_sensitive

logger = get_logger(__name__)

RESPONSE_FORMAT = "json"
RESERVED_FIELDS = frozenset({"action", "id", "key", "rdtype"})

Response = str


class SolusVMClient:
    """Synchronous client for the SolusVM admin API.

    Every call posts one form to ``<url>/command.php`` over a fresh
    connection and returns the response body as text. Arguments are
    validated locally first; a rejected argument raises
    InvalidArgumentError and nothing is sent. The client holds no mutable
    state and can be shared between threads.
    """

    def __init__(
        self,
        url: str | None = None,
        api_id: str | None = None,
        api_key: str | None = None,
        *,
        timeout: float | None = None,
        ssl_verify: bool | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the SolusVM client.

        Args:
            url: Base URL of the SolusVM master (e.g. ``https://master:5656/api/admin``)
            api_id: API id of the account
            api_key: API key of the account
            timeout: Request timeout in seconds
            ssl_verify: Verify the master's TLS certificate
            transport: httpx transport to send requests through (mainly for tests)

        Raises:
            ConfigurationError: If url, id or key is missing
        """
        settings = get_settings()
        self._identity = ConnectionIdentity.create(
            url if url is not None else settings.solusvm_api_url,
            api_id if api_id is not None else settings.solusvm_api_id,
            api_key if api_key is not None else settings.solusvm_api_key,
        )
        self._timeout = timeout if timeout is not None else settings.solusvm_timeout
        self._ssl_verify = ssl_verify if ssl_verify is not None else settings.solusvm_ssl_verify
        self._transport = transport

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self._identity.url!r}, api_id={self._identity.api_id!r})"

    @property
    def identity(self) -> ConnectionIdentity:
        """The connection identity this client authenticates with."""
        return self._identity

    @property
    def timeout(self) -> float:
        """Request timeout in seconds."""
        return self._timeout

    @property
    def ssl_verify(self) -> bool:
        """Whether the master's TLS certificate is verified."""
        return self._ssl_verify

    def build_request(self, action: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Build the form fields ``execute`` would post for an action.

        Args:
            action: Remote action name (e.g. ``vserver-reboot``)
            params: Action specific fields

        Returns:
            Ordered mapping of form fields, credentials included
        """
        if not isinstance(action, str) or not action:
            raise InvalidArgumentError("action", "must be a non-empty string", action)

        params = params or {}
        reserved = RESERVED_FIELDS.intersection(params)
        if reserved:
            raise InvalidArgumentError(
                sorted(reserved)[0], "is set by the client and cannot be passed as a parameter"
            )

        data: dict[str, Any] = {"action": action}
        data.update(params)
        data["id"] = self._identity.api_id
        data["key"] = self._identity.api_key.get_secret_value()
        data["rdtype"] = RESPONSE_FORMAT
        return data

    def execute(self, action: str, params: dict[str, Any] | None = None) -> Response:
        """Post an action to the SolusVM API and return the raw response body.

        The HTTP status is not inspected: any body received is returned,
        including error payloads. Failed requests are not retried.

        Raises:
            SolusVMTimeoutError: If the request times out
            SolusVMConnectionError: If the master cannot be reached
            TransportError: For any other failure, including undecodable bodies
        """
        data = self.build_request(action, params)
        url = self._identity.command_url

        request_id = str(uuid.uuid4())[:8]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[{request_id}] → POST {url} {mask_sensitive(data)}")

        start_time = time.monotonic()

        try:
            with httpx.Client(
                timeout=self._timeout,
                verify=self._ssl_verify,
                transport=self._transport,
                headers={
                    "User-Agent": f"solusvm-client/{__version__}",
                    "Connection": "close",
                },
            ) as http:
                response = http.post(url, data=data)

        except httpx.TimeoutException as e:
            logger.debug(f"[{request_id}] timed out after {time.monotonic() - start_time:.2f}s")
            raise SolusVMTimeoutError(
                f"Request to {url} timed out after {self._timeout} seconds: {e}", url=url
            ) from e

        except httpx.NetworkError as e:
            logger.debug(f"[{request_id}] network error: {e}")
            raise SolusVMConnectionError(
                f"Cannot connect to SolusVM master at {self._identity.url}: {e}", url=url
            ) from e

        except httpx.RequestError as e:
            logger.debug(f"[{request_id}] transport error: {e}")
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"[{request_id}] ← {response.status_code} ({time.monotonic() - start_time:.2f}s)"
            )

        return response.text

    def call(self, name: str, **arguments: Any) -> Response:
        """Validate arguments for a named action and execute it.

        Fields are validated in the order the action declares them; the
        first rejected value raises InvalidArgumentError before any request
        is made.

        Args:
            name: Client method name of the action (e.g. ``change_boot_order``)
            **arguments: The action's keyword arguments

        Raises:
            KeyError: If the action is unknown
            TypeError: If an argument the action does not take is passed
        """
        spec = get_action(name)

        unexpected = set(arguments) - set(spec.arguments)
        if unexpected:
            raise TypeError(f"{name}() got unexpected argument(s): {', '.join(sorted(unexpected))}")

        params: dict[str, Any] = {}
        for field in spec.fields:
            if field.requires is not None and arguments.get(field.requires) is None:
                continue

            value = arguments.get(field.argument)
            if value is None:
                if field.optional:
                    continue
                if field.default is NO_DEFAULT:
                    raise InvalidArgumentError(field.error_label, "is required")
                value = field.default

            params[field.name] = field.validator(value, field.error_label)

        return self.execute(spec.action, params)

    # Power control
    def reboot(self, server_id: int | str) -> Response:
        """Reboot a virtual server."""
        return self.call("reboot", server_id=server_id)

    def boot(self, server_id: int | str) -> Response:
        """Boot a virtual server."""
        return self.call("boot", server_id=server_id)

    def shutdown(self, server_id: int | str) -> Response:
        """Shut down a virtual server."""
        return self.call("shutdown", server_id=server_id)

    def suspend(self, server_id: int | str) -> Response:
        """Suspend a virtual server."""
        return self.call("suspend", server_id=server_id)

    def unsuspend(self, server_id: int | str) -> Response:
        """Unsuspend a virtual server."""
        return self.call("unsuspend", server_id=server_id)

    def terminate(self, server_id: int | str, delete_client: bool | str = False) -> Response:
        """Terminate a virtual server.

        Args:
            server_id: Virtual server id
            delete_client: Also delete the owning client
        """
        return self.call("terminate", server_id=server_id, delete_client=delete_client)

    # ISO images and boot order
    def list_iso(self, type: str) -> Response:
        """List ISO images available for a virtualization type."""
        return self.call("list_iso", type=type)

    def mount_iso(self, server_id: int | str, iso: str) -> Response:
        """Mount an ISO image by filename."""
        return self.call("mount_iso", server_id=server_id, iso=iso)

    def unmount_iso(self, server_id: int | str) -> Response:
        """Unmount the currently mounted ISO image."""
        return self.call("unmount_iso", server_id=server_id)

    def change_boot_order(self, server_id: int | str, boot_order: str) -> Response:
        """Change the boot order (``cd``, ``dc``, ``c`` or ``d``)."""
        return self.call("change_boot_order", server_id=server_id, boot_order=boot_order)

    # Server information
    def get_vnc(self, server_id: int | str) -> Response:
        """Get the VNC address, port and password of a virtual server."""
        return self.call("get_vnc", server_id=server_id)

    def get_server_info(self, server_id: int | str) -> Response:
        """Get details of a virtual server."""
        return self.call("get_server_info", server_id=server_id)

    def get_server_state(self, server_id: int | str) -> Response:
        """Get bandwidth, memory, disk and IP state of a virtual server."""
        return self.call("get_server_state", server_id=server_id)

    def get_server_status(self, server_id: int | str) -> Response:
        """Get the current status of a virtual server."""
        return self.call("get_server_status", server_id=server_id)

    def vserver_exists(self, server_id: int | str) -> Response:
        """Check whether a virtual server exists."""
        return self.call("vserver_exists", server_id=server_id)

    # Clients
    def authenticate_client(self, username: str, password: str) -> Response:
        """Check a client's username and password."""
        return self.call("authenticate_client", username=username, password=password)

    def list_clients(self) -> Response:
        """List all clients."""
        return self.call("list_clients")

    def change_owner(self, server_id: int | str, client_id: int | str) -> Response:
        """Move a virtual server to another client."""
        return self.call("change_owner", server_id=server_id, client_id=client_id)

    # Hostname and credentials
    def change_hostname(self, server_id: int | str, hostname: str) -> Response:
        """Change the hostname of a virtual server."""
        return self.call("change_hostname", server_id=server_id, hostname=hostname)

    def change_root_password(self, server_id: int | str, root_password: str) -> Response:
        """Change the root password of a virtual server."""
        return self.call("change_root_password", server_id=server_id, root_password=root_password)

    def change_vnc_password(self, server_id: int | str, vnc_password: str) -> Response:
        """Change the VNC password of a virtual server."""
        return self.call("change_vnc_password", server_id=server_id, vnc_password=vnc_password)

    # IP addresses
    def add_ip(
        self,
        server_id: int | str,
        ipv4addr: str | None = None,
        forceaddip: bool | str = False,
    ) -> Response:
        """Add an IP address to a virtual server.

        Without ``ipv4addr`` the master picks the next free address and
        ``forceaddip`` is not sent.

        Args:
            server_id: Virtual server id
            ipv4addr: Specific address to add
            forceaddip: Add the address even if it is not in the node's pool
        """
        return self.call("add_ip", server_id=server_id, ipv4addr=ipv4addr, forceaddip=forceaddip)

    def delete_ip(self, server_id: int | str, ipaddr: str) -> Response:
        """Remove an IP address from a virtual server."""
        return self.call("delete_ip", server_id=server_id, ipaddr=ipaddr)

    # Plans and resources
    def change_plan(self, server_id: int | str, plan: str, change_hdd: bool | str = False) -> Response:
        """Move a virtual server to another plan.

        Args:
            server_id: Virtual server id
            plan: Plan name
            change_hdd: Also resize the disk to the plan's size
        """
        return self.call("change_plan", server_id=server_id, plan=plan, change_hdd=change_hdd)

    def change_bandwidth(
        self, server_id: int | str, limit: int | str, overlimit: int | str
    ) -> Response:
        """Change the bandwidth limit and over-limit of a virtual server."""
        return self.call("change_bandwidth", server_id=server_id, limit=limit, overlimit=overlimit)

    def change_memory(self, server_id: int | str, memory: int | str) -> Response:
        """Change the memory of a virtual server."""
        return self.call("change_memory", server_id=server_id, memory=memory)

    def change_disk_size(self, server_id: int | str, hdd: int | str) -> Response:
        """Change the disk size of a virtual server."""
        return self.call("change_disk_size", server_id=server_id, hdd=hdd)

    def rebuild(self, server_id: int | str, template: str) -> Response:
        """Rebuild a virtual server from a template. All data is lost."""
        return self.call("rebuild", server_id=server_id, template=template)

    # Listings
    def list_servers(self, node_id: int | str) -> Response:
        """List the virtual servers on a node."""
        return self.call("list_servers", node_id=node_id)

    def list_templates(self, type: str) -> Response:
        """List templates for a virtualization type."""
        return self.call("list_templates", type=type)

    def list_plans(self, type: str) -> Response:
        """List plans for a virtualization type."""
        return self.call("list_plans", type=type)

    def list_nodes_by_id(self, type: str) -> Response:
        """List node ids for a virtualization type."""
        return self.call("list_nodes_by_id", type=type)

    def list_nodes_by_name(self, type: str) -> Response:
        """List node names for a virtualization type."""
        return self.call("list_nodes_by_name", type=type)

    def get_node_ips(self, node_id: int | str) -> Response:
        """List the IP addresses of a node."""
        return self.call("get_node_ips", node_id=node_id)

    def list_node_groups(self, type: str) -> Response:
        """List node groups (``xen hvm`` or ``kvm`` only)."""
        return self.call("list_node_groups", type=type)
