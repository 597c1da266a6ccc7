"""VMmanager 6 API client."""

from typing import Any

import httpx
from pydantic import ValidationError

from ..models.config import ProfileConfig
from ..models.task import TaskStatus
from ..models.vm import (
    DiskResize,
    NodeInfo,
    ReinstallParams,
    VMConfigUpdate,
    VMCreateParams,
    VMInfo,
    VmRef,
    VMResources,
)
from .exceptions import AuthenticationError, DecodeError, FieldMissingError, ResourceNotFoundError
from .fetcher import RetryableJSONFetcher, Sleep
from .orchestrator import (
    CHANGE_OWNER,
    CHANGE_PASSWORD,
    CREATE_VM,
    DELETE_VM,
    REINSTALL,
    RESIZE_DISK,
    UPDATE_CONFIG,
    UPDATE_RESOURCES,
    MutationOrchestrator,
)
from .session import Session
from .tasks import TaskOutcomePoller


class VMManagerClient:
    """Async client for the VMmanager 6 API."""

    def __init__(
        self,
        profile: ProfileConfig,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        """Initialize VMmanager client.

        Args:
            profile: Profile configuration
            http_client: Pre-built HTTP client, e.g. one with a mock transport
            sleep: Replacement for asyncio.sleep in retry and poll waits
        """
        self.profile = profile
        self.api_url = profile.api_url
        self.task_timeout = profile.task_timeout
        self.username: str | None = profile.auth.user
        self.session = Session(
            profile.api_url,
            auth_url=profile.token_url,
            verify_ssl=profile.verify_ssl,
            timeout=profile.timeout,
            client=http_client,
        )
        self.fetcher = RetryableJSONFetcher(
            self.session,
            max_attempts=profile.retry_attempts,
            backoff=profile.retry_backoff,
            sleep=sleep,
        )
        self.poller = TaskOutcomePoller(
            self.session,
            timeout=profile.task_timeout,
            poll_interval=profile.poll_interval,
            fail_on_terminal_status=profile.fail_on_terminal_status,
            sleep=sleep,
        )
        self.orchestrator = MutationOrchestrator(self.session, self.poller, profile.task_timeout)

    async def __aenter__(self) -> "VMManagerClient":
        """Async context manager entry.

        Returns:
            Self
        """
        try:
            await self.connect()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def connect(self) -> None:
        """Authenticate with the profile's credentials."""
        auth = self.profile.auth
        if auth.type == "token":
            if not auth.token:
                raise AuthenticationError("Token required for token auth")
            self.set_api_token(auth.token)
        else:
            if not auth.user or not auth.password:
                raise AuthenticationError("User and password required for password auth")
            await self.login(auth.user, auth.password)

    async def close(self) -> None:
        """Close the client connection."""
        await self.session.close()

    def set_api_token(self, token: str) -> None:
        self.session.set_api_token(token)

    async def login(self, username: str, password: str) -> None:
        """Log in with an account's credentials.

        Args:
            username: Account email
            password: Account password
        """
        self.username = username
        await self.session.login(username, password)

    # Read methods

    async def get_item_config(self, path: str, label: str) -> Any:
        """Read the ``data`` member of a resource.

        Args:
            path: Endpoint path
            label: Resource name for the error message

        Returns:
            The ``data`` member

        Raises:
            FieldMissingError: If the response has no ``data``
        """
        config = await self.fetcher.fetch(path)
        if config.get("data") is None:
            raise FieldMissingError("data", f"{label} CONFIG not readable")
        return config["data"]

    async def _get_list(self, path: str, params: dict[str, Any] | None = None) -> list[Any]:
        data = await self.fetcher.fetch(path, params=params)
        items = data.get("list")
        if items is None:
            return []
        if not isinstance(items, list):
            raise DecodeError("'list' is not an array", context=f"GET {path}")
        return items

    async def list_nodes(self) -> list[NodeInfo]:
        """Get list of cluster nodes.

        Returns:
            List of nodes
        """
        items = await self._get_list("/node")
        try:
            return [NodeInfo.model_validate(item) for item in items]
        except ValidationError as e:
            raise DecodeError(f"Invalid node record: {e.error_count()} validation error(s)", context="GET /node")

    async def list_vms(self) -> list[VMInfo]:
        """Get list of VMs.

        Returns:
            List of VMs
        """
        items = await self._get_list("/host")
        try:
            return [VMInfo.model_validate(item) for item in items]
        except ValidationError as e:
            raise DecodeError(f"Invalid VM record: {e.error_count()} validation error(s)", context="GET /host")

    async def get_vm_info(self, vmr: VmRef) -> VMInfo:
        """Get the listing record of one VM.

        Args:
            vmr: VM reference

        Returns:
            VM record

        Raises:
            ResourceNotFoundError: If no VM has this ID
        """
        items = await self._get_list("/host", params={"where": f"id EQ {vmr.vm_id}"})
        if not items:
            raise ResourceNotFoundError("VM", vmr.vm_id)
        try:
            return VMInfo.model_validate(items[0])
        except ValidationError as e:
            raise DecodeError(
                f"Invalid VM record: {e.error_count()} validation error(s)", context=f"VM {vmr.vm_id}"
            )

    async def get_vm_state(self, vmr: VmRef) -> str:
        """Get the state of a VM (active, stopped, creating, ...).

        Raises:
            FieldMissingError: If the record has no state
        """
        vm = await self.get_vm_info(vmr)
        if vm.state is None:
            raise FieldMissingError("state", "VM STATE not readable")
        return vm.state

    async def delete_url(self, path: str) -> None:
        """Send a bare DELETE to an arbitrary endpoint."""
        await self.session.delete(path)

    # Task methods

    async def get_task_status(self, task_id: int) -> TaskStatus:
        return await self.poller.query(task_id)

    async def wait_for_task(self, task_id: int, timeout: float | None = None) -> TaskStatus:
        """Wait for a task to complete.

        Args:
            task_id: Task ID
            timeout: Maximum wait time in seconds (defaults to the profile's)

        Returns:
            Final task status
        """
        return await self.poller.wait(task_id, self.task_timeout if timeout is None else timeout)

    # Mutations

    async def create_vm(self, params: VMCreateParams) -> int:
        """Create a new VM and wait for it to be provisioned.

        Args:
            params: VM parameters

        Returns:
            ID of the new VM
        """
        vm_id = await self.orchestrator.run(CREATE_VM, params.to_body(), name=params.name)
        try:
            return int(vm_id)
        except (TypeError, ValueError):
            raise DecodeError(f"VM id {vm_id!r} is not a number", context=f"create VM {params.name}")

    async def delete_vm(self, vmr: VmRef) -> None:
        await self.orchestrator.run(DELETE_VM, vm_id=vmr.vm_id)

    async def update_resources(self, vmr: VmRef, config: VMResources) -> None:
        """Change CPU, RAM or bandwidth allocation of a VM."""
        await self.orchestrator.run(UPDATE_RESOURCES, config.to_body(), vm_id=vmr.vm_id)

    async def resize_disk(self, disk: DiskResize) -> None:
        """Grow a VM disk.

        Args:
            disk: Disk ID and new size in MiB
        """
        await self.orchestrator.run(RESIZE_DISK, disk.to_body(), disk_id=disk.id)

    async def update_config(self, vmr: VmRef, config: VMConfigUpdate) -> None:
        """Edit name, comment or domain of a VM.

        Returns once the server accepts the change; any task it starts is
        not waited for.
        """
        await self.orchestrator.run(UPDATE_CONFIG, config.to_body(), vm_id=vmr.vm_id)

    async def reinstall(self, vmr: VmRef, config: ReinstallParams) -> None:
        await self.orchestrator.run(REINSTALL, config.to_body(), vm_id=vmr.vm_id)

    async def change_password(self, vmr: VmRef, password: str) -> None:
        await self.orchestrator.run(CHANGE_PASSWORD, {"password": password}, vm_id=vmr.vm_id)

    async def change_owner(self, vmr: VmRef, owner: int) -> None:
        """Move a VM to another account.

        Args:
            vmr: VM reference
            owner: Target account ID
        """
        await self.orchestrator.run(CHANGE_OWNER, {"account": owner}, vm_id=vmr.vm_id)
