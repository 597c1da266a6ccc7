"""VM models: references, listing records and request payloads."""

from typing import Any

from pydantic import BaseModel, Field


class VmRef(BaseModel):
    """Opaque handle to a VM on the server."""

    model_config = {"frozen": True}

    vm_id: int

    @classmethod
    def of(cls, vm_id: int) -> "VmRef":
        return cls(vm_id=vm_id)

    def __str__(self) -> str:
        return str(self.vm_id)


class VMInfo(BaseModel):
    """VM record from the /host listing."""

    model_config = {"extra": "allow"}

    id: int
    name: str | None = None
    state: str | None = None
    node: dict[str, Any] | None = None
    ip4: list[dict[str, Any]] | None = None
    cpu_number: int | None = None
    ram_mib: int | None = None
    disk_mib: int | None = None
    os: dict[str, Any] | None = None

    @property
    def node_name(self) -> str | None:
        return (self.node or {}).get("name")

    @property
    def addresses(self) -> list[str]:
        return [ip["ip_addr"] for ip in self.ip4 or [] if ip.get("ip_addr")]


class NodeInfo(BaseModel):
    """Cluster node record from the /node listing."""

    model_config = {"extra": "allow"}

    id: int
    name: str | None = None
    state: str | None = None
    ip_addr: str | None = None
    host_count: int | None = None
    cluster: dict[str, Any] | None = None


class _Payload(BaseModel):
    """Base for request bodies; unknown keys are passed through."""

    model_config = {"extra": "allow"}

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class VMCreateParams(_Payload):
    """Parameters for creating a new VM."""

    name: str
    cluster: int = Field(..., description="Cluster ID")
    account: int = Field(..., description="Owner account ID")
    os: int | None = Field(None, description="OS template ID")
    password: str | None = None
    domain: str | None = None
    preset: int | None = Field(None, description="Resource preset ID")
    cpu_number: int | None = Field(None, ge=1)
    ram_mib: int | None = Field(None, ge=1)
    hdd_mib: int | None = Field(None, ge=1)
    ipv4_number: int | None = Field(None, ge=0)
    node: int | None = Field(None, description="Pin to a node")
    comment: str | None = None


class VMResources(_Payload):
    """New resource allocation for an existing VM."""

    cpu_number: int | None = Field(None, ge=1)
    ram_mib: int | None = Field(None, ge=1)
    net_bandwidth_mbitps: int | None = Field(None, ge=0)
    io_read_mbitps: int | None = None
    io_write_mbitps: int | None = None


class DiskResize(BaseModel):
    """Target size for a VM disk."""

    id: int
    size_mib: int = Field(..., ge=1)

    def to_body(self) -> dict[str, Any]:
        return {"size_mib": self.size_mib}


class VMConfigUpdate(_Payload):
    """Editable VM attributes."""

    name: str | None = None
    comment: str | None = None
    domain: str | None = None


class ReinstallParams(_Payload):
    """Parameters for reinstalling a VM's operating system."""

    os: int = Field(..., description="OS template ID")
    password: str | None = None
    send_email_mode: str | None = None
