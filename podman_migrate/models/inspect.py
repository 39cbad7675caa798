"""Typed schemas for runtime introspection output.

Field names follow the JSON emitted by ``docker inspect``, ``docker network
inspect``, ``docker ... ls --format json`` and ``podman info --format json``.
Unknown keys are ignored so newer runtime releases keep parsing.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InspectModel(BaseModel):
    """Base model for runtime JSON records."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# List rows


class VolumeListEntry(InspectModel):
    """One row of ``docker volume ls --format json``."""

    name: str = Field(alias="Name")


class NetworkListEntry(InspectModel):
    """One row of ``docker network ls --format json``."""

    name: str = Field(alias="Name")


class ContainerListEntry(InspectModel):
    """One row of ``docker container ls -a --format json``."""

    names: str = Field(alias="Names")

    @property
    def name(self) -> str:
        """Primary container name (legacy links add comma-separated aliases)."""
        return self.names.split(",")[0].strip()


# Container inspect


class ContainerState(InspectModel):
    running: bool = Field(default=False, alias="Running")


class RestartPolicyRecord(InspectModel):
    name: str = Field(default="", alias="Name")
    maximum_retry_count: int = Field(default=0, alias="MaximumRetryCount")

    @field_validator("name", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        return v or ""


class PortBindingRecord(InspectModel):
    """Host binding for a published port."""

    host_ip: str | None = Field(default=None, alias="HostIp")
    host_port: str = Field(default="", alias="HostPort")


class HostConfig(InspectModel):
    restart_policy: RestartPolicyRecord = Field(
        default_factory=RestartPolicyRecord, alias="RestartPolicy"
    )
    # Requested bindings; kept while the container is stopped
    port_bindings: dict[str, list[PortBindingRecord] | None] = Field(
        default_factory=dict, alias="PortBindings"
    )

    @field_validator("port_bindings", mode="before")
    @classmethod
    def null_bindings(cls, v):
        return v or {}


class MountRecord(InspectModel):
    """Entry of the ``Mounts`` array."""

    type: str = Field(alias="Type")
    name: str | None = Field(default=None, alias="Name")
    source: str = Field(default="", alias="Source")
    destination: str = Field(alias="Destination")
    rw: bool = Field(default=True, alias="RW")


class EndpointIPAMConfig(InspectModel):
    """Addresses requested with --ip / --ip6 when the container was created."""

    ipv4_address: str | None = Field(default=None, alias="IPv4Address")


class EndpointRecord(InspectModel):
    """Per-network attachment settings."""

    # Only populated while the container is running
    ip_address: str | None = Field(default=None, alias="IPAddress")
    ipam_config: EndpointIPAMConfig | None = Field(default=None, alias="IPAMConfig")

    @property
    def static_address(self) -> str | None:
        """Live address, falling back to the configured one."""
        if self.ip_address:
            return self.ip_address
        return self.ipam_config.ipv4_address if self.ipam_config else None


class NetworkSettings(InspectModel):
    # A port key maps to None when it is exposed but not published
    ports: dict[str, list[PortBindingRecord] | None] = Field(default_factory=dict, alias="Ports")
    networks: dict[str, EndpointRecord | None] = Field(default_factory=dict, alias="Networks")

    @field_validator("ports", "networks", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return v or {}


class ContainerInspect(InspectModel):
    """Single element of the ``docker inspect <container>`` array."""

    name: str = Field(default="", alias="Name")
    state: ContainerState = Field(default_factory=ContainerState, alias="State")
    host_config: HostConfig = Field(default_factory=HostConfig, alias="HostConfig")
    mounts: list[MountRecord] = Field(default_factory=list, alias="Mounts")
    network_settings: NetworkSettings = Field(
        default_factory=NetworkSettings, alias="NetworkSettings"
    )

    @field_validator("mounts", mode="before")
    @classmethod
    def null_mounts(cls, v):
        return v or []


# Network inspect


class IPAMConfigRecord(InspectModel):
    subnet: str | None = Field(default=None, alias="Subnet")
    gateway: str | None = Field(default=None, alias="Gateway")
    ip_range: str | None = Field(default=None, alias="IPRange")


class IPAMRecord(InspectModel):
    config: list[IPAMConfigRecord] = Field(default_factory=list, alias="Config")

    @field_validator("config", mode="before")
    @classmethod
    def null_config(cls, v):
        return v or []


class NetworkInspect(InspectModel):
    """Single element of the ``docker network inspect <name>`` array."""

    name: str = Field(alias="Name")
    driver: str = Field(default="", alias="Driver")
    ipam: IPAMRecord = Field(default_factory=IPAMRecord, alias="IPAM")


# Target info


class StoreInfo(InspectModel):
    volume_path: str = Field(alias="volumePath")


class TargetInfo(InspectModel):
    """Subset of ``podman info --format json``."""

    store: StoreInfo
