"""Migration data models and their rendering into target runtime options."""

from pydantic import BaseModel, Field

from ..constants import OWNERSHIP_FIX_FLAG, UNSPECIFIED_HOST_IPS
from .enums import MountKind, MountMode, NetworkDriver, ProtocolLiteral, RestartPolicy


class MountSpec(BaseModel):
    """Volume or bind mount to reproduce on the target container."""

    kind: MountKind
    source: str  # volume name or host path
    destination: str
    mode: MountMode = "rw"
    ownership_fix: bool = False

    def to_args(self) -> list[str]:
        mode = self.mode
        if self.ownership_fix:
            mode = f"{mode},{OWNERSHIP_FIX_FLAG}"
        return ["-v", f"{self.source}:{self.destination}:{mode}"]


class PortMapping(BaseModel):
    """Single published port binding."""

    host_ip: str | None = None
    host_port: str
    container_port: str
    protocol: ProtocolLiteral = "tcp"

    def to_args(self) -> list[str]:
        # An empty host port asks the runtime for an ephemeral one
        binding = f"{self.container_port}/{self.protocol}"
        if self.host_port:
            binding = f"{self.host_port}:{binding}"
        if self.host_ip and self.host_ip not in UNSPECIFIED_HOST_IPS:
            host_ip = f"[{self.host_ip}]" if ":" in self.host_ip else self.host_ip
            binding = f"{host_ip}:{binding}" if self.host_port else f"{host_ip}::{binding}"
        return ["-p", binding]


class NetworkAttachment(BaseModel):
    """Network a container joins, with an optional static address."""

    network_name: str
    ip_address: str | None = None

    def to_args(self) -> list[str]:
        args = [f"--network={self.network_name}"]
        if self.ip_address:
            args.append(f"--ip={self.ip_address}")
        return args


class ContainerSnapshot(BaseModel):
    """Everything needed to recreate one container on the target runtime."""

    name: str
    was_running: bool
    restart_policy: RestartPolicy = RestartPolicy.NONE
    restart_max_retries: int = 0
    mounts: list[MountSpec] = Field(default_factory=list)
    ports: list[PortMapping] = Field(default_factory=list)
    networks: list[NetworkAttachment] = Field(default_factory=list)
    image_ref: str

    def restart_args(self) -> list[str]:
        """Restart flag, omitted entirely for the NONE policy."""
        if self.restart_policy is RestartPolicy.NONE:
            return []
        value = self.restart_policy.value
        if self.restart_policy is RestartPolicy.ON_FAILURE and self.restart_max_retries > 0:
            value = f"{value}:{self.restart_max_retries}"
        return [f"--restart={value}"]

    def run_args(self) -> list[str]:
        """Arguments for ``run``, each option a discrete argument."""
        args = ["-d", "--name", self.name, *self.restart_args()]
        for mount in self.mounts:
            args.extend(mount.to_args())
        for port in self.ports:
            args.extend(port.to_args())
        for network in self.networks:
            args.extend(network.to_args())
        args.append(self.image_ref)
        return args


class NetworkDef(BaseModel):
    """User-defined network to create on the target runtime."""

    name: str
    driver: NetworkDriver = NetworkDriver.BRIDGE
    subnet: str | None = None
    gateway: str | None = None
    ip_range: str | None = None

    def create_args(self, default_driver: NetworkDriver = NetworkDriver.BRIDGE) -> list[str]:
        """Arguments for ``network create``; OTHER drivers use ``default_driver``."""
        driver = default_driver if self.driver is NetworkDriver.OTHER else self.driver
        args = ["--driver", driver.value]
        if self.subnet:
            args.extend(["--subnet", self.subnet])
        if self.gateway:
            args.extend(["--gateway", self.gateway])
        if self.ip_range:
            args.extend(["--ip-range", self.ip_range])
        args.append(self.name)
        return args
