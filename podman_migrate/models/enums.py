"""Enum definitions for runtime migration."""

from enum import Enum
from typing import Literal

# Type aliases
ProtocolLiteral = Literal["tcp", "udp"]
MountMode = Literal["rw", "ro"]
ItemStatus = Literal["migrated", "failed", "skipped"]


class RestartPolicy(Enum):
    """Restart policies carried over to the target runtime."""

    NONE = "no"
    ALWAYS = "always"
    UNLESS_STOPPED = "unless-stopped"
    ON_FAILURE = "on-failure"

    @classmethod
    def from_source(cls, name: str | None) -> "RestartPolicy":
        """Map a source policy name, treating anything unrecognized as NONE."""
        for policy in cls:
            if policy.value == name:
                return policy
        return cls.NONE


class MountKind(Enum):
    """Mount kinds reproduced on the target runtime."""

    VOLUME = "volume"
    BIND = "bind"


class NetworkDriver(Enum):
    """Network drivers understood by the target runtime."""

    BRIDGE = "bridge"
    MACVLAN = "macvlan"
    IPVLAN = "ipvlan"
    OTHER = "other"

    @classmethod
    def from_source(cls, driver: str | None) -> "NetworkDriver":
        for candidate in (cls.BRIDGE, cls.MACVLAN, cls.IPVLAN):
            if candidate.value == driver:
                return candidate
        return cls.OTHER


class ResourceKind(Enum):
    """Resource kinds, in the order they should be migrated."""

    IMAGES = "images"
    VOLUMES = "volumes"
    NETWORKS = "networks"
    CONTAINERS = "containers"
