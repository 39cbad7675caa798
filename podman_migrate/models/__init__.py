"""Data models for runtime migration."""

from .enums import MountKind, NetworkDriver, ResourceKind, RestartPolicy
from .results import ItemResult, KindReport, MigrationReport
from .snapshot import ContainerSnapshot, MountSpec, NetworkAttachment, NetworkDef, PortMapping

__all__ = [
    "ContainerSnapshot",
    "ItemResult",
    "KindReport",
    "MigrationReport",
    "MountKind",
    "MountSpec",
    "NetworkAttachment",
    "NetworkDef",
    "NetworkDriver",
    "PortMapping",
    "ResourceKind",
    "RestartPolicy",
]
