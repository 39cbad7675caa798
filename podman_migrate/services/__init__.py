"""Resource migrators and the orchestrator that sequences them."""

from .containers import ContainerMigrator
from .images import ImageMigrator
from .networks import NetworkMigrator
from .orchestrator import MigrationOrchestrator
from .volumes import VolumeMigrator

__all__ = [
    "ContainerMigrator",
    "ImageMigrator",
    "MigrationOrchestrator",
    "NetworkMigrator",
    "VolumeMigrator",
]
