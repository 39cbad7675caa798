"""Network migration: recreate user-defined source networks on the target."""

from ..constants import PSEUDO_NETWORKS
from ..core.exceptions import CreationError, RuntimeCommandError
from ..core.runtime import SourceRuntime, TargetRuntime
from ..core.translation import build_network_def
from ..models.enums import NetworkDriver, ResourceKind
from ..models.results import ItemResult
from .base import BaseMigrator


class NetworkMigrator(BaseMigrator):
    """Create each source network on the target unless it already exists there.

    Existing target networks are never modified. Drivers the target does not
    support are replaced by bridge.
    """

    kind = ResourceKind.NETWORKS

    def __init__(self, source: SourceRuntime, target: TargetRuntime):
        super().__init__()
        self.source = source
        self.target = target

    async def enumerate(self) -> list[str]:
        return await self.source.list_networks()

    async def migrate_item(self, name: str) -> ItemResult:
        if name in PSEUDO_NETWORKS:
            return self.skipped(name, "no equivalent on the target runtime")

        if await self.target.network_exists(name):
            return self.skipped(name, "already exists on the target runtime")

        inspect = await self.source.inspect_network(name)
        network = build_network_def(inspect)
        if network.driver is NetworkDriver.OTHER:
            self.logger.warning(
                "Unsupported network driver, using default bridge",
                name=name,
                driver=inspect.driver,
            )

        try:
            await self.target.create_network(network.create_args())
        except RuntimeCommandError as e:
            raise CreationError(f"Failed to create network {name}: {e}") from e

        if network.driver is NetworkDriver.OTHER:
            return self.migrated(name, f"driver {inspect.driver} replaced by bridge")
        return self.migrated(name)
