"""Container migration.

Each container goes through the same sequence of stages, and a failing stage
abandons that container only:

1. capture   inspect the source container before anything mutates it
2. freeze    commit it to a namespaced image and move that image to the target
3. translate turn mounts, ports, networks and restart policy into run options
4. recreate  ``run -d`` the container on the target under the same name
5. restore   stop it again if it was not running at capture time

A frozen image that was loaded before a later stage failed stays on the
target; it is harmless and is reused if the migration is run again.
"""

import os
from collections.abc import Callable

from ..constants import DEFAULT_IMAGE_NAMESPACE
from ..core.exceptions import CommitError, CreationError, RuntimeCommandError
from ..core.runtime import SourceRuntime, TargetRuntime
from ..core.transfer import ImageArchiveTransfer
from ..core.translation import build_snapshot, snapshot_image_ref
from ..models.enums import ResourceKind
from ..models.inspect import ContainerInspect
from ..models.results import ItemResult
from ..models.snapshot import ContainerSnapshot
from .base import BaseMigrator


class ContainerMigrator(BaseMigrator):
    """Recreate source containers on the target with equivalent configuration."""

    kind = ResourceKind.CONTAINERS

    def __init__(
        self,
        source: SourceRuntime,
        target: TargetRuntime,
        archive: ImageArchiveTransfer,
        image_namespace: str = DEFAULT_IMAGE_NAMESPACE,
        path_exists: Callable[[str], bool] = os.path.exists,
    ):
        super().__init__()
        self.source = source
        self.target = target
        self.archive = archive
        self.image_namespace = image_namespace
        self.path_exists = path_exists

    async def enumerate(self) -> list[str]:
        return await self.source.list_containers()

    async def migrate_item(self, name: str) -> ItemResult:
        if await self.target.container_exists(name):
            return self.skipped(name, "already exists on the target runtime")

        inspect = await self.capture(name)
        image_ref = snapshot_image_ref(name, self.image_namespace)
        await self.freeze(name, image_ref)

        snapshot = build_snapshot(name, inspect, self.image_namespace, self.path_exists)
        self.logger.debug(
            "Translated container configuration",
            name=name,
            restart_policy=snapshot.restart_policy.value,
            mounts=len(snapshot.mounts),
            ports=len(snapshot.ports),
            networks=len(snapshot.networks),
        )

        await self.recreate(snapshot)
        await self.restore_state(snapshot)
        return self.migrated(name, "running" if snapshot.was_running else "stopped")

    async def capture(self, name: str) -> ContainerInspect:
        """Record the container's configuration before any stage changes it."""
        inspect = await self.source.inspect_container(name)
        self.logger.debug(
            "Captured container state",
            name=name,
            running=inspect.state.running,
            restart_policy=inspect.host_config.restart_policy.name,
        )
        return inspect

    async def freeze(self, name: str, image_ref: str) -> None:
        """Commit the container to ``image_ref`` and load that image on the target.

        Raises:
            CommitError: If the commit fails
            ExportError: If the image cannot be saved to an archive
            ImageImportError: If the target cannot load the archive
        """
        try:
            await self.source.commit(name, image_ref)
        except RuntimeCommandError as e:
            raise CommitError(f"Failed to commit container {name}: {e}") from e

        await self.archive.transfer(image_ref, archive_name=name.lower())

    async def recreate(self, snapshot: ContainerSnapshot) -> str:
        try:
            container_id = await self.target.run_container(snapshot.run_args())
        except RuntimeCommandError as e:
            raise CreationError(f"Failed to create container {snapshot.name}: {e}") from e
        self.logger.debug("Container created", name=snapshot.name, container_id=container_id)
        return container_id

    async def restore_state(self, snapshot: ContainerSnapshot) -> None:
        """Stop the new container when the source one was not running.

        ``run`` always starts the container, so only the stopped case needs work.
        """
        if snapshot.was_running:
            return
        try:
            await self.target.stop_container(snapshot.name)
        except RuntimeCommandError as e:
            raise RuntimeCommandError(
                f"Container {snapshot.name} was created but could not be stopped: {e}"
            ) from e
