"""Volume migration: create each named volume on the target and copy its data."""

import posixpath

from ..constants import VOLUME_DATA_DIR
from ..core.exceptions import CreationError, RuntimeCommandError
from ..core.runtime import SourceRuntime, TargetRuntime
from ..core.transfer import RsyncTransfer
from ..models.enums import ResourceKind
from ..models.results import ItemResult
from .base import BaseMigrator


class VolumeMigrator(BaseMigrator):
    """Recreate named volumes on the target and rsync their contents across."""

    kind = ResourceKind.VOLUMES

    def __init__(
        self,
        source: SourceRuntime,
        target: TargetRuntime,
        rsync: RsyncTransfer,
        source_volumes_path: str,
    ):
        super().__init__()
        self.source = source
        self.target = target
        self.rsync = rsync
        self.source_volumes_path = source_volumes_path
        self._target_volumes_path: str | None = None

    async def enumerate(self) -> list[str]:
        # Resolve the target store up front; without it no volume can be copied
        self._target_volumes_path = await self.target.volume_path()
        self.logger.debug("Resolved target volume store", path=self._target_volumes_path)
        return await self.source.list_volumes()

    def data_paths(self, name: str) -> tuple[str, str]:
        """Source and target data directories for a volume.

        The source path ends with a slash so rsync copies the directory's
        contents rather than the directory itself.
        """
        if self._target_volumes_path is None:
            raise RuntimeError("Target volume store has not been resolved")
        source = posixpath.join(self.source_volumes_path, name, VOLUME_DATA_DIR) + "/"
        target = posixpath.join(self._target_volumes_path, name, VOLUME_DATA_DIR)
        return source, target

    async def migrate_item(self, name: str) -> ItemResult:
        try:
            await self.target.create_volume(name)
        except RuntimeCommandError as e:
            raise CreationError(f"Failed to create volume {name}: {e}") from e

        source_path, target_path = self.data_paths(name)
        result = await self.rsync.transfer(source_path, target_path)
        files = result["stats"]["files_transferred"]
        return self.migrated(name, f"{files} files copied")
