"""Image migration: save each tagged source image and load it into the target."""

from ..constants import UNTAGGED_IMAGE
from ..core.runtime import SourceRuntime
from ..core.transfer import ImageArchiveTransfer
from ..models.enums import ResourceKind
from ..models.results import ItemResult
from .base import BaseMigrator


class ImageMigrator(BaseMigrator):
    """Copy every tagged image from the source runtime to the target."""

    kind = ResourceKind.IMAGES

    def __init__(self, source: SourceRuntime, archive: ImageArchiveTransfer):
        super().__init__()
        self.source = source
        self.archive = archive

    async def enumerate(self) -> list[str]:
        images = await self.source.list_images()
        return [image for image in images if image != UNTAGGED_IMAGE]

    async def migrate_item(self, name: str) -> ItemResult:
        removed = await self.archive.transfer(name)
        if not removed:
            return self.migrated(name, "archive file could not be removed")
        return self.migrated(name)
