"""Image transfer between runtimes through a transient archive file.

The source runtime saves the image to ``<archive_dir>/<name>.tar``, the
target runtime loads it, and the file is removed whatever the outcome.
"""

from pathlib import Path

import structlog

from ...constants import ARCHIVE_SUFFIX
from ..exceptions import ExportError, ImageImportError, RuntimeCommandError
from ..runtime import SourceRuntime, TargetRuntime
from ..translation import archive_filename

logger = structlog.get_logger()


class ImageArchiveTransfer:
    """Move images from the source runtime to the target via save/load."""

    def __init__(self, source: SourceRuntime, target: TargetRuntime, archive_dir: str | Path = "."):
        self.logger = logger.bind(component="image_archive")
        self.source = source
        self.target = target
        self.archive_dir = Path(archive_dir)

    def archive_path(self, archive_name: str) -> Path:
        """Location of the transient archive for an image reference or name."""
        return self.archive_dir / archive_filename(archive_name)

    async def transfer(self, image_ref: str, archive_name: str | None = None) -> bool:
        """Save ``image_ref`` on the source and load it into the target.

        Args:
            image_ref: Image reference known to the source runtime
            archive_name: Base for the archive file name (defaults to image_ref)

        Returns:
            True if the archive was removed afterwards, False if it was left behind

        Raises:
            ExportError: If the source runtime could not save the image
            ImageImportError: If the target runtime could not load the archive
        """
        archive = self.archive_path(archive_name or image_ref)
        try:
            try:
                await self.source.save_image(image_ref, str(archive))
            except RuntimeCommandError as e:
                raise ExportError(f"Failed to save {image_ref}: {e}") from e

            try:
                await self.target.load_image(str(archive))
            except RuntimeCommandError as e:
                raise ImageImportError(f"Failed to load {image_ref}: {e}") from e

            self.logger.debug("Image transferred", image=image_ref, archive=str(archive))
        finally:
            removed = self.cleanup_archive(archive)
        return removed

    def cleanup_archive(self, archive: Path) -> bool:
        """Remove a transient archive; a missing file counts as removed.

        Returns:
            False if the file could not be deleted
        """
        if archive.suffix != ARCHIVE_SUFFIX:
            self.logger.warning("Refusing to delete non-archive file", archive=str(archive))
            return False

        try:
            archive.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning("Archive cleanup failed", archive=str(archive), error=str(e))
            return False
        return True
