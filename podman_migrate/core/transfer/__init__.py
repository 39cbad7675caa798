"""Transfer modules for moving image and volume data between runtimes."""

from .archive import ImageArchiveTransfer  # noqa: F401
from .rsync import RsyncTransfer  # noqa: F401

__all__ = [
    "ImageArchiveTransfer",
    "RsyncTransfer",
]
