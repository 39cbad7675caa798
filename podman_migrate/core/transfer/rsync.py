"""Rsync copy of volume data between the source and target volume stores."""

import os
import re
from typing import Any

import structlog

from ..exceptions import RuntimeCommandError, TransferError
from ..settings import RSYNC_TIMEOUT
from ..subprocess_manager import SubprocessManager, get_subprocess_manager

logger = structlog.get_logger()


class RsyncTransfer:
    """Archive-mode local copy with ownership remapping for rootless targets."""

    def __init__(
        self,
        rsync_bin: str = "rsync",
        use_sudo: bool = True,
        subprocess_manager: SubprocessManager | None = None,
    ):
        self.logger = logger.bind(component="rsync_transfer")
        self.rsync_bin = rsync_bin
        self.use_sudo = use_sudo
        self._subprocess = subprocess_manager or get_subprocess_manager()

    def build_command(self, source_path: str, target_path: str) -> list[str]:
        """Build the rsync command line, one option per argument.

        When the invoking user is not root the copied files are chowned to
        that user so a rootless target runtime can read them.
        """
        cmd = [self.rsync_bin, "-a", "--stats"]
        uid, gid = os.getuid(), os.getgid()
        if uid != 0:
            cmd.append(f"--chown={uid}:{gid}")
        cmd.extend([source_path, target_path])

        if self.use_sudo and os.geteuid() != 0:
            cmd.insert(0, "sudo")
        return cmd

    async def transfer(self, source_path: str, target_path: str) -> dict[str, Any]:
        """Copy the contents of ``source_path`` into ``target_path``.

        Args:
            source_path: Source directory; a trailing slash copies its contents
            target_path: Destination directory

        Returns:
            Transfer result with statistics

        Raises:
            TransferError: If rsync fails or times out
        """
        cmd = self.build_command(source_path, target_path)

        self.logger.info("Starting rsync transfer", source=source_path, target=target_path)

        try:
            result = await self._subprocess.run_command(cmd, timeout=RSYNC_TIMEOUT, check=False)
        except RuntimeCommandError as e:
            raise TransferError(str(e)) from e

        if not result.success:
            raise TransferError(f"Rsync failed (exit {result.returncode}): {result.error_message}")

        return {
            "success": True,
            "source": source_path,
            "target": target_path,
            "stats": self._parse_stats(result.stdout),
        }

    def _parse_stats(self, output: str) -> dict[str, Any]:
        """Parse rsync ``--stats`` output for transfer statistics."""
        stats: dict[str, Any] = {
            "files_transferred": 0,
            "total_size": 0,
        }

        for line in output.split("\n"):
            if (
                "Number of files transferred:" in line
                or "Number of regular files transferred:" in line
            ):
                match = re.search(r"transferred: ([\d,]+)", line)
                if match:
                    stats["files_transferred"] = int(match.group(1).replace(",", ""))
            elif "Total transferred file size:" in line:
                match = re.search(r"([\d,]+) bytes", line)
                if match:
                    stats["total_size"] = int(match.group(1).replace(",", ""))

        return stats
